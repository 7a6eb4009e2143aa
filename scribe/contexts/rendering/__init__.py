"""
Rendering Context

Responsibilities:
- Normalizes raw model output into clean prose
- Derives deterministic folder names and file basenames
- Persists each cover letter as .txt, .docx and .pdf

Owns: Output normalization, naming policy, document writers
Never: Calls the inference backend or changes letter content beyond normalization
"""

from scribe.contexts.rendering.naming import (
    NamingScheme,
    build_basename,
    company_slug,
    dated_basename,
    identity_basename,
    job_folder_name,
)
from scribe.contexts.rendering.postprocess import normalize
from scribe.contexts.rendering.writer import CoverLetterArtifact, pdf_page_count, persist, write_single

__all__ = [
    "CoverLetterArtifact",
    "NamingScheme",
    "build_basename",
    "company_slug",
    "dated_basename",
    "identity_basename",
    "job_folder_name",
    "normalize",
    "pdf_page_count",
    "persist",
    "write_single",
]
