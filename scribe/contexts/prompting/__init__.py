"""
Prompting Context

Responsibilities:
- Holds the cover letter prompt template (built-in and user-editable file)
- Assembles bounded prompts from job records and applicant context

Owns: Prompt template, truncation caps, placeholder rules
Never: Reads documents from disk or calls the inference backend
"""

from scribe.contexts.prompting.prompt_builder import (
    build_prompt,
    ensure_prompt_file,
    load_prompt_template,
)
from scribe.contexts.prompting.template import PromptTemplate

__all__ = ["PromptTemplate", "build_prompt", "ensure_prompt_file", "load_prompt_template"]
