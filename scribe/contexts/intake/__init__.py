"""
Intake Context

Responsibilities:
- Represents job records and applicant context as validated, immutable records
- Loads job data from JSON files
- Extracts plain text from resumes and sample cover letters (.txt, .docx, .pdf)
- Loads applicant details (name, last name, date of birth)

Owns: Input validation, document text extraction
Never: Builds prompts or talks to the inference backend
"""

from scribe.contexts.intake.document_reader import (
    SUPPORTED_DOC_EXTENSIONS,
    load_applicant_details,
    load_resume,
    load_sample_cover_letter,
    read_text,
)
from scribe.contexts.intake.exceptions import InputError
from scribe.contexts.intake.job_data_structure import (
    ApplicantDetails,
    GenerationContext,
    JobEntry,
    JobRecord,
)
from scribe.contexts.intake.job_loader import load_job_data

__all__ = [
    "ApplicantDetails",
    "GenerationContext",
    "InputError",
    "JobEntry",
    "JobRecord",
    "SUPPORTED_DOC_EXTENSIONS",
    "load_applicant_details",
    "load_job_data",
    "load_resume",
    "load_sample_cover_letter",
    "read_text",
]
