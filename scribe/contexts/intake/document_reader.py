"""
Plain-text extraction for resumes and sample cover letters.

Supported formats: .txt, .docx, .pdf. Reading never raises: a missing,
unsupported, or unreadable file yields "" and a logged warning, so the prompt
degrades to its placeholder instead of aborting the run.
"""

import json
from pathlib import Path
from typing import Iterable, Optional, Union

import pdfplumber
from docx import Document

from scribe.contexts.intake.job_data_structure import ApplicantDetails
from scribe.contexts.intake.logger import _log_debug, _log_warning

SUPPORTED_DOC_EXTENSIONS = (".txt", ".docx", ".pdf")

# Checked in order before falling back to any file containing "sample"
SAMPLE_COVER_LETTER_NAMES = (
    "sample.txt",
    "sample.docx",
    "sample.pdf",
    "sample-cover-letter.txt",
    "sample-cover-letter.docx",
    "sample-cover-letter.pdf",
    "example.txt",
    "example.docx",
    "example.pdf",
    "example-cover-letter.txt",
    "example-cover-letter.docx",
    "example-cover-letter.pdf",
)

PREFERRED_DETAILS_FILE = "applicant.json"


def _read_docx(path: Path) -> str:
    document = Document(str(path))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def _read_pdf(path: Path) -> str:
    with pdfplumber.open(path) as pdf:
        return "\n".join(page.extract_text() or "" for page in pdf.pages)


def read_text(path: Union[str, Path]) -> str:
    """
    Extract plain text from a .txt, .docx or .pdf file.

    Args:
        path: File to read

    Returns:
        Stripped text, or "" if the file is missing, unsupported, or unreadable
    """
    path = Path(path)
    if not path.is_file():
        _log_warning(f"Document not found: {path}")
        return ""

    suffix = path.suffix.lower()
    try:
        if suffix == ".txt":
            text = path.read_text(encoding="utf-8")
        elif suffix == ".docx":
            text = _read_docx(path)
        elif suffix == ".pdf":
            text = _read_pdf(path)
        else:
            _log_warning(f"Unsupported document format '{suffix}': {path}")
            return ""
    except Exception as e:
        # python-docx and pdfplumber raise a wide range of parser errors on corrupt input
        _log_warning(f"Could not read {path}: {e}")
        return ""

    return text.strip()


def _supported_files(directory: Path) -> list:
    if not directory.is_dir():
        return []
    return sorted(
        p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in SUPPORTED_DOC_EXTENSIONS
    )


def load_resume(resume_path: Optional[Union[str, Path]] = None, resume_dir: Path = None) -> str:
    """
    Load resume text from an explicit path or the resume directory.

    With no explicit path, the first supported file (alphabetically) in
    resume_dir is used. Returns "" when nothing is found.
    """
    if resume_path:
        return read_text(resume_path)

    if resume_dir is None:
        return ""

    files = _supported_files(Path(resume_dir))
    if not files:
        _log_debug(f"No resume found in {resume_dir}")
        return ""
    return read_text(files[0])


def load_sample_cover_letter(
    cover_letter_dir: Path, names: Iterable[str] = SAMPLE_COVER_LETTER_NAMES
) -> str:
    """
    Load a sample cover letter used to steer tone and format.

    Looks for the fixed sample names first, then any supported file whose
    name contains "sample". Returns "" when none is found.
    """
    directory = Path(cover_letter_dir)
    if not directory.is_dir():
        return ""

    for name in names:
        candidate = directory / name
        if candidate.is_file():
            text = read_text(candidate)
            if text:
                return text

    for candidate in _supported_files(directory):
        if "sample" in candidate.name.lower():
            return read_text(candidate)

    return ""


def load_applicant_details(details_dir: Path) -> ApplicantDetails:
    """
    Load applicant details (name, last name, date of birth) from JSON.

    Prefers applicant.json; otherwise the first .json file alphabetically.
    Missing or malformed files yield empty details.
    """
    directory = Path(details_dir)
    if not directory.is_dir():
        return ApplicantDetails()

    preferred = directory / PREFERRED_DETAILS_FILE
    if preferred.is_file():
        details_file = preferred
    else:
        candidates = sorted(directory.glob("*.json"))
        if not candidates:
            return ApplicantDetails()
        details_file = candidates[0]

    try:
        data = json.loads(details_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        _log_warning(f"Could not read applicant details from {details_file}: {e}")
        return ApplicantDetails()

    if not isinstance(data, dict):
        _log_warning(f"Applicant details in {details_file} are not a JSON object")
        return ApplicantDetails()

    return ApplicantDetails.from_dict(data)
