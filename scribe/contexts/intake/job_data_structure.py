"""
Job and applicant data structures for the Intake context.

Job-data JSON files use camelCase keys (positionName, ...) as produced by the
scraping collaborator. The factories here validate that shape once, at the
boundary, so downstream contexts can rely on typed, immutable records.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from scribe.contexts.intake.exceptions import InputError

# Wire key -> attribute name
JOB_FIELDS = {
    "company": "company",
    "positionName": "position_name",
    "location": "location",
    "type": "type",
    "description": "description",
}


def _optional_str(data: Mapping[str, Any], key: str, source: Optional[str]) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InputError(
            f"Expected a string, got {type(value).__name__}", field_name=key, source=source
        )
    return value


@dataclass(frozen=True)
class JobRecord:
    """
    One job posting, as consumed by the prompt assembler.

    Attributes:
        company: Hiring company name
        position_name: Role title
        location: Job location
        type: Employment type (e.g., "Full Time")
        description: Full job description, unbounded
        link: Posting URL, if known
        id: Posting identifier, if known
    """

    company: str = ""
    position_name: str = ""
    location: str = ""
    type: str = ""
    description: str = ""
    link: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, source: Optional[str] = None) -> "JobRecord":
        """
        Build a JobRecord from a job-data dict.

        Args:
            data: Parsed job-data JSON object
            source: Where the data came from (used in error messages)

        Raises:
            InputError: If data is not an object or a field has the wrong type
        """
        if not isinstance(data, Mapping):
            raise InputError(
                f"Job data must be a JSON object, got {type(data).__name__}", source=source
            )

        values = {}
        for wire_key, attr in JOB_FIELDS.items():
            values[attr] = _optional_str(data, wire_key, source) or ""

        raw_id = data.get("id")
        # bool is an int subclass and never a valid id
        if isinstance(raw_id, bool) or (
            raw_id is not None and not isinstance(raw_id, (str, int))
        ):
            raise InputError(
                f"Expected a string or integer id, got {type(raw_id).__name__}",
                field_name="id",
                source=source,
            )
        job_id = str(raw_id).strip() if raw_id is not None else None

        return cls(
            **values,
            link=_optional_str(data, "link", source),
            id=job_id or None,
        )


@dataclass(frozen=True)
class GenerationContext:
    """
    Applicant context supplied once per invocation.

    All fields are optional; the prompt assembler renders missing values as a
    placeholder rather than an empty string.
    """

    applicant_name: Optional[str] = None
    resume_snippet: Optional[str] = None
    sample_cover_letter: Optional[str] = None

    def __post_init__(self):
        for name in ("applicant_name", "resume_snippet", "sample_cover_letter"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise InputError(
                    f"Expected a string, got {type(value).__name__}", field_name=name
                )


@dataclass(frozen=True)
class ApplicantDetails:
    """Applicant details loaded from applicant.json (all optional)."""

    applicant_name: Optional[str] = None
    last_name: Optional[str] = None
    dob: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ApplicantDetails":
        def clean(key: str) -> Optional[str]:
            value = data.get(key)
            if value is None:
                return None
            value = str(value).strip()
            return value or None

        return cls(
            applicant_name=clean("applicantName"),
            last_name=clean("lastName"),
            dob=clean("dob"),
        )


@dataclass(frozen=True)
class JobEntry:
    """A job record together with the file it was loaded from."""

    job: JobRecord
    path: Union[Path, None] = None
