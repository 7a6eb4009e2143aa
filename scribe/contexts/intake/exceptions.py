"""Custom exceptions for the intake context."""

from typing import Optional

from scribe.utils.exceptions import ScribeError


class InputError(ScribeError, ValueError):
    """
    Exception raised when a job record or generation context is malformed.

    Attributes:
        message: Error description
        field_name: Offending field, if one can be named
        source: File the bad input came from, if known
    """

    def __init__(self, message: str, field_name: Optional[str] = None, source: Optional[str] = None):
        self.message = message
        self.field_name = field_name
        self.source = source

        parts = [message]
        if field_name:
            parts.append(f"Field: {field_name}")
        if source:
            parts.append(f"Source: {source}")

        super().__init__("\n".join(parts))
