"""
Shared utilities for SCRIBE.

Common functionality used across contexts:
- Settings loaded from the environment
- Logger setup with provenance
- Timestamps for log directories and dated file names
"""

from scribe.utils.config import Settings, load_settings
from scribe.utils.timestamp import now, yymmdd

__all__ = ["Settings", "load_settings", "now", "yymmdd"]
