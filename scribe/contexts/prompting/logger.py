"""
Prompting context logger.

Provides logging interface for the prompting context with automatic [prompt] prefix.
All prompting modules should import from this module, not from loguru directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[prompt]"


def _log_info(message: str) -> None:
    """Log info message with [prompt] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [prompt] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [prompt] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [prompt] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [prompt] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")
