"""
Inference context logger.

Provides logging interface for the inference context with automatic [infer] prefix.
All inference modules should import from this module, not from loguru directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[infer]"


def _log_info(message: str) -> None:
    """Log info message with [infer] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [infer] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [infer] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [infer] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [infer] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level inference-specific logging helpers


def log_retry(attempt: int, max_attempts: int, error: Exception, delay_s: float) -> None:
    """Log a failed generation attempt that will be retried."""
    _log_warning(
        f"Generation attempt {attempt}/{max_attempts} failed: {error}. "
        f"Retrying in {delay_s:g}s..."
    )


def log_backend_status(base_url: str, started_by_us: bool, model: str) -> None:
    """Log which backend the run is using."""
    origin = "started by this run" if started_by_us else "already running"
    _log_info(f"Inference backend at {base_url} ({origin})")
    _log_info(f"Model: {model}")


def log_generation_start(position_name: str, company: str, prompt_chars: int) -> None:
    """Log the start of one generation request."""
    _log_info(f"Generating cover letter for: {position_name} at {company}")
    _log_debug(f"Prompt length: {prompt_chars} chars")
