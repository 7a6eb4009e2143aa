"""
Inference Context

Responsibilities:
- Detects, starts, and (optionally) stops the local inference backend
- Sends generation requests and classifies failures
- Retries failed generation requests with a fixed delay

Owns: Backend process lifecycle, wire protocol, error taxonomy, retry policy
Never: Builds prompts or writes output documents
"""

from scribe.contexts.inference.client import GenerationClient, GenerationOptions
from scribe.contexts.inference.exceptions import (
    BackendStartTimeout,
    BackendUnavailable,
    BackendUnreachable,
    GenerationError,
    GenerationTimeout,
    InvalidResponse,
    ModelNotFound,
    UpstreamError,
)
from scribe.contexts.inference.retry import RetryPolicy, generate_with_retry
from scribe.contexts.inference.service_manager import (
    EnsureResult,
    InferenceServiceManager,
    ServiceHandle,
    ServiceState,
)

__all__ = [
    # Backend lifecycle
    "InferenceServiceManager",
    "ServiceHandle",
    "ServiceState",
    "EnsureResult",
    # Generation
    "GenerationClient",
    "GenerationOptions",
    "RetryPolicy",
    "generate_with_retry",
    # Errors
    "GenerationError",
    "BackendUnavailable",
    "BackendStartTimeout",
    "BackendUnreachable",
    "GenerationTimeout",
    "InvalidResponse",
    "UpstreamError",
    "ModelNotFound",
]
