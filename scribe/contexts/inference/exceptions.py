"""
Error taxonomy for the inference backend.

Every failure of backend startup or a generation request maps to one class
here, so callers can tell "backend never came up" from "model missing" from
"request timed out" without parsing messages. All are GenerationError, which
is what the retry policy repeats on.
"""

from typing import Optional

from scribe.utils.exceptions import ScribeError


class GenerationError(ScribeError):
    """Base class for backend lifecycle and generation failures."""

    pass


class BackendUnavailable(GenerationError):
    """
    Backend is not reachable and could not (or may not) be started.

    Attributes:
        base_url: Backend base URL that was probed
    """

    def __init__(self, base_url: str, detail: Optional[str] = None):
        self.base_url = base_url
        message = f"Inference backend is not running at {base_url}."
        if detail:
            message = f"{message} {detail}"
        super().__init__(message)


class BackendStartTimeout(GenerationError):
    """
    Backend was spawned but did not become ready before the deadline.

    Attributes:
        base_url: Backend base URL that was polled
        timeout_s: Readiness deadline in seconds
        stderr_tail: Last lines of the process stderr, if it exited early
    """

    def __init__(self, base_url: str, timeout_s: float, stderr_tail: str = ""):
        self.base_url = base_url
        self.timeout_s = timeout_s
        self.stderr_tail = stderr_tail
        if stderr_tail:
            message = (
                f"Inference backend exited before becoming ready at {base_url}:\n{stderr_tail}"
            )
        else:
            message = f"Inference backend did not become ready at {base_url} within {timeout_s:g}s"
        super().__init__(message)


class BackendUnreachable(GenerationError):
    """
    Connection refused while sending a generation request.

    Attributes:
        base_url: Backend base URL that refused the connection
    """

    def __init__(self, base_url: str):
        self.base_url = base_url
        super().__init__(
            f"Cannot connect to the inference backend at {base_url}. Is it running? "
            "Start it with `ollama serve`."
        )


class GenerationTimeout(GenerationError):
    """
    Generation request exceeded its time budget and was aborted.

    Attributes:
        timeout_s: Time budget in seconds
    """

    def __init__(self, timeout_s: float):
        self.timeout_s = timeout_s
        super().__init__(f"Generation request timed out after {timeout_s:g}s")


class InvalidResponse(GenerationError):
    """
    Backend answered 200 with a body that is not a JSON object.

    Attributes:
        body_excerpt: Leading part of the body
    """

    def __init__(self, detail: str, body_excerpt: str = ""):
        self.body_excerpt = body_excerpt
        super().__init__(f"Inference backend returned invalid JSON: {detail}")


class UpstreamError(GenerationError):
    """
    Backend answered with a non-success status.

    Attributes:
        status_code: HTTP status code
        body_excerpt: Leading part of the response body
        path: Request path that failed
    """

    def __init__(self, status_code: int, body_excerpt: str, path: str = "/api/generate"):
        self.status_code = status_code
        self.body_excerpt = body_excerpt
        self.path = path
        super().__init__(self._message())

    def _message(self) -> str:
        return f"Inference backend {self.path} returned {self.status_code}: {self.body_excerpt}"


class ModelNotFound(UpstreamError):
    """
    Backend answered 404 because the requested model is not installed.

    Attributes:
        model: Requested model name
    """

    def __init__(self, model: str, body_excerpt: str, path: str = "/api/generate"):
        self.model = model
        super().__init__(404, body_excerpt, path)

    def _message(self) -> str:
        return (
            f"{super()._message()}\n"
            f"Pull a model first, e.g.: ollama pull {self.model}. "
            "Or set OLLAMA_MODEL to a model you have."
        )
