"""
Generation client for an Ollama-compatible backend.

One call to generate() is one POST to /api/generate with stream disabled.
No retries happen here (see retry.py); every failure is raised as a typed
GenerationError.

Wire format:
    request:  {"model", "prompt", "stream": false,
               "options": {"num_predict", "temperature", "stop"}}
    response: {"response": "...", "done": true, ...}
"""

import json
from dataclasses import dataclass, replace
from typing import Optional, Tuple

import httpx

from scribe.contexts.inference.exceptions import (
    BackendUnreachable,
    GenerationTimeout,
    InvalidResponse,
    ModelNotFound,
    UpstreamError,
)
from scribe.contexts.inference.logger import _log_debug
from scribe.utils.config import Settings


@dataclass(frozen=True)
class GenerationOptions:
    """
    Per-request generation parameters.

    Attributes:
        model: Model identifier known to the backend
        max_output_tokens: Upper bound on generated tokens (sent as num_predict)
        temperature: Sampling temperature
        stop: Stop sequences
        timeout_s: Time budget for the whole request
    """

    model: str = "llama3.2"
    max_output_tokens: int = 1024
    temperature: float = 0.7
    stop: Tuple[str, ...] = ("\n\n\n", "---")
    timeout_s: float = 120.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "GenerationOptions":
        return cls(
            model=settings.model,
            max_output_tokens=settings.max_output_tokens,
            temperature=settings.temperature,
            stop=tuple(settings.stop),
            timeout_s=settings.generate_timeout_s,
        )

    def with_overrides(self, **changes) -> "GenerationOptions":
        """Copy with some fields replaced (None values are ignored)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def payload(self, prompt: str) -> dict:
        return {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "num_predict": self.max_output_tokens,
                "temperature": self.temperature,
                "stop": list(self.stop),
            },
        }


def _is_missing_model(status_code: int, body: str, model: str) -> bool:
    lowered = body.lower()
    model_base = model.split(":")[0].lower()
    return status_code == 404 and "not found" in lowered and (model_base in lowered or "model" in lowered)


class GenerationClient:
    """
    Single-attempt client for the backend's generation endpoint.

    Args:
        settings: Pipeline settings (base URL, model, generation defaults)
        http_client: Injected httpx.Client (tests pass one with a MockTransport)

    Example:
        >>> with GenerationClient(settings) as client:
        ...     text = client.generate(prompt)
    """

    def __init__(self, settings: Settings, http_client: Optional[httpx.Client] = None):
        self.settings = settings
        self.base_url = settings.base_url
        self.default_options = GenerationOptions.from_settings(settings)
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client()

    @property
    def generate_url(self) -> str:
        return f"{self.base_url}{self.settings.generate_path}"

    def generate(self, prompt: str, options: Optional[GenerationOptions] = None) -> str:
        """
        Send one generation request and return the trimmed text.

        Args:
            prompt: Full prompt text
            options: Generation parameters (default: from settings)

        Returns:
            Generated text, stripped; "" if the backend sent no response field

        Raises:
            BackendUnreachable: Connection refused or dropped
            GenerationTimeout: Request exceeded options.timeout_s
            ModelNotFound: 404 naming a model the backend does not have
            UpstreamError: Any other non-200 status
            InvalidResponse: 200 with a body that is not a JSON object
        """
        options = options or self.default_options
        _log_debug(
            f"POST {self.generate_url} model={options.model} prompt={len(prompt)} chars "
            f"timeout={options.timeout_s:g}s"
        )

        try:
            response = self._http.post(
                self.generate_url,
                json=options.payload(prompt),
                timeout=httpx.Timeout(options.timeout_s),
            )
        except httpx.TimeoutException as e:
            raise GenerationTimeout(options.timeout_s) from e
        except httpx.TransportError as e:
            raise BackendUnreachable(self.base_url) from e

        body = response.text
        excerpt = body[: self.settings.error_excerpt_chars]

        if response.status_code != 200:
            if _is_missing_model(response.status_code, body, options.model):
                raise ModelNotFound(options.model, excerpt, self.settings.generate_path)
            raise UpstreamError(response.status_code, excerpt, self.settings.generate_path)

        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise InvalidResponse(str(e), excerpt) from e
        if not isinstance(data, dict):
            raise InvalidResponse(f"expected a JSON object, got {type(data).__name__}", excerpt)

        text = data.get("response")
        if text is None:
            _log_debug("Backend response has no 'response' field; treating as empty")
            return ""
        return str(text).strip()

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "GenerationClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
