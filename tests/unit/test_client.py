"""Unit tests for the generation client against a mocked backend."""

import json

import httpx
import pytest

from scribe.contexts.inference.client import GenerationClient, GenerationOptions
from scribe.contexts.inference.exceptions import (
    BackendUnreachable,
    GenerationError,
    GenerationTimeout,
    InvalidResponse,
    ModelNotFound,
    UpstreamError,
)


def _client(settings, backend):
    return GenerationClient(settings, http_client=backend.client())


@pytest.mark.unit
def test_success_returns_trimmed_text(settings, fake_backend):
    backend = fake_backend([(200, {"response": "  Hi.  ", "done": True})])
    assert _client(settings, backend).generate("prompt") == "Hi."


@pytest.mark.unit
def test_request_payload(settings, fake_backend):
    backend = fake_backend([(200, {"response": "ok"})])

    _client(settings, backend).generate("Write it.")

    request = backend.generate_requests[0]
    assert str(request.url) == "http://localhost:11434/api/generate"
    body = json.loads(request.content)
    assert body == {
        "model": "llama3.2",
        "prompt": "Write it.",
        "stream": False,
        "options": {"num_predict": 1024, "temperature": 0.7, "stop": ["\n\n\n", "---"]},
    }


@pytest.mark.unit
def test_options_override(settings, fake_backend):
    backend = fake_backend([(200, {"response": "ok"})])
    options = GenerationOptions.from_settings(settings).with_overrides(model="mistral", temperature=None)

    _client(settings, backend).generate("p", options)

    body = json.loads(backend.generate_requests[0].content)
    assert body["model"] == "mistral"
    assert body["options"]["temperature"] == 0.7


@pytest.mark.unit
def test_missing_response_field_is_empty(settings, fake_backend):
    backend = fake_backend([(200, {"done": True})])
    assert _client(settings, backend).generate("p") == ""


@pytest.mark.unit
def test_server_error(settings, fake_backend):
    backend = fake_backend([(500, "oops")])

    with pytest.raises(UpstreamError) as exc_info:
        _client(settings, backend).generate("p")

    error = exc_info.value
    assert error.status_code == 500
    assert error.body_excerpt == "oops"
    assert "500" in str(error)
    assert not isinstance(error, ModelNotFound)


@pytest.mark.unit
def test_error_body_excerpt_bounded(settings, fake_backend):
    backend = fake_backend([(502, "e" * 1000)])

    with pytest.raises(UpstreamError) as exc_info:
        _client(settings, backend).generate("p")

    assert len(exc_info.value.body_excerpt) == 300


@pytest.mark.unit
def test_model_not_found_has_hint(settings, fake_backend):
    backend = fake_backend([(404, {"error": "model 'llama3.2' not found, try pulling it first"})])

    with pytest.raises(ModelNotFound) as exc_info:
        _client(settings, backend).generate("p")

    error = exc_info.value
    assert error.status_code == 404
    assert error.model == "llama3.2"
    assert "ollama pull llama3.2" in str(error)
    assert "OLLAMA_MODEL" in str(error)


@pytest.mark.unit
def test_plain_404_is_upstream_error(settings, fake_backend):
    backend = fake_backend([(404, "404 page")])

    with pytest.raises(UpstreamError) as exc_info:
        _client(settings, backend).generate("p")

    assert not isinstance(exc_info.value, ModelNotFound)


@pytest.mark.unit
def test_invalid_json(settings, fake_backend):
    backend = fake_backend([(200, "<html>proxy</html>")])

    with pytest.raises(InvalidResponse, match="invalid JSON"):
        _client(settings, backend).generate("p")


@pytest.mark.unit
def test_json_array_is_invalid(settings, fake_backend):
    backend = fake_backend([(200, ["not", "an", "object"])])

    with pytest.raises(InvalidResponse):
        _client(settings, backend).generate("p")


@pytest.mark.unit
def test_connection_refused(settings, fake_backend):
    backend = fake_backend([httpx.ConnectError("Connection refused")])

    with pytest.raises(BackendUnreachable) as exc_info:
        _client(settings, backend).generate("p")

    assert "http://localhost:11434" in str(exc_info.value)
    assert "Is it running?" in str(exc_info.value)


@pytest.mark.unit
def test_timeout(settings, fake_backend):
    backend = fake_backend([httpx.ReadTimeout("timed out")])

    with pytest.raises(GenerationTimeout) as exc_info:
        _client(settings, backend).generate("p")

    assert exc_info.value.timeout_s == 120.0
    assert "timed out" in str(exc_info.value)


@pytest.mark.unit
def test_all_failures_are_generation_errors():
    for error_class in (BackendUnreachable, GenerationTimeout, InvalidResponse, UpstreamError, ModelNotFound):
        assert issubclass(error_class, GenerationError)
