"""Unit tests for settings loading."""

from pathlib import Path

import pytest

from scribe.utils.config import Settings, load_settings


@pytest.mark.unit
def test_defaults():
    """Empty environment yields the documented defaults."""
    settings = load_settings(env={})

    assert settings.base_url == "http://localhost:11434"
    assert settings.model == "llama3.2"
    assert settings.backend_command == ("ollama", "serve")
    assert settings.retry_attempts == 2
    assert settings.retry_delay_s == 2.0
    assert settings.output_format == "docx"
    assert settings.naming_scheme == "identity"
    assert settings.stop_backend_on_exit is False


@pytest.mark.unit
def test_generation_defaults_from_yaml():
    settings = load_settings(env={})

    assert settings.max_output_tokens == 1024
    assert settings.temperature == 0.7
    assert settings.stop == ("\n\n\n", "---")
    assert settings.generate_timeout_s == 120.0
    assert settings.ready_timeout_s == 60.0
    assert settings.poll_interval_s == 0.5
    assert settings.generate_path == "/api/generate"


@pytest.mark.unit
def test_base_url_trailing_slash_stripped():
    settings = load_settings(env={"OLLAMA_BASE_URL": "http://gpu-box:11434/"})
    assert settings.base_url == "http://gpu-box:11434"


@pytest.mark.unit
def test_backend_command_split():
    settings = load_settings(env={"OLLAMA_COMMAND": "/opt/ollama/bin/ollama serve"})
    assert settings.backend_command == ("/opt/ollama/bin/ollama", "serve")


@pytest.mark.unit
def test_retry_values_clamped_to_zero():
    settings = load_settings(env={"OLLAMA_RETRY_ATTEMPTS": "-3", "OLLAMA_RETRY_DELAY_MS": "-50"})
    assert settings.retry_attempts == 0
    assert settings.retry_delay_s == 0.0


@pytest.mark.unit
def test_retry_delay_converted_from_ms():
    settings = load_settings(env={"OLLAMA_RETRY_DELAY_MS": "250"})
    assert settings.retry_delay_s == 0.25


@pytest.mark.unit
def test_non_integer_retry_attempts_names_key():
    with pytest.raises(ValueError, match="OLLAMA_RETRY_ATTEMPTS"):
        load_settings(env={"OLLAMA_RETRY_ATTEMPTS": "two"})


@pytest.mark.unit
@pytest.mark.parametrize("value", ["1", "true", "TRUE", "yes"])
def test_stop_backend_flag_truthy(value):
    assert load_settings(env={"COVER_LETTER_STOP_OLLAMA": value}).stop_backend_on_exit is True


@pytest.mark.unit
@pytest.mark.parametrize("value", ["0", "false", ""])
def test_stop_backend_flag_falsy(value):
    assert load_settings(env={"COVER_LETTER_STOP_OLLAMA": value}).stop_backend_on_exit is False


@pytest.mark.unit
def test_invalid_output_format_rejected():
    with pytest.raises(ValueError, match="COVER_LETTER_OUTPUT_FORMAT"):
        load_settings(env={"COVER_LETTER_OUTPUT_FORMAT": "pdf"})


@pytest.mark.unit
def test_naming_scheme_case_insensitive():
    assert load_settings(env={"COVER_LETTER_NAMING": "Dated"}).naming_scheme == "dated"


@pytest.mark.unit
def test_document_directories():
    settings = load_settings(env={"DOCUMENTS_PATH": "/srv/docs"})

    assert settings.resume_dir == Path("/srv/docs/resume")
    assert settings.cover_letter_dir == Path("/srv/docs/coverletter")
    assert settings.applicant_details_dir == Path("/srv/docs/details/applicant-details")


@pytest.mark.unit
def test_resolved_last_name_precedence():
    assert Settings(applicant_name="Jane Q Doe", applicant_last_name="Smith").resolved_last_name() == "Smith"
    assert Settings(applicant_name="Jane Q Doe").resolved_last_name() == "Doe"
    assert Settings().resolved_last_name() == "Applicant"
