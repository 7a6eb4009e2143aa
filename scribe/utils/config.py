"""
Runtime settings for the cover letter pipeline.

Backend, model, retry, applicant, and path settings come from environment
variables (optionally via a .env file). Tuning defaults for generation and
backend lifecycle come from scribe/config/generation.yaml.

Usage:
    from scribe.utils.config import load_settings

    settings = load_settings()
    settings.base_url          # "http://localhost:11434"
    settings.retry_attempts    # 2
"""

import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()

GENERATION_DEFAULTS_PATH = Path(__file__).resolve().parent.parent / "config" / "generation.yaml"

DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_MODEL = "llama3.2"
DEFAULT_COMMAND = "ollama serve"
OUTPUT_FORMATS = ("txt", "docx")
NAMING_SCHEMES = ("dated", "identity")
TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Container for pipeline configuration."""

    # Backend
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    backend_command: Tuple[str, ...] = tuple(shlex.split(DEFAULT_COMMAND))
    stop_backend_on_exit: bool = False
    probe_timeout_s: float = 3.0
    ready_timeout_s: float = 60.0
    poll_interval_s: float = 0.5
    terminate_grace_s: float = 5.0
    generate_path: str = "/api/generate"

    # Generation
    max_output_tokens: int = 1024
    temperature: float = 0.7
    stop: Tuple[str, ...] = ("\n\n\n", "---")
    generate_timeout_s: float = 120.0
    error_excerpt_chars: int = 300
    retry_attempts: int = 2
    retry_delay_s: float = 2.0

    # Prompt bounds
    description_max_chars: int = 12000
    resume_max_chars: int = 3000

    # Applicant and output
    applicant_name: Optional[str] = None
    applicant_last_name: Optional[str] = None
    output_format: str = "docx"
    naming_scheme: str = "identity"

    # Paths
    documents_path: Path = field(default_factory=lambda: Path("data/documents"))
    prompt_template_path: Path = field(
        default_factory=lambda: Path("data/prompts/cover_letter_default.txt")
    )
    job_data_path: Path = field(default_factory=lambda: Path("data/job-data"))
    logs_path: Path = field(default_factory=lambda: Path("outs/logs"))

    @property
    def resume_dir(self) -> Path:
        return self.documents_path / "resume"

    @property
    def cover_letter_dir(self) -> Path:
        return self.documents_path / "coverletter"

    @property
    def applicant_details_dir(self) -> Path:
        return self.documents_path / "details" / "applicant-details"

    def resolved_last_name(self) -> str:
        """
        Applicant last name for file naming.

        APPLICANT_LAST_NAME wins, then the last token of APPLICANT_NAME, then "Applicant".
        """
        if self.applicant_last_name and self.applicant_last_name.strip():
            return self.applicant_last_name.strip()
        if self.applicant_name and self.applicant_name.strip():
            return self.applicant_name.split()[-1]
        return "Applicant"


def _read_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None


def _read_choice(env: Mapping[str, str], key: str, default: str, choices: Tuple[str, ...]) -> str:
    value = (env.get(key) or default).strip().lower()
    if value not in choices:
        raise ValueError(f"{key} must be one of {', '.join(choices)}; got {value!r}")
    return value


def _optional(env: Mapping[str, str], key: str) -> Optional[str]:
    value = env.get(key)
    return value.strip() if value and value.strip() else None


def load_generation_defaults(path: Path = GENERATION_DEFAULTS_PATH) -> dict:
    """Load generation.yaml into a plain dict."""
    return OmegaConf.to_container(OmegaConf.load(path), resolve=True)


def load_settings(
    env: Optional[Mapping[str, str]] = None,
    defaults_path: Path = GENERATION_DEFAULTS_PATH,
) -> Settings:
    """
    Load settings from the environment and generation defaults.

    Args:
        env: Mapping to read instead of os.environ (tests pass a dict)
        defaults_path: Path to the generation defaults YAML

    Returns:
        Settings populated with configuration values

    Raises:
        ValueError: If a numeric or enumerated value is malformed
    """
    if env is None:
        env = os.environ

    defaults = load_generation_defaults(defaults_path)
    backend = defaults.get("backend", {})
    generation = defaults.get("generation", {})
    prompt = defaults.get("prompt", {})

    base_url = (env.get("OLLAMA_BASE_URL") or DEFAULT_BASE_URL).strip().rstrip("/")
    command = tuple(shlex.split(env.get("OLLAMA_COMMAND") or DEFAULT_COMMAND))
    if not command:
        raise ValueError("OLLAMA_COMMAND must not be empty")

    return Settings(
        base_url=base_url,
        model=(env.get("OLLAMA_MODEL") or DEFAULT_MODEL).strip(),
        backend_command=command,
        stop_backend_on_exit=(env.get("COVER_LETTER_STOP_OLLAMA") or "").strip().lower() in TRUTHY,
        probe_timeout_s=float(backend.get("probe_timeout_s", 3.0)),
        ready_timeout_s=float(backend.get("ready_timeout_s", 60.0)),
        poll_interval_s=float(backend.get("poll_interval_s", 0.5)),
        terminate_grace_s=float(backend.get("terminate_grace_s", 5.0)),
        generate_path=backend.get("generate_path", "/api/generate"),
        max_output_tokens=int(generation.get("max_output_tokens", 1024)),
        temperature=float(generation.get("temperature", 0.7)),
        stop=tuple(generation.get("stop", ["\n\n\n", "---"])),
        generate_timeout_s=float(generation.get("timeout_s", 120.0)),
        error_excerpt_chars=int(generation.get("error_excerpt_chars", 300)),
        retry_attempts=max(0, _read_int(env, "OLLAMA_RETRY_ATTEMPTS", 2)),
        retry_delay_s=max(0, _read_int(env, "OLLAMA_RETRY_DELAY_MS", 2000)) / 1000.0,
        description_max_chars=int(prompt.get("description_max_chars", 12000)),
        resume_max_chars=int(prompt.get("resume_max_chars", 3000)),
        applicant_name=_optional(env, "APPLICANT_NAME"),
        applicant_last_name=_optional(env, "APPLICANT_LAST_NAME"),
        output_format=_read_choice(env, "COVER_LETTER_OUTPUT_FORMAT", "docx", OUTPUT_FORMATS),
        naming_scheme=_read_choice(env, "COVER_LETTER_NAMING", "identity", NAMING_SCHEMES),
        documents_path=Path(env.get("DOCUMENTS_PATH") or "data/documents"),
        prompt_template_path=Path(
            env.get("PROMPT_TEMPLATE_PATH") or "data/prompts/cover_letter_default.txt"
        ),
        job_data_path=Path(env.get("JOB_DATA_PATH") or "data/job-data"),
        logs_path=Path(env.get("LOGS_PATH") or "outs/logs"),
    )
