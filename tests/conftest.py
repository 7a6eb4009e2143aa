"""Shared fixtures: isolated settings, a sample job, and a fake inference backend."""

import json
from pathlib import Path

import httpx
import pytest

from scribe.contexts.intake.job_data_structure import JobRecord
from scribe.utils.config import load_settings

BASE_URL = "http://localhost:11434"


@pytest.fixture
def settings_env(tmp_path):
    """Environment mapping pointing every path into tmp_path, retries without delay."""
    return {
        "OLLAMA_BASE_URL": BASE_URL,
        "OLLAMA_RETRY_DELAY_MS": "0",
        "DOCUMENTS_PATH": str(tmp_path / "documents"),
        "PROMPT_TEMPLATE_PATH": str(tmp_path / "prompts" / "cover_letter_default.txt"),
        "JOB_DATA_PATH": str(tmp_path / "job-data"),
        "LOGS_PATH": str(tmp_path / "logs"),
    }


@pytest.fixture
def settings(settings_env):
    return load_settings(env=settings_env)


@pytest.fixture
def job():
    return JobRecord(
        company="Acme Corp",
        position_name="Backend Engineer",
        location="Sydney NSW",
        type="Full Time",
        description="Build and run Python services.",
        link="https://www.seek.com.au/job/81234567",
    )


@pytest.fixture
def write_job(tmp_path):
    """Write a job-data JSON file and return its path."""

    def _write(data: dict, name: str = "job.json") -> Path:
        job_dir = tmp_path / "job-data"
        job_dir.mkdir(parents=True, exist_ok=True)
        path = job_dir / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


class FakeBackend:
    """
    In-process stand-in for an Ollama-compatible server.

    GET / answers the probe; POST /api/generate pops the next queued reply.
    A queued reply is either (status, body) or an exception instance to raise.
    """

    def __init__(self, replies=None, reachable=True):
        self.replies = list(replies or [])
        self.reachable = reachable
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "GET":
            if not self.reachable:
                raise httpx.ConnectError("Connection refused", request=request)
            return httpx.Response(200, text="Ollama is running")

        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        status, body = reply
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, text=body)

    @property
    def generate_requests(self):
        return [r for r in self.requests if r.method == "POST"]

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_backend():
    return FakeBackend
