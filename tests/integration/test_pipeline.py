"""Integration tests for the end-to-end cover letter pipeline with a mocked backend."""

import json
import re

import pytest

from scribe.contexts.inference.client import GenerationClient
from scribe.contexts.inference.exceptions import BackendUnavailable, UpstreamError
from scribe.contexts.inference.service_manager import InferenceServiceManager
from scribe.contexts.rendering.naming import NamingScheme
from scribe.pipeline import CoverLetterPipeline, build_generation_context, run_batch
from scribe.utils.config import load_settings

RAW_LETTER = "```\nDear Hiring Manager,\n\n\n\nI am applying.\n```"
LETTER = "Dear Hiring Manager,\n\nI am applying.\n"

JOB = {
    "company": "Acme Corp",
    "positionName": "Backend Engineer",
    "location": "Sydney NSW",
    "type": "Full Time",
    "description": "Build and run Python services.",
    "link": "https://www.seek.com.au/job/81234567",
}


class StubProcess:
    pid = 99

    def __init__(self):
        self.returncode = None
        self.terminated = False

    def poll(self):
        return self.returncode

    def terminate(self):
        self.terminated = True
        self.returncode = 0

    def wait(self, timeout=None):
        return self.returncode


def _pipeline(settings, backend, launcher=None):
    manager_kwargs = {"http_client": backend.client(), "sleep": lambda s: None}
    if launcher is not None:
        manager_kwargs["launcher"] = launcher
    return CoverLetterPipeline(
        settings,
        manager=InferenceServiceManager(settings, **manager_kwargs),
        client=GenerationClient(settings, http_client=backend.client()),
        sleep=lambda s: None,
    )


@pytest.fixture
def documents(settings):
    """Resume and applicant details under the settings' documents path."""
    settings.resume_dir.mkdir(parents=True)
    (settings.resume_dir / "resume.txt").write_text("Ten years of Python services.", encoding="utf-8")
    settings.applicant_details_dir.mkdir(parents=True)
    (settings.applicant_details_dir / "applicant.json").write_text(
        json.dumps({"applicantName": "Jane Doe", "lastName": "Doe", "dob": "2003-12-10"}),
        encoding="utf-8",
    )
    return settings.documents_path


@pytest.mark.integration
def test_generates_letter_end_to_end(settings, documents, write_job, fake_backend, tmp_path):
    backend = fake_backend([(200, {"response": RAW_LETTER, "done": True})])
    job_path = write_job(JOB)

    results = run_batch(
        settings,
        job_path,
        tmp_path / "out",
        naming=NamingScheme.IDENTITY,
        pipeline=_pipeline(settings, backend),
    )

    assert len(results) == 1
    artifact = results[0].artifact
    assert artifact.folder == tmp_path / "out" / "81234567"
    assert artifact.text_path.name == "031210.Doe.AcmeCorp.txt"
    assert artifact.text_path.read_text(encoding="utf-8") == LETTER
    assert artifact.rich_text_path.exists()
    assert artifact.pdf_path.exists()


@pytest.mark.integration
def test_prompt_carries_applicant_context(settings, documents, write_job, fake_backend, tmp_path):
    backend = fake_backend([(200, {"response": "Letter"})])

    run_batch(settings, write_job(JOB), tmp_path / "out", pipeline=_pipeline(settings, backend))

    prompt = json.loads(backend.generate_requests[0].content)["prompt"]
    assert "Jane Doe" in prompt
    assert "Ten years of Python services." in prompt
    assert "Company: Acme Corp" in prompt
    assert settings.prompt_template_path.exists()


@pytest.mark.integration
def test_directory_batch_with_dated_names(settings, documents, write_job, fake_backend, tmp_path):
    write_job({**JOB, "id": "first"}, name="a.json")
    job_dir = write_job({**JOB, "company": "Globex", "id": "second"}, name="b.json").parent
    backend = fake_backend([(200, {"response": "One"}), (200, {"response": "Two"})])

    results = run_batch(
        settings, job_dir, tmp_path / "out", naming=NamingScheme.DATED, pipeline=_pipeline(settings, backend)
    )

    assert [r.artifact.folder.name for r in results] == ["first", "second"]
    assert [r.text for r in results] == ["One\n", "Two\n"]
    assert re.fullmatch(r"\d{6}\.Doe\.CL\.Globex\.txt", results[1].artifact.text_path.name)


@pytest.mark.integration
def test_transient_failure_retried(settings, documents, write_job, fake_backend, tmp_path):
    backend = fake_backend([(500, "model is loading"), (200, {"response": "Letter"})])

    results = run_batch(settings, write_job(JOB), tmp_path / "out", pipeline=_pipeline(settings, backend))

    assert results[0].text == "Letter\n"
    assert len(backend.generate_requests) == 2


@pytest.mark.integration
def test_no_spawn_with_backend_down(settings, write_job, fake_backend, tmp_path):
    backend = fake_backend(reachable=False)

    with pytest.raises(BackendUnavailable):
        run_batch(
            settings,
            write_job(JOB),
            tmp_path / "out",
            spawn_if_needed=False,
            pipeline=_pipeline(settings, backend),
        )

    assert backend.generate_requests == []
    assert not (tmp_path / "out" / "81234567").exists()


@pytest.mark.integration
def test_spawned_backend_stopped_after_failure(settings_env, write_job, fake_backend, tmp_path):
    settings = load_settings(env={**settings_env, "COVER_LETTER_STOP_OLLAMA": "1"})
    process = StubProcess()
    probes = iter([False, True])

    class Backend(fake_backend):
        def handler(self, request):
            if request.method == "GET":
                self.reachable = next(probes, True)
            return super().handler(request)

    backend = Backend([(500, "a"), (500, "b"), (500, "c")])

    with pytest.raises(UpstreamError):
        run_batch(
            settings,
            write_job(JOB),
            tmp_path / "out",
            pipeline=_pipeline(settings, backend, launcher=lambda command, log_path: process),
        )

    assert process.terminated is True


@pytest.mark.integration
def test_generation_context_without_documents(settings):
    context, applicant = build_generation_context(settings)

    assert context.resume_snippet is None
    assert context.sample_cover_letter is None
    assert applicant.last_name == "Applicant"
    assert applicant.dob is None
