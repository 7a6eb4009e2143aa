"""
Cover letter generation pipeline.

Drives one job (or a batch of job-data files) through:
    prompt -> ensure backend -> generate (with retry) -> normalize -> persist

One InferenceServiceManager owns the backend process for a whole batch and
is cleaned up in a finally block.
"""

import time
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from scribe.contexts.inference.client import GenerationClient, GenerationOptions
from scribe.contexts.inference.logger import log_backend_status, log_generation_start
from scribe.contexts.inference.retry import generate_with_retry
from scribe.contexts.inference.service_manager import InferenceServiceManager
from scribe.contexts.intake.document_reader import (
    load_applicant_details,
    load_resume,
    load_sample_cover_letter,
)
from scribe.contexts.intake.job_data_structure import (
    ApplicantDetails,
    GenerationContext,
    JobEntry,
    JobRecord,
)
from scribe.contexts.intake.job_loader import load_job_data
from scribe.contexts.intake.logger import _log_info as _log_intake_info
from scribe.contexts.prompting.prompt_builder import build_prompt, load_prompt_template
from scribe.contexts.prompting.template import PromptTemplate
from scribe.contexts.rendering.logger import log_artifact
from scribe.contexts.rendering.naming import NamingScheme, build_basename, job_folder_name
from scribe.contexts.rendering.postprocess import normalize
from scribe.contexts.rendering.writer import CoverLetterArtifact, persist
from scribe.utils.config import Settings


@dataclass(frozen=True)
class Applicant:
    """Resolved applicant identity used for prompts and file names."""

    name: str
    last_name: str
    dob: Optional[str] = None


@dataclass(frozen=True)
class CoverLetterResult:
    """One generated cover letter."""

    job: JobRecord
    text: str
    artifact: CoverLetterArtifact
    entry_path: Optional[Path] = None


def resolve_applicant(details: ApplicantDetails, settings: Settings) -> Applicant:
    """
    Combine applicant.json details with environment settings.

    Name: details, then APPLICANT_NAME. Last name: details, then the last
    token of the resolved name, then APPLICANT_LAST_NAME / "Applicant".
    """
    name = details.applicant_name or settings.applicant_name or ""
    last_name = details.last_name or (name.split()[-1] if name.strip() else "")
    return Applicant(
        name=name,
        last_name=last_name or settings.resolved_last_name(),
        dob=details.dob,
    )


def build_generation_context(
    settings: Settings, resume_path: Optional[Union[str, Path]] = None
) -> Tuple[GenerationContext, Applicant]:
    """
    Load resume, sample letter and applicant details from the documents directory.

    Returns:
        (GenerationContext, Applicant)
    """
    resume_text = load_resume(resume_path, resume_dir=settings.resume_dir)
    sample = load_sample_cover_letter(settings.cover_letter_dir)
    applicant = resolve_applicant(load_applicant_details(settings.applicant_details_dir), settings)

    if resume_text:
        _log_intake_info(f"Resume: loaded from {resume_path or settings.resume_dir}")
    elif resume_path:
        _log_intake_info(f"Resume: {resume_path} (file not found or empty)")
    if sample:
        _log_intake_info(f"Sample cover letter: loaded from {settings.cover_letter_dir}")

    context = GenerationContext(
        applicant_name=applicant.name or None,
        resume_snippet=resume_text or None,
        sample_cover_letter=sample or None,
    )
    return context, applicant


class CoverLetterPipeline:
    """
    Generates and persists cover letters for job records.

    Args:
        settings: Pipeline settings
        manager: Backend manager (default: new InferenceServiceManager)
        client: Generation client (default: new GenerationClient)
        template: Prompt template (default: loaded from settings.prompt_template_path)
        sleep: Sleep used between retries
    """

    def __init__(
        self,
        settings: Settings,
        manager: Optional[InferenceServiceManager] = None,
        client: Optional[GenerationClient] = None,
        template: Optional[PromptTemplate] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings
        self.manager = manager or InferenceServiceManager(settings)
        self.client = client or GenerationClient(settings)
        self.template = template or load_prompt_template(settings.prompt_template_path)
        self._sleep = sleep

    def ensure_backend(self, spawn_if_needed: bool = True) -> bool:
        """Ensure the backend is up; returns True if this run started it."""
        result = self.manager.ensure_running(spawn_if_needed=spawn_if_needed)
        log_backend_status(self.settings.base_url, result.started_by_us, self.settings.model)
        return result.started_by_us

    def generate_text(
        self,
        job: JobRecord,
        context: GenerationContext,
        options: Optional[GenerationOptions] = None,
    ) -> str:
        """Prompt, generate with retry, normalize."""
        prompt = build_prompt(
            job,
            context,
            template=self.template,
            description_max_chars=self.settings.description_max_chars,
            resume_max_chars=self.settings.resume_max_chars,
        )
        log_generation_start(job.position_name, job.company, len(prompt))
        raw = generate_with_retry(self.client, prompt, options, sleep=self._sleep)
        return normalize(raw)

    def generate_for_job(
        self,
        job: JobRecord,
        context: GenerationContext,
        output_dir: Path,
        applicant: Applicant,
        entry_path: Optional[Path] = None,
        naming: NamingScheme = NamingScheme.IDENTITY,
        when: Optional[date] = None,
    ) -> CoverLetterResult:
        """Generate, name and persist one cover letter."""
        text = self.generate_text(job, context)
        folder = Path(output_dir) / job_folder_name(job, entry_path)
        basename = build_basename(
            naming, job.company, applicant.last_name, dob=applicant.dob, when=when
        )
        artifact = persist(folder, text, basename)
        log_artifact(artifact)
        return CoverLetterResult(job=job, text=text, artifact=artifact, entry_path=entry_path)

    def run(
        self,
        entries: List[JobEntry],
        context: GenerationContext,
        applicant: Applicant,
        output_dir: Path,
        spawn_if_needed: bool = True,
        naming: NamingScheme = NamingScheme.IDENTITY,
    ) -> List[CoverLetterResult]:
        """
        Generate cover letters for every entry, in order.

        The backend manager is cleaned up on exit, including after failures.
        The first failing job aborts the batch with its error.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        results = []
        try:
            self.ensure_backend(spawn_if_needed=spawn_if_needed)
            for entry in entries:
                results.append(
                    self.generate_for_job(
                        entry.job,
                        context,
                        output_dir,
                        applicant,
                        entry_path=entry.path,
                        naming=naming,
                    )
                )
        finally:
            self.manager.cleanup()
        return results


def run_batch(
    settings: Settings,
    job_data_path: Union[str, Path],
    output_dir: Union[str, Path],
    resume_path: Optional[Union[str, Path]] = None,
    spawn_if_needed: bool = True,
    naming: Optional[NamingScheme] = None,
    pipeline: Optional[CoverLetterPipeline] = None,
) -> List[CoverLetterResult]:
    """
    Load job data and applicant documents, then generate every cover letter.

    Args:
        settings: Pipeline settings
        job_data_path: Job JSON file or directory of job JSON files
        output_dir: Directory receiving one folder per job
        resume_path: Explicit resume file (default: first file in the resume directory)
        spawn_if_needed: Start the backend if it is not running
        naming: Basename scheme (default: settings.naming_scheme)
        pipeline: Pre-built pipeline (tests inject fakes)

    Returns:
        One CoverLetterResult per job, in file order
    """
    entries = load_job_data(job_data_path)
    context, applicant = build_generation_context(settings, resume_path)
    pipeline = pipeline or CoverLetterPipeline(settings)
    scheme = NamingScheme(naming or settings.naming_scheme)

    return pipeline.run(
        entries,
        context,
        applicant,
        output_dir=Path(output_dir),
        spawn_if_needed=spawn_if_needed,
        naming=scheme,
    )
