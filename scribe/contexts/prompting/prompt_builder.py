"""
Prompt assembly for cover letter generation.

Fills the prompt template with job fields and applicant context, enforcing the
length caps that keep prompts inside the backend's context window.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from scribe.contexts.intake.job_data_structure import GenerationContext, JobRecord
from scribe.contexts.prompting.defaults import (
    CUE_LINE,
    DEFAULT_PROMPT_TEMPLATE,
    NOT_PROVIDED,
    SAMPLE_SECTION_HEADER,
)
from scribe.contexts.prompting.logger import _log_debug, _log_info
from scribe.contexts.prompting.template import PromptTemplate

DESCRIPTION_MAX_CHARS = 12000
RESUME_MAX_CHARS = 3000


def sample_section(sample_cover_letter: Optional[str]) -> str:
    """Wrap a sample letter in a labeled delimiter block, or return "" when empty."""
    sample = (sample_cover_letter or "").strip()
    if not sample:
        return ""
    return f"{SAMPLE_SECTION_HEADER}\n\n---\n{sample}\n---\n\n"


def build_prompt(
    job: JobRecord,
    context: Optional[GenerationContext] = None,
    template: Optional[PromptTemplate] = None,
    description_max_chars: int = DESCRIPTION_MAX_CHARS,
    resume_max_chars: int = RESUME_MAX_CHARS,
) -> str:
    """
    Build the generation prompt for one job.

    Args:
        job: Job record to write about
        context: Applicant context (default: empty)
        template: Prompt template (default: built-in template)
        description_max_chars: Cap on job description length
        resume_max_chars: Cap on resume snippet length

    Returns:
        Prompt text ending with the "Cover letter:" cue line
    """
    context = context or GenerationContext()
    template = template or default_template()

    description = (job.description or "")[:description_max_chars]
    resume_snippet = (context.resume_snippet or "")[:resume_max_chars]

    prompt = template.render(
        company=job.company,
        position_name=job.position_name,
        location=job.location,
        job_type=job.type,
        description=description,
        applicant_name=context.applicant_name or NOT_PROVIDED,
        resume_snippet=resume_snippet or NOT_PROVIDED,
        cover_letter_section=sample_section(context.sample_cover_letter),
    )

    # User-edited templates may drop the cue; the backend needs it to start the letter body
    if not prompt.rstrip().endswith(CUE_LINE):
        prompt = f"{prompt.rstrip()}\n\n{CUE_LINE}\n"

    _log_debug(f"Prompt for {job.company or 'unknown company'}: {len(prompt)} chars")
    return prompt


@lru_cache(maxsize=None)
def default_template() -> PromptTemplate:
    """Built-in template, parsed once."""
    return PromptTemplate(DEFAULT_PROMPT_TEMPLATE)


def ensure_prompt_file(prompt_path: Path) -> Path:
    """Write the default template to prompt_path if no file exists there yet."""
    prompt_path = Path(prompt_path)
    if not prompt_path.exists():
        prompt_path.parent.mkdir(parents=True, exist_ok=True)
        prompt_path.write_text(DEFAULT_PROMPT_TEMPLATE, encoding="utf-8")
        _log_info(f"Wrote default prompt template to {prompt_path}")
    return prompt_path


def load_prompt_template(prompt_path: Optional[Path] = None) -> PromptTemplate:
    """
    Load the user-editable prompt template.

    Creates the file from the built-in template first if it is missing.
    With no path, returns the built-in template.
    """
    if prompt_path is None:
        return default_template()
    ensure_prompt_file(prompt_path)
    return PromptTemplate(Path(prompt_path).read_text(encoding="utf-8"))
