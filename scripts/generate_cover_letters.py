#!/usr/bin/env python3
"""
Cover Letter Generation CLI

Generates tailored cover letters from job-data JSON using a local
Ollama-compatible backend, and writes .txt, .docx and .pdf per job.

Commands:
    generate - Generate cover letters for a job file or a directory of job files
    check    - Check whether the inference backend is reachable
    prompt   - Print the prompt that would be sent for one job file
    export   - Write one letter as .txt or .docx (e.g. after editing by hand)

Examples:\n

    generate_cover_letters.py generate                               # Uses JOB_DATA_PATH

    generate_cover_letters.py generate data/job-data/12345.json      # One job

    generate_cover_letters.py generate --no-spawn --naming dated     # Never start Ollama

    generate_cover_letters.py check                                  # Backend status

    generate_cover_letters.py prompt data/job-data/12345.json        # Inspect prompt
"""

from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from scribe.contexts.inference import InferenceServiceManager
from scribe.contexts.intake import load_job_data, read_text
from scribe.contexts.prompting import build_prompt, load_prompt_template
from scribe.contexts.rendering import NamingScheme, write_single
from scribe.pipeline import build_generation_context, run_batch
from scribe.utils.config import load_settings
from scribe.utils.exceptions import ScribeError
from scribe.utils.logger import setup_logger
from scribe.utils.timestamp import now

DEFAULT_OUTPUT_DIR = Path("outs/cover-letters")

app = typer.Typer(
    help="Generate tailored cover letters from job data with a local inference backend",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _fail(error: Exception) -> None:
    typer.secho(f"Error: {error}\n", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command("generate")
def generate_command(
    job_data_path: Annotated[
        Optional[Path],
        typer.Argument(
            help="Job JSON file or directory of job JSON files (default: JOB_DATA_PATH)",
        ),
    ] = None,
    resume: Annotated[
        Optional[Path],
        typer.Option(
            "--resume",
            "-r",
            help="Resume file (.txt, .docx, .pdf); default: first file in the resume directory",
        ),
    ] = None,
    out: Annotated[
        Path,
        typer.Option(
            "--out",
            "-o",
            help="Directory receiving one folder per job",
        ),
    ] = DEFAULT_OUTPUT_DIR,
    no_spawn: Annotated[
        bool,
        typer.Option(
            "--no-spawn",
            help="Fail instead of starting the backend when it is not running",
        ),
    ] = False,
    naming: Annotated[
        Optional[NamingScheme],
        typer.Option(
            "--naming",
            "-n",
            help="File naming scheme (default: COVER_LETTER_NAMING)",
            case_sensitive=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Echo debug logs to the console (the log file always has them)",
        ),
    ] = False,
):
    """
    Generate cover letters for every job in JOB_DATA_PATH.

    Starts the inference backend if it is not running (unless --no-spawn),
    generates one letter per job, and writes <basename>.txt/.docx/.pdf into
    OUT/<job id>/.

    Examples:\n

        $ generate_cover_letters.py generate data/job-data                # All jobs

        $ generate_cover_letters.py generate job.json --resume cv.pdf      # Explicit resume

        $ generate_cover_letters.py generate --out outs/letters --verbose  # Custom output
    """
    try:
        settings = load_settings()
    except ValueError as e:
        _fail(e)

    job_data_path = job_data_path or settings.job_data_path
    setup_logger(
        "generate",
        settings.logs_path / f"generate_{now()}",
        extra_provenance={
            "Backend": settings.base_url,
            "Model": settings.model,
            "Job data": job_data_path,
        },
        console_level="DEBUG" if verbose else "INFO",
    )

    typer.secho(f"\nGenerating cover letters: {job_data_path}", fg=typer.colors.BLUE, bold=True)
    typer.echo("")

    try:
        results = run_batch(
            settings,
            job_data_path,
            out,
            resume_path=resume,
            spawn_if_needed=not no_spawn,
            naming=naming,
        )
    except (ScribeError, ValueError, FileNotFoundError) as e:
        _fail(e)

    typer.echo("")
    typer.secho(
        f"✓ Generated {len(results)} cover letter(s)", fg=typer.colors.GREEN, bold=True
    )
    for result in results:
        typer.echo(f"  {result.artifact.folder}/{result.artifact.text_path.stem}")
    typer.echo("")


@app.command("check")
def check_command():
    """
    Check whether the inference backend answers at OLLAMA_BASE_URL.

    Exits with code 1 when the backend is unreachable. Never starts it.
    """
    try:
        settings = load_settings()
    except ValueError as e:
        _fail(e)

    with InferenceServiceManager(settings) as manager:
        reachable = manager.probe()

    if reachable:
        typer.secho(f"✓ Inference backend reachable at {settings.base_url}", fg=typer.colors.GREEN)
        typer.echo(f"  Model: {settings.model}")
        return

    typer.secho(
        f"✗ Inference backend not reachable at {settings.base_url}. "
        f"Start it with `{' '.join(settings.backend_command)}`.",
        fg=typer.colors.RED,
        err=True,
    )
    raise typer.Exit(code=1)


@app.command("prompt")
def prompt_command(
    job_file: Annotated[
        Path,
        typer.Argument(help="Job JSON file"),
    ],
    resume: Annotated[
        Optional[Path],
        typer.Option("--resume", "-r", help="Resume file (.txt, .docx, .pdf)"),
    ] = None,
):
    """
    Print the prompt that would be sent for JOB_FILE, without calling the backend.
    """
    try:
        settings = load_settings()
        entries = load_job_data(job_file)
        context, _ = build_generation_context(settings, resume)
        template = load_prompt_template(settings.prompt_template_path)
    except (ScribeError, ValueError, FileNotFoundError) as e:
        _fail(e)

    for entry in entries:
        typer.echo(
            build_prompt(
                entry.job,
                context,
                template=template,
                description_max_chars=settings.description_max_chars,
                resume_max_chars=settings.resume_max_chars,
            )
        )


@app.command("export")
def export_command(
    letter: Annotated[
        Path,
        typer.Argument(help="Cover letter file to convert (.txt, .docx, .pdf)"),
    ],
    fmt: Annotated[
        Optional[str],
        typer.Option(
            "--format",
            "-f",
            help="Output format: txt or docx (default: COVER_LETTER_OUTPUT_FORMAT)",
        ),
    ] = None,
    out: Annotated[
        Optional[Path],
        typer.Option("--out", "-o", help="Output file (default: LETTER with the new suffix)"),
    ] = None,
):
    """
    Write one cover letter as a single .txt or .docx file.

    Examples:\n

        $ generate_cover_letters.py export outs/cover-letters/12345/031210.Doe.Acme.txt

        $ generate_cover_letters.py export letter.txt --format txt --out final.txt
    """
    try:
        settings = load_settings()
    except ValueError as e:
        _fail(e)

    fmt = (fmt or settings.output_format).lower()
    text = read_text(letter)
    if not text:
        _fail(FileNotFoundError(f"No readable text in {letter}"))

    target = out or letter.with_suffix(f".{fmt}")
    try:
        write_single(target, f"{text}\n", fmt)
    except ValueError as e:
        _fail(e)

    typer.secho(f"✓ Wrote {target}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
