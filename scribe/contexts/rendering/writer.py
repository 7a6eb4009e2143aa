"""
Cover letter persistence in plain text, Word (.docx) and PDF.

All three files in an artifact folder share one basename and are derived from
the same normalized text. Files are overwritten on regeneration.
"""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError
from docx import Document
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from scribe.contexts.rendering.logger import _log_debug
from scribe.contexts.rendering.naming import DEFAULT_BASENAME

# PDF layout
PDF_FONT = "Helvetica"
PDF_FONT_SIZE = 11
PDF_LINE_HEIGHT = PDF_FONT_SIZE * 1.4
PDF_MARGIN = 50
PDF_PAGE_SIZE = A4

TEXT_SUFFIX = ".txt"
RICH_TEXT_SUFFIX = ".docx"
PDF_SUFFIX = ".pdf"


@dataclass(frozen=True)
class CoverLetterArtifact:
    """
    Paths of one persisted cover letter.

    Attributes:
        folder: Job folder holding the three files
        text_path: Plain text file
        rich_text_path: Word document
        pdf_path: PDF document
    """

    folder: Path
    text_path: Path
    rich_text_path: Path
    pdf_path: Path


def write_text(path: Path, text: str) -> Path:
    # newline="" keeps "\n" as-is on every platform
    with open(path, "w", encoding="utf-8", newline="") as handle:
        handle.write(text)
    return path


def write_docx(path: Path, text: str) -> Path:
    """One paragraph per line; blank lines become empty paragraphs."""
    document = Document()
    for line in text.split("\n"):
        document.add_paragraph(line)
    document.save(str(path))
    return path


def _wrap_lines(text: str, max_width: float) -> List[str]:
    wrapped = []
    for line in text.strip().split("\n"):
        if not line.strip():
            wrapped.append("")
            continue
        wrapped.extend(simpleSplit(line, PDF_FONT, PDF_FONT_SIZE, max_width) or [""])
    return wrapped


def write_pdf(path: Path, text: str) -> Path:
    """
    Lay out text on one or more pages with a fixed margin and line height.

    Lines wider than the text column are wrapped at word boundaries. A new
    page starts when the cursor would fall below the bottom margin.
    """
    width, height = PDF_PAGE_SIZE
    # invariant=1 drops the creation timestamp and random document ID
    pdf = canvas.Canvas(str(path), pagesize=PDF_PAGE_SIZE, invariant=1)
    pdf.setFont(PDF_FONT, PDF_FONT_SIZE)
    y = height - PDF_MARGIN

    for line in _wrap_lines(text, width - 2 * PDF_MARGIN):
        if y < PDF_MARGIN:
            pdf.showPage()
            pdf.setFont(PDF_FONT, PDF_FONT_SIZE)
            y = height - PDF_MARGIN
        pdf.drawString(PDF_MARGIN, y, line)
        y -= PDF_LINE_HEIGHT

    pdf.save()
    return path


def pdf_page_count(path: Path) -> Optional[int]:
    """Page count of a written PDF, or None if unreadable."""
    try:
        return len(PdfReader(str(path)).pages)
    except (OSError, PdfReadError):
        return None


def write_single(path: Union[str, Path], text: str, fmt: str = "docx") -> Path:
    """
    Write one cover letter file in the given format ("txt" or "docx").

    Raises:
        ValueError: If fmt is not supported
    """
    fmt = fmt.lower()
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "docx":
        return write_docx(path, text)
    if fmt == "txt":
        return write_text(path, text)
    raise ValueError(f"Unsupported output format: {fmt!r} (use 'txt' or 'docx')")


def persist(
    folder: Union[str, Path], text: str, basename: Optional[str] = None
) -> CoverLetterArtifact:
    """
    Write text as <basename>.txt, <basename>.docx and <basename>.pdf in folder.

    Args:
        folder: Job folder (created if missing)
        text: Normalized cover letter text
        basename: Shared file stem (default: "coverletter")

    Returns:
        CoverLetterArtifact with the three paths
    """
    folder = Path(folder)
    folder.mkdir(parents=True, exist_ok=True)
    stem = (basename or "").strip() or DEFAULT_BASENAME
    names = [f"{stem}{suffix}" for suffix in (TEXT_SUFFIX, RICH_TEXT_SUFFIX, PDF_SUFFIX)]

    # Built in a staging directory; the folder only changes once all three exist
    with tempfile.TemporaryDirectory(dir=folder, prefix=".staging-") as staging:
        staging = Path(staging)
        write_text(staging / names[0], text)
        write_docx(staging / names[1], text)
        write_pdf(staging / names[2], text)
        for name in names:
            os.replace(staging / name, folder / name)

    artifact = CoverLetterArtifact(
        folder=folder,
        text_path=folder / names[0],
        rich_text_path=folder / names[1],
        pdf_path=folder / names[2],
    )
    _log_debug(
        f"Wrote {stem}.txt, {stem}.docx, {stem}.pdf to {folder} "
        f"(PDF pages: {pdf_page_count(artifact.pdf_path)})"
    )
    return artifact
