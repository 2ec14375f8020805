"""Plain text to PDF conversion."""

from __future__ import annotations

import io
import logging

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from ...core.exceptions import RenderError
from ...core.model import SourceFile

LOGGER = logging.getLogger("pdfpipe.convert.text")

FONT_NAME = "Helvetica"
FONT_SIZE = 12
MARGIN = 40
LINE_HEIGHT = FONT_SIZE * 1.2


def wrap_text(text: str, max_width: float) -> list[str]:
    """Split *text* into lines no wider than *max_width* points."""

    normalised = text.replace("\r\n", "\n").replace("\r", "\n").expandtabs(4)
    return simpleSplit(normalised, FONT_NAME, FONT_SIZE, max_width)


def render_text_page(text: str) -> bytes:
    """Draw *text* onto a single A4 page starting at the top-left margin.

    Lines wrap at the page width minus both margins. Content running past
    the bottom of the page is not continued on another page.
    """

    width, height = A4
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setFont(FONT_NAME, FONT_SIZE)
    y = height - MARGIN
    for line in wrap_text(text, width - 2 * MARGIN):
        pdf.drawString(MARGIN, y, line)
        y -= LINE_HEIGHT
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


class TextConverter:
    name = "text"

    def convert(self, source: SourceFile) -> bytes:
        try:
            text = source.temporary_path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise RenderError(f"Unable to read text file {source.original_name}: {exc}") from exc
        try:
            return render_text_page(text)
        except Exception as exc:
            LOGGER.error("Text layout failed for %s: %s", source.original_name, exc)
            raise RenderError(f"Failed to lay out text from {source.original_name}: {exc}") from exc


__all__ = ["TextConverter", "render_text_page", "wrap_text"]
