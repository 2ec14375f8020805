"""HTML to PDF rendering.

Two :class:`HtmlRenderer` implementations are provided. The default,
:class:`ChromiumHtmlRenderer`, prints the page with a headless Chromium
driven by Playwright, waiting until the network is idle so linked assets
load. :class:`SimpleHtmlRenderer` needs no browser: it keeps only the text
of the document and lays it out on A4 pages with reportlab, which suits
constrained environments.
"""

from __future__ import annotations

import io
import logging
from html.parser import HTMLParser
from typing import Protocol

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from ...core.exceptions import RenderError
from ...core.model import SourceFile

LOGGER = logging.getLogger("pdfpipe.convert.html")

CHROMIUM_ARGS = ("--no-sandbox", "--disable-setuid-sandbox")


class HtmlRenderer(Protocol):
    """Capability rendering an HTML document to a PDF buffer."""

    def render(self, html: str) -> bytes:
        """Return the PDF rendering of *html*."""


class ChromiumHtmlRenderer:
    """Render HTML with headless Chromium as an A4 document with backgrounds."""

    def __init__(self, *, timeout: float | None = None) -> None:
        self.timeout = timeout

    @property
    def _timeout_ms(self) -> float:
        # Playwright treats 0 as "no timeout".
        return self.timeout * 1000 if self.timeout else 0

    def render(self, html: str) -> bytes:
        timeout_ms = self._timeout_ms
        try:
            with sync_playwright() as playwright:
                browser = playwright.chromium.launch(args=list(CHROMIUM_ARGS), timeout=timeout_ms)
                try:
                    page = browser.new_page()
                    page.set_default_timeout(timeout_ms)
                    page.set_content(html, wait_until="networkidle", timeout=timeout_ms)
                    return page.pdf(format="A4", print_background=True)
                finally:
                    browser.close()
        except PlaywrightError as exc:
            LOGGER.error("Chromium rendering failed: %s", exc)
            raise RenderError(f"Headless browser rendering failed: {exc}") from exc


class _HTMLTextExtractor(HTMLParser):
    """Collect visible text blocks from an HTML document."""

    _BLOCK_TAGS = {
        "address", "article", "aside", "blockquote", "br", "dd", "div", "dl", "dt",
        "figcaption", "footer", "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr",
        "li", "main", "nav", "ol", "p", "pre", "section", "table", "tr", "ul",
    }
    _SKIPPED_TAGS = {"head", "script", "style", "template", "noscript"}

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._blocks: list[str] = []
        self._current: list[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag: str, attrs) -> None:
        if tag in self._SKIPPED_TAGS:
            self._skip_depth += 1
        elif tag in self._BLOCK_TAGS:
            self._flush()

    def handle_endtag(self, tag: str) -> None:
        if tag in self._SKIPPED_TAGS:
            self._skip_depth = max(0, self._skip_depth - 1)
        elif tag in self._BLOCK_TAGS:
            self._flush()

    def handle_data(self, data: str) -> None:
        if not self._skip_depth:
            self._current.append(data)

    def _flush(self) -> None:
        text = " ".join("".join(self._current).split())
        if text:
            self._blocks.append(text)
        self._current = []

    def blocks(self) -> list[str]:
        self._flush()
        return list(self._blocks)


class SimpleHtmlRenderer:
    """Lay out the text content of HTML on A4 pages without a browser."""

    font_name = "Helvetica"
    font_size = 11
    leading = 14
    margin = 40

    def render(self, html: str) -> bytes:
        extractor = _HTMLTextExtractor()
        try:
            extractor.feed(html)
            extractor.close()
        except Exception as exc:  # pragma: no cover - html.parser is lenient
            raise RenderError(f"Unable to parse HTML: {exc}") from exc

        width, height = A4
        max_width = width - 2 * self.margin
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=A4)
        pdf.setFont(self.font_name, self.font_size)
        y = height - self.margin
        for block in extractor.blocks():
            for line in simpleSplit(block, self.font_name, self.font_size, max_width):
                if y < self.margin:
                    pdf.showPage()
                    pdf.setFont(self.font_name, self.font_size)
                    y = height - self.margin
                pdf.drawString(self.margin, y, line)
                y -= self.leading
            y -= self.leading / 2
        pdf.showPage()
        pdf.save()
        return buffer.getvalue()


class HtmlConverter:
    name = "html"

    def __init__(self, renderer: HtmlRenderer) -> None:
        self.renderer = renderer

    def convert(self, source: SourceFile) -> bytes:
        try:
            html = source.temporary_path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise RenderError(f"Unable to read HTML file {source.original_name}: {exc}") from exc
        LOGGER.debug("Rendering %s with %s", source.original_name, type(self.renderer).__name__)
        return self.renderer.render(html)


__all__ = [
    "HtmlRenderer",
    "ChromiumHtmlRenderer",
    "SimpleHtmlRenderer",
    "HtmlConverter",
]
