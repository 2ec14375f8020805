"""Map source file extensions to conversion strategies.

Dispatch is purely by the extension of the original filename; file
contents are never sniffed.
"""

from __future__ import annotations

from typing import Protocol

from ...core.exceptions import UnsupportedFormatError
from ...core.model import SourceFile
from .html import ChromiumHtmlRenderer, HtmlConverter, HtmlRenderer
from .image import ImageConverter
from .text import TextConverter

_EXTENSION_STRATEGIES = {
    ".html": "html",
    ".jpg": "image",
    ".jpeg": "image",
    ".png": "image",
    ".txt": "text",
}


class ConverterStrategy(Protocol):
    name: str

    def convert(self, source: SourceFile) -> bytes:
        """Return a complete PDF rendering of *source*."""


def supported_extensions() -> tuple[str, ...]:
    return tuple(sorted(_EXTENSION_STRATEGIES))


def select_converter(extension: str, *, html_renderer: HtmlRenderer | None = None) -> ConverterStrategy:
    """Return the strategy converting files with *extension* to PDF.

    Raises:
        UnsupportedFormatError: If no strategy handles *extension*.
    """

    normalised = extension.lower()
    if normalised and not normalised.startswith("."):
        normalised = f".{normalised}"
    kind = _EXTENSION_STRATEGIES.get(normalised)
    if kind == "html":
        return HtmlConverter(html_renderer or ChromiumHtmlRenderer())
    if kind == "image":
        return ImageConverter()
    if kind == "text":
        return TextConverter()
    raise UnsupportedFormatError(extension)


__all__ = ["ConverterStrategy", "select_converter", "supported_extensions"]
