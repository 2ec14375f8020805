"""Conversion of HTML, image and text sources to PDF."""

from __future__ import annotations

from .dispatcher import ConverterStrategy, select_converter, supported_extensions
from .html import ChromiumHtmlRenderer, HtmlConverter, HtmlRenderer, SimpleHtmlRenderer
from .image import ImageConverter
from .text import TextConverter

__all__ = [
    "ConverterStrategy",
    "select_converter",
    "supported_extensions",
    "HtmlRenderer",
    "ChromiumHtmlRenderer",
    "SimpleHtmlRenderer",
    "HtmlConverter",
    "ImageConverter",
    "TextConverter",
]
