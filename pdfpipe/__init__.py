"""Ephemeral PDF document pipeline: compress, convert, merge and split."""

from __future__ import annotations

from typing import Iterable

from .core.assembler import assemble, open_document
from .core.config import PipelineConfig
from .core.exceptions import (
    AssemblyError,
    ExternalToolError,
    PipelineError,
    RenderError,
    UnsupportedFormatError,
    ValidationError,
)
from .core.lifecycle import ResourceLifecycleManager, TemporaryScope
from .core.model import OperationOutcome, QualityTier, SourceFile
from .pipeline import OPERATIONS, DocumentPipeline, RequestState
from .tools.compressor import CompressionBackend, PypdfBackend, QpdfBackend, detect_backend
from .tools.converter import (
    ChromiumHtmlRenderer,
    HtmlRenderer,
    SimpleHtmlRenderer,
    select_converter,
    supported_extensions,
)
from .tools.splitter import describe_selection, parse_range

__version__ = "0.1.0"

__all__ = [
    "DocumentPipeline",
    "RequestState",
    "OPERATIONS",
    "PipelineConfig",
    "ResourceLifecycleManager",
    "TemporaryScope",
    "SourceFile",
    "QualityTier",
    "OperationOutcome",
    "PipelineError",
    "ValidationError",
    "UnsupportedFormatError",
    "ExternalToolError",
    "AssemblyError",
    "RenderError",
    "CompressionBackend",
    "QpdfBackend",
    "PypdfBackend",
    "detect_backend",
    "HtmlRenderer",
    "ChromiumHtmlRenderer",
    "SimpleHtmlRenderer",
    "select_converter",
    "supported_extensions",
    "parse_range",
    "describe_selection",
    "assemble",
    "open_document",
    "compress_document",
    "convert_document",
    "merge_documents",
    "split_document",
]


def compress_document(
    source: SourceFile,
    tier: QualityTier | str | None = None,
    *,
    config: PipelineConfig | None = None,
) -> bytes:
    """Convenience wrapper around :meth:`DocumentPipeline.compress`."""

    return DocumentPipeline(config).compress(source, tier).buffer


def convert_document(source: SourceFile, *, config: PipelineConfig | None = None) -> bytes:
    """Convenience wrapper around :meth:`DocumentPipeline.convert`."""

    return DocumentPipeline(config).convert(source).buffer


def merge_documents(sources: Iterable[SourceFile], *, config: PipelineConfig | None = None) -> bytes:
    """Convenience wrapper around :meth:`DocumentPipeline.merge`."""

    return DocumentPipeline(config).merge(sources).buffer


def split_document(
    source: SourceFile,
    page_range: str | None = None,
    *,
    config: PipelineConfig | None = None,
) -> list[bytes]:
    """Convenience wrapper around :meth:`DocumentPipeline.split`."""

    return list(DocumentPipeline(config).split(source, page_range).buffers)
