"""Core building blocks shared by the pdfpipe tools."""

from __future__ import annotations

from .assembler import assemble, count_pages, document_metadata, open_document
from .config import PipelineConfig
from .exceptions import (
    AssemblyError,
    ExternalToolError,
    PipelineError,
    RenderError,
    UnsupportedFormatError,
    ValidationError,
)
from .lifecycle import ResourceLifecycleManager, TemporaryScope
from .model import PDF_MIME_TYPE, OperationOutcome, QualityTier, SourceFile

__all__ = [
    "assemble",
    "count_pages",
    "document_metadata",
    "open_document",
    "PipelineConfig",
    "PipelineError",
    "ValidationError",
    "UnsupportedFormatError",
    "ExternalToolError",
    "AssemblyError",
    "RenderError",
    "ResourceLifecycleManager",
    "TemporaryScope",
    "PDF_MIME_TYPE",
    "OperationOutcome",
    "QualityTier",
    "SourceFile",
]
