"""Compression backends exposed through the pdfpipe tools namespace."""

from __future__ import annotations

from .backends import (
    CompressionBackend,
    PypdfBackend,
    QpdfBackend,
    build_qpdf_command,
    detect_backend,
)

__all__ = [
    "CompressionBackend",
    "PypdfBackend",
    "QpdfBackend",
    "build_qpdf_command",
    "detect_backend",
]
