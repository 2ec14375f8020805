"""Namespace for pluggable pdfpipe operations."""

from __future__ import annotations

from .common.pipeline import registry


def load_builtin_plugins() -> None:
    from .splitter import split  # noqa: F401  # register split tool
    from .merger import merge  # noqa: F401
    from .compressor import compress  # noqa: F401
    from .converter import convert  # noqa: F401


__all__ = ["registry", "load_builtin_plugins"]
