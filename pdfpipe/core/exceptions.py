"""Exception hierarchy raised by :mod:`pdfpipe` operations.

Every failure surfaced by the pipeline derives from :class:`PipelineError`
and carries a short machine readable ``kind`` alongside the human readable
message, so callers can report a structured failure without inspecting the
exception type.
"""

from __future__ import annotations

from typing import Sequence


class PipelineError(Exception):
    """Base exception for all :mod:`pdfpipe` errors."""

    kind = "pipeline"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "The document pipeline failed."

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind, "message": self.message}


class ValidationError(PipelineError):
    """Raised when the caller supplied missing or unacceptable inputs."""

    kind = "validation"

    @property
    def default_message(self) -> str:
        return "Invalid request."


class UnsupportedFormatError(PipelineError):
    """Raised when no conversion strategy exists for a source format."""

    kind = "unsupported_format"

    def __init__(self, extension: str, message: str = "") -> None:
        self.extension = extension
        super().__init__(message or f"Unsupported file format: {extension or '<none>'}")


class ExternalToolError(PipelineError):
    """Raised when an external compression tool is missing or fails."""

    kind = "external_tool"

    def __init__(
        self,
        message: str = "",
        *,
        command: Sequence[str] | None = None,
        returncode: int | None = None,
        stderr: str | None = None,
    ) -> None:
        self.command = list(command) if command is not None else None
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)

    @property
    def default_message(self) -> str:
        return "External compression tool failed."


class AssemblyError(PipelineError):
    """Raised when a source PDF cannot be opened or a document cannot be assembled."""

    kind = "assembly"

    @property
    def default_message(self) -> str:
        return "Failed to assemble PDF document."


class RenderError(PipelineError):
    """Raised when rendering a source file to PDF fails."""

    kind = "render"

    @property
    def default_message(self) -> str:
        return "Failed to render document to PDF."


__all__ = [
    "PipelineError",
    "ValidationError",
    "UnsupportedFormatError",
    "ExternalToolError",
    "AssemblyError",
    "RenderError",
]
