"""Shared domain models used across pdfpipe tools."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .exceptions import ValidationError
from .utils import file_extension

PDF_MIME_TYPE = "application/pdf"


class QualityTier(str, Enum):
    """Named compression aggressiveness levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, value: "QualityTier | str | None", default: "QualityTier | None" = None) -> "QualityTier":
        """Return the tier named by *value*.

        ``None`` and blank strings select *default* (``medium`` when not
        given). Any other unrecognised value is a :class:`ValidationError`.
        """

        if isinstance(value, cls):
            return value
        if value is None or not str(value).strip():
            return default or cls.MEDIUM
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            choices = ", ".join(tier.value for tier in cls)
            raise ValidationError(
                f"Unknown compression level: {value!r} (expected one of {choices})"
            ) from exc


@dataclass(frozen=True, slots=True)
class SourceFile:
    """An already materialized input file handed to the pipeline."""

    temporary_path: Path
    original_name: str
    declared_mime_type: str = "application/octet-stream"
    size_bytes: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.temporary_path, Path):
            object.__setattr__(self, "temporary_path", Path(self.temporary_path))

    @property
    def extension(self) -> str:
        return file_extension(self.original_name)

    @property
    def stem(self) -> str:
        return Path(self.original_name).stem or "document"

    def looks_like_pdf(self) -> bool:
        mime = (self.declared_mime_type or "").split(";", 1)[0].strip().lower()
        return mime == PDF_MIME_TYPE or self.extension == ".pdf"


@dataclass(frozen=True, slots=True)
class OperationOutcome:
    """Normalized result of a pipeline operation.

    ``buffers`` holds complete PDF documents. ``filenames`` gives a
    suggested download name per buffer and ``pages`` the 1-based source
    page number per buffer for split results.
    """

    operation: str
    buffers: tuple[bytes, ...]
    filenames: tuple[str, ...] = ()
    pages: tuple[int, ...] = field(default_factory=tuple)

    @property
    def count(self) -> int:
        return len(self.buffers)

    @property
    def total_bytes(self) -> int:
        return sum(len(buffer) for buffer in self.buffers)

    @property
    def buffer(self) -> bytes:
        if len(self.buffers) != 1:
            raise ValueError(
                f"{self.operation} produced {len(self.buffers)} buffers; use 'buffers' instead"
            )
        return self.buffers[0]


__all__ = ["PDF_MIME_TYPE", "QualityTier", "SourceFile", "OperationOutcome"]
