"""Core interfaces and context objects shared by pdfpipe tools."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from ...core.config import PipelineConfig
from ...core.lifecycle import TemporaryScope
from ...core.model import OperationOutcome, SourceFile


@dataclass
class OperationContext:
    """Holds the per-request execution state for a tool invocation."""

    sources: Sequence[SourceFile]
    scope: TemporaryScope
    settings: PipelineConfig
    collaborators: dict[str, Any] = field(default_factory=dict)
    config: dict[str, Any] = field(default_factory=dict)
    resources: dict[str, Any] = field(default_factory=dict)

    @property
    def source(self) -> SourceFile:
        if not self.sources:
            raise ValueError("OperationContext has no source files")
        return self.sources[0]

    def collaborator(self, name: str) -> Any:
        try:
            return self.collaborators[name]
        except KeyError as exc:
            raise KeyError(f"Collaborator '{name}' was not provided to the operation") from exc


class BaseTool:
    """Base class for all pluggable pdfpipe operations."""

    name: str

    def __init__(self, context: OperationContext) -> None:
        self.context = context

    def run(self) -> OperationOutcome:  # pragma: no cover - to be implemented by subclasses
        raise NotImplementedError
