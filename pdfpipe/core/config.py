"""Runtime configuration for :class:`pdfpipe.pipeline.DocumentPipeline`."""

from __future__ import annotations

import dataclasses
import os
import tempfile
from pathlib import Path
from typing import Callable, Mapping

from .exceptions import ValidationError
from .model import QualityTier

_ENV_PREFIX = "PDFPIPE_"
_BACKENDS = ("auto", "qpdf", "pypdf")
_HTML_ENGINES = ("chromium", "simple")

DEFAULT_MAX_UPLOAD_BYTES = 50 * 1024 * 1024
DEFAULT_MAX_MERGE_FILES = 10


def _default_temp_root() -> Path:
    return Path(tempfile.gettempdir()) / "pdfpipe"


@dataclasses.dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Limits and collaborator choices for a pipeline instance.

    ``subprocess_timeout`` and ``render_timeout`` are in seconds; ``None``
    leaves the external call unbounded.
    """

    temp_root: Path = dataclasses.field(default_factory=_default_temp_root)
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    max_merge_files: int = DEFAULT_MAX_MERGE_FILES
    default_tier: QualityTier = QualityTier.MEDIUM
    compression_backend: str = "auto"
    qpdf_executable: str | None = None
    subprocess_timeout: float | None = None
    render_timeout: float | None = None
    html_engine: str = "chromium"

    def __post_init__(self) -> None:
        object.__setattr__(self, "temp_root", Path(self.temp_root).expanduser())
        object.__setattr__(self, "default_tier", QualityTier.parse(self.default_tier))
        if self.compression_backend not in _BACKENDS:
            raise ValidationError(
                f"Unknown compression backend: {self.compression_backend!r}"
            )
        if self.html_engine not in _HTML_ENGINES:
            raise ValidationError(f"Unknown HTML engine: {self.html_engine!r}")
        if self.max_upload_bytes <= 0:
            raise ValidationError("max_upload_bytes must be positive")
        if self.max_merge_files < 2:
            raise ValidationError("max_merge_files must allow at least two files")
        for name in ("subprocess_timeout", "render_timeout"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValidationError(f"{name} must be positive when set")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "PipelineConfig":
        """Build a configuration from ``PDFPIPE_*`` environment variables."""

        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        for env_name, (field_name, parse) in _ENV_FIELDS.items():
            raw = env.get(_ENV_PREFIX + env_name)
            if raw is None or not raw.strip():
                continue
            values[field_name] = parse(env_name, raw.strip())

        return cls(**values)

    def with_updates(self, **changes: object) -> "PipelineConfig":
        return dataclasses.replace(self, **changes)


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as exc:
        raise ValidationError(f"{_ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


def _parse_timeout(name: str, raw: str) -> float | None:
    if raw.lower() in {"0", "none", "off", "no"}:
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ValidationError(f"{_ENV_PREFIX}{name} must be a number of seconds, got {raw!r}") from exc


def _parse_str(_: str, raw: str) -> str:
    return raw


def _parse_lower(_: str, raw: str) -> str:
    return raw.lower()


_ENV_FIELDS: dict[str, tuple[str, Callable[[str, str], object]]] = {
    "TEMP_ROOT": ("temp_root", lambda _, raw: Path(raw)),
    "MAX_UPLOAD_BYTES": ("max_upload_bytes", _parse_int),
    "MAX_MERGE_FILES": ("max_merge_files", _parse_int),
    "DEFAULT_TIER": ("default_tier", lambda _, raw: QualityTier.parse(raw)),
    "COMPRESSION_BACKEND": ("compression_backend", _parse_lower),
    "QPDF": ("qpdf_executable", _parse_str),
    "SUBPROCESS_TIMEOUT": ("subprocess_timeout", _parse_timeout),
    "RENDER_TIMEOUT": ("render_timeout", _parse_timeout),
    "HTML_ENGINE": ("html_engine", _parse_lower),
}


__all__ = ["PipelineConfig", "DEFAULT_MAX_UPLOAD_BYTES", "DEFAULT_MAX_MERGE_FILES"]
