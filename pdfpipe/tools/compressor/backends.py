"""Compression backends for :mod:`pdfpipe.tools.compressor`."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from pypdf import PdfReader, PdfWriter

from ...core.config import PipelineConfig
from ...core.exceptions import ExternalToolError
from ...core.lifecycle import ResourceLifecycleManager
from ...core.model import QualityTier
from .utils import QPDF_WARNING_EXIT_CODE, run_subprocess, which

_LOGGER = logging.getLogger("pdfpipe.compress")

QPDF_EXECUTABLES = ("qpdf",)

_QPDF_TIER_FLAGS: dict[QualityTier, tuple[str, ...]] = {
    QualityTier.LOW: ("--stream-data=compress",),
    QualityTier.MEDIUM: ("--stream-data=compress", "--object-streams=generate"),
    QualityTier.HIGH: ("--stream-data=compress", "--object-streams=generate", "--linearize"),
}


class CompressionBackend(Protocol):
    """Capability turning a PDF on disk into a compressed PDF buffer."""

    name: str

    def compress(self, source: Path, tier: QualityTier) -> bytes:
        """Compress the document at *source* using the settings for *tier*."""


def build_qpdf_command(executable: str, source: Path, output: Path, tier: QualityTier) -> list[str]:
    """Construct the qpdf command according to *tier*."""

    return [executable, *_QPDF_TIER_FLAGS[tier], str(source), str(output)]


@dataclass
class QpdfBackend:
    """Runs ``qpdf`` out of process, writing to a private temporary file."""

    executable: str
    lifecycle: ResourceLifecycleManager
    timeout: float | None = None
    name: str = "qpdf"

    def compress(self, source: Path, tier: QualityTier) -> bytes:
        with self.lifecycle.scope() as scope:
            output = scope.allocate(prefix="compressed")
            command = build_qpdf_command(self.executable, source, output, tier)
            _LOGGER.info("Running qpdf backend for compression (%s)", tier.value)
            run_subprocess(
                command,
                timeout=self.timeout,
                accepted_codes=(0, QPDF_WARNING_EXIT_CODE),
            )
            try:
                return output.read_bytes()
            except OSError as exc:
                raise ExternalToolError(
                    f"qpdf did not produce an output file: {exc}", command=command
                ) from exc


@dataclass
class PypdfBackend:
    """In-process compression using :mod:`pypdf`.

    ``low`` recompresses page content streams, ``medium`` additionally
    merges identical objects. pypdf cannot linearize, so ``high`` applies
    the ``medium`` settings.
    """

    name: str = "pypdf"

    def compress(self, source: Path, tier: QualityTier) -> bytes:
        try:
            reader = PdfReader(str(source))
            if reader.is_encrypted:
                reader.decrypt("")
            writer = PdfWriter(clone_from=reader)
            for page in writer.pages:
                page.compress_content_streams()
            if tier is not QualityTier.LOW:
                writer.compress_identical_objects(remove_identicals=True, remove_orphans=True)
            buffer = io.BytesIO()
            writer.write(buffer)
        except Exception as exc:
            _LOGGER.error("pypdf compression of %s failed: %s", source, exc)
            raise ExternalToolError(f"pypdf compression failed: {exc}") from exc
        return buffer.getvalue()


def detect_backend(config: PipelineConfig, lifecycle: ResourceLifecycleManager) -> CompressionBackend:
    """Select the compression backend named by ``config.compression_backend``.

    ``qpdf`` requires the executable, ``pypdf`` always works in process and
    ``auto`` prefers qpdf, falling back to pypdf when it is not installed.
    """

    choice = config.compression_backend
    if choice == "pypdf":
        return PypdfBackend()

    executable = which((config.qpdf_executable,) if config.qpdf_executable else QPDF_EXECUTABLES)
    if executable:
        return QpdfBackend(executable, lifecycle, timeout=config.subprocess_timeout)
    if choice == "qpdf":
        raise ExternalToolError("qpdf executable not found; install qpdf or choose another backend")

    _LOGGER.warning("qpdf not available; falling back to the pypdf compression backend")
    return PypdfBackend()


__all__ = [
    "CompressionBackend",
    "QpdfBackend",
    "PypdfBackend",
    "build_qpdf_command",
    "detect_backend",
]
