"""Compression tool delegating to the configured backend."""

from __future__ import annotations

from ...core.model import OperationOutcome, QualityTier
from ...core.utils import get_logger, sizeof_fmt
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool
from .backends import CompressionBackend

LOGGER = get_logger("pdfpipe.tools.compress")


@register_tool("compress")
class CompressTool(BaseTool):
    name = "compress"

    def run(self) -> OperationOutcome:
        context = self.context
        source = context.source
        tier = QualityTier.parse(context.config.get("tier"), context.settings.default_tier)
        backend: CompressionBackend = context.collaborator("compression_backend")

        LOGGER.debug(
            "Compressing %s with level %s using %s",
            source.original_name,
            tier.value,
            backend.name,
        )
        buffer = backend.compress(source.temporary_path, tier)

        original_size = source.temporary_path.stat().st_size
        LOGGER.info(
            "Compressed %s from %s to %s",
            source.original_name,
            sizeof_fmt(original_size),
            sizeof_fmt(len(buffer)),
        )
        context.resources["original_size"] = original_size
        context.resources["compressed_size"] = len(buffer)
        return OperationOutcome(operation=self.name, buffers=(buffer,), filenames=("compressed.pdf",))
