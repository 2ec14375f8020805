"""Conversion tool turning HTML, image and text files into PDF."""

from __future__ import annotations

from ...core.exceptions import PipelineError, RenderError
from ...core.model import OperationOutcome
from ...core.utils import get_logger
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool
from .dispatcher import select_converter

LOGGER = get_logger("pdfpipe.tools.convert")


@register_tool("convert")
class ConvertTool(BaseTool):
    name = "convert"

    def run(self) -> OperationOutcome:
        context = self.context
        source = context.source
        strategy = select_converter(
            source.extension,
            html_renderer=context.collaborators.get("html_renderer"),
        )

        LOGGER.debug("Converting %s with the %s strategy", source.original_name, strategy.name)
        try:
            buffer = strategy.convert(source)
        except PipelineError:
            raise
        except Exception as exc:
            LOGGER.error("Conversion of %s failed: %s", source.original_name, exc)
            raise RenderError(f"Failed to convert {source.original_name}: {exc}") from exc

        context.resources["strategy"] = strategy.name
        return OperationOutcome(operation=self.name, buffers=(buffer,), filenames=("converted.pdf",))
