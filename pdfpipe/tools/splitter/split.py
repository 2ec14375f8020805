"""Split tool producing one single-page PDF per selected page."""

from __future__ import annotations

from ...core.assembler import assemble, document_metadata, open_document
from ...core.exceptions import ValidationError
from ...core.model import OperationOutcome
from ...core.utils import get_logger
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool
from .ranges import describe_selection, parse_range

LOGGER = get_logger("pdfpipe.tools.split")


def build_output_filename(base_name: str, page_number: int) -> str:
    """Construct the download name for a single split page."""

    safe_base = base_name.replace(" ", "_")
    return f"{safe_base}_page_{page_number}.pdf"


@register_tool("split")
class SplitTool(BaseTool):
    name = "split"

    def run(self) -> OperationOutcome:
        context = self.context
        source = context.source
        expression = context.config.get("page_range")

        reader = open_document(source.temporary_path)
        total_pages = len(reader.pages)
        selection = parse_range(expression, total_pages)
        if not selection:
            LOGGER.debug(
                "Range %r selected no pages from %s (%d pages)",
                expression,
                source.original_name,
                total_pages,
            )
            raise ValidationError("No pages found in PDF")

        metadata = document_metadata(reader)
        buffers: list[bytes] = []
        for index in selection:
            buffers.append(assemble([(reader, [index])], metadata=metadata))

        page_numbers = tuple(index + 1 for index in selection)
        LOGGER.debug(
            "Split pages %s of %s into %d document(s)",
            describe_selection(selection),
            source.original_name,
            len(buffers),
        )
        context.resources["selection"] = selection
        return OperationOutcome(
            operation=self.name,
            buffers=tuple(buffers),
            filenames=tuple(build_output_filename(source.stem, number) for number in page_numbers),
            pages=page_numbers,
        )
