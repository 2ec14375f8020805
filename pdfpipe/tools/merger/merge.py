"""Merge tool concatenating every page of each source PDF in order."""

from __future__ import annotations

from pypdf import PdfReader

from ...core.assembler import PageSelection, assemble, document_metadata, open_document
from ...core.model import OperationOutcome
from ...core.utils import get_logger
from ..common.interfaces import BaseTool
from ..common.pipeline import register_tool

LOGGER = get_logger("pdfpipe.tools.merge")


@register_tool("merge")
class MergeTool(BaseTool):
    name = "merge"

    def run(self) -> OperationOutcome:
        context = self.context
        keep_metadata = context.config.get("metadata", True)

        # Open every source before writing anything so a bad input fails the whole merge.
        parts: list[tuple[PdfReader, PageSelection]] = []
        for source in context.sources:
            LOGGER.debug("Processing input PDF %s", source.original_name)
            reader = open_document(source.temporary_path)
            parts.append((reader, range(len(reader.pages))))

        metadata = document_metadata(parts[0][0]) if keep_metadata and parts else None
        buffer = assemble(parts, metadata=metadata)

        total_pages = sum(len(selection) for _, selection in parts)
        LOGGER.debug("Merged %d PDFs (%d pages)", len(parts), total_pages)
        context.resources["page_count"] = total_pages
        return OperationOutcome(operation=self.name, buffers=(buffer,), filenames=("merged.pdf",))
