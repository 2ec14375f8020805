"""Page-level document assembly shared by the merge and split tools."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Mapping, Sequence

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError

from .exceptions import AssemblyError

LOGGER = logging.getLogger("pdfpipe.assembler")

PageSelection = Sequence[int]


def open_document(path: str | Path) -> PdfReader:
    """Open the PDF at *path* for page copying.

    Encrypted documents are opened with an empty password when possible.

    Raises:
        AssemblyError: If the file cannot be read, parsed, decrypted or
            contains no pages.
    """

    pdf_path = Path(path)
    try:
        reader = PdfReader(str(pdf_path))
    except (PdfReadError, OSError, ValueError) as exc:
        LOGGER.error("Failed to open PDF %s: %s", pdf_path, exc)
        raise AssemblyError(f"Unable to read PDF {pdf_path.name}: {exc}") from exc

    if reader.is_encrypted:
        LOGGER.debug("Attempting to decrypt encrypted PDF %s", pdf_path)
        try:
            reader.decrypt("")
        except Exception as exc:  # pragma: no cover - decrypt errors vary
            raise AssemblyError(f"Unable to decrypt encrypted PDF: {pdf_path.name}") from exc

    try:
        page_count = len(reader.pages)
    except Exception as exc:
        raise AssemblyError(f"Unable to read pages of PDF {pdf_path.name}: {exc}") from exc
    if page_count == 0:
        raise AssemblyError(f"PDF contains no pages: {pdf_path.name}")
    return reader


def document_metadata(reader: PdfReader) -> dict[str, str]:
    """Return the document info entries of *reader* as plain strings."""

    try:
        metadata = reader.metadata or {}
    except Exception as exc:  # pragma: no cover - malformed info dictionaries
        LOGGER.warning("Failed to read document metadata: %s", exc)
        return {}
    values: dict[str, str] = {}
    for key in metadata:
        value = metadata[key]
        if isinstance(key, str) and value is not None:
            values[key] = str(value)
    return values


def assemble(
    sources: Sequence[tuple[PdfReader, PageSelection]],
    *,
    metadata: Mapping[str, str] | None = None,
) -> bytes:
    """Copy the selected pages of each source into a new PDF.

    Pages are appended in the order given, source by source. Page objects
    are copied as they are, so content streams, fonts and resources are
    carried over unchanged.

    Returns:
        The complete output document.

    Raises:
        AssemblyError: If a page index is out of range or the output
            cannot be written.
    """

    writer = PdfWriter()
    for source_number, (reader, selection) in enumerate(sources, start=1):
        total = len(reader.pages)
        for index in selection:
            if not 0 <= index < total:
                raise AssemblyError(
                    f"Page index {index} is out of range for source {source_number} ({total} pages)"
                )
            LOGGER.debug("Adding page %s from source %s", index, source_number)
            writer.add_page(reader.pages[index])

    if metadata:
        writer.add_metadata(dict(metadata))

    buffer = io.BytesIO()
    try:
        writer.write(buffer)
    except Exception as exc:
        LOGGER.error("Failed to write assembled PDF: %s", exc)
        raise AssemblyError(f"Failed to write assembled PDF: {exc}") from exc
    return buffer.getvalue()


def count_pages(data: bytes) -> int:
    """Return the page count of the PDF held in *data*."""

    return len(PdfReader(io.BytesIO(data)).pages)


__all__ = ["PageSelection", "open_document", "document_metadata", "assemble", "count_pages"]
