from __future__ import annotations

from pathlib import Path
from typing import Callable
import sys

import pytest
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdfpipe.core.config import PipelineConfig  # noqa: E402
from pdfpipe.core.model import SourceFile  # noqa: E402
from pdfpipe.pipeline import DocumentPipeline  # noqa: E402


def write_pdf(path: Path, widths: list[int], title: str | None = None) -> Path:
    """Write a PDF whose pages are told apart by their widths."""

    writer = PdfWriter()
    for width in widths:
        writer.add_blank_page(width=width, height=300)
    if title is not None:
        writer.add_metadata({"/Title": title})
    with path.open("wb") as handle:
        writer.write(handle)
    return path


@pytest.fixture()
def inputs_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "inputs"
    directory.mkdir()
    return directory


@pytest.fixture()
def temp_root(tmp_path: Path) -> Path:
    return tmp_path / "pipeline-tmp"


@pytest.fixture()
def config(temp_root: Path) -> PipelineConfig:
    return PipelineConfig(temp_root=temp_root, compression_backend="pypdf", html_engine="simple")


@pytest.fixture()
def pipeline(config: PipelineConfig) -> DocumentPipeline:
    return DocumentPipeline(config)


@pytest.fixture()
def sample_pdf(inputs_dir: Path) -> Path:
    return write_pdf(inputs_dir / "sample.pdf", [200, 201, 202, 203, 204], title="Sample")


@pytest.fixture()
def pdf_factory(inputs_dir: Path) -> Callable[..., Path]:
    def _create(filename: str, pages: int = 1, base_width: int = 100, title: str | None = None) -> Path:
        widths = [base_width + offset for offset in range(pages)]
        return write_pdf(inputs_dir / filename, widths, title=title)

    return _create


@pytest.fixture()
def upload(pipeline: DocumentPipeline) -> Callable[..., SourceFile]:
    """Stage a file into the pipeline's temp root as an uploaded source."""

    def _upload(path: Path, original_name: str | None = None, mime_type: str | None = None) -> SourceFile:
        return pipeline.lifecycle.stage(path, original_name=original_name, mime_type=mime_type)

    return _upload


@pytest.fixture()
def leftovers(temp_root: Path) -> Callable[[], list[Path]]:
    def _leftovers() -> list[Path]:
        if not temp_root.exists():
            return []
        return sorted(temp_root.iterdir())

    return _leftovers
