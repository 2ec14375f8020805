from __future__ import annotations

import io
import shutil
from pathlib import Path

import pytest
from click.testing import CliRunner
from pypdf import PdfReader

from pdfpipe import __version__
from pdfpipe.cli import cli


@pytest.fixture()
def runner(temp_root: Path, monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    monkeypatch.setenv("PDFPIPE_TEMP_ROOT", str(temp_root))
    monkeypatch.setenv("PDFPIPE_COMPRESSION_BACKEND", "pypdf")
    monkeypatch.setenv("PDFPIPE_HTML_ENGINE", "simple")
    return CliRunner()


def _page_count(path: Path) -> int:
    return len(PdfReader(io.BytesIO(path.read_bytes())).pages)


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_split_writes_selected_pages(runner: CliRunner, sample_pdf: Path, tmp_path: Path, leftovers) -> None:
    output_dir = tmp_path / "pages"
    result = runner.invoke(cli, ["split", str(sample_pdf), "-r", "1,3-4", "-o", str(output_dir)])

    assert result.exit_code == 0, result.output
    assert sorted(path.name for path in output_dir.iterdir()) == [
        "sample_page_1.pdf",
        "sample_page_3.pdf",
        "sample_page_4.pdf",
    ]
    assert sample_pdf.exists()
    assert leftovers() == []


def test_merge_keeps_inputs(runner: CliRunner, pdf_factory, tmp_path: Path, leftovers) -> None:
    first = pdf_factory("a.pdf", pages=2)
    second = pdf_factory("b.pdf", pages=3)
    output = tmp_path / "book.pdf"
    result = runner.invoke(cli, ["merge", str(first), str(second), "-o", str(output)])

    assert result.exit_code == 0, result.output
    assert _page_count(output) == 5
    assert first.exists() and second.exists()
    assert leftovers() == []


def test_compress_default_output_name(runner: CliRunner, sample_pdf: Path) -> None:
    result = runner.invoke(cli, ["compress", str(sample_pdf), "-t", "low"])

    assert result.exit_code == 0, result.output
    assert _page_count(sample_pdf.with_name("sample_compressed.pdf")) == 5
    assert "Saved" in result.output


def test_convert_text_file(runner: CliRunner, inputs_dir: Path) -> None:
    source = inputs_dir / "notes.txt"
    source.write_text("meeting notes", encoding="utf-8")
    result = runner.invoke(cli, ["convert", str(source)])

    assert result.exit_code == 0, result.output
    assert _page_count(inputs_dir / "notes.pdf") == 1
    assert source.exists()


def test_unsupported_format_fails(runner: CliRunner, inputs_dir: Path, leftovers) -> None:
    source = inputs_dir / "archive.zip"
    source.write_bytes(b"PK\x03\x04")
    result = runner.invoke(cli, ["convert", str(source)])

    assert result.exit_code == 1
    assert "unsupported_format" in result.output
    assert leftovers() == []


def test_split_empty_selection_fails(runner: CliRunner, sample_pdf: Path) -> None:
    result = runner.invoke(cli, ["split", str(sample_pdf), "-r", "40-50"])

    assert result.exit_code == 1
    assert "No pages found in PDF" in result.output


def test_formats(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["formats"])
    assert result.exit_code == 0
    assert result.output.split() == [".html", ".jpeg", ".jpg", ".png", ".txt"]


def test_staging_error_is_reported(runner: CliRunner, sample_pdf: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def deny(source, destination):
        raise PermissionError(13, "Permission denied", str(source))

    monkeypatch.setattr("pdfpipe.core.lifecycle.shutil.copyfile", deny)
    result = runner.invoke(cli, ["split", str(sample_pdf)])

    assert result.exit_code == 1
    assert "io:" in result.output
    assert "Permission denied" in result.output
    assert not isinstance(result.exception, PermissionError)


def test_merge_releases_partially_staged_inputs(
    runner: CliRunner, pdf_factory, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, leftovers
) -> None:
    first = pdf_factory("a.pdf", pages=1)
    second = pdf_factory("b.pdf", pages=1)
    real_copyfile = shutil.copyfile

    def copy_first_only(source, destination):
        if Path(source) == second:
            raise PermissionError(13, "Permission denied", str(source))
        return real_copyfile(source, destination)

    monkeypatch.setattr("pdfpipe.core.lifecycle.shutil.copyfile", copy_first_only)
    result = runner.invoke(cli, ["merge", str(first), str(second), "-o", str(tmp_path / "out.pdf")])

    assert result.exit_code == 1
    assert "Permission denied" in result.output
    assert leftovers() == []
    assert not (tmp_path / "out.pdf").exists()
