"""
Command-line interface for pdfpipe.

Input files are staged into the pipeline's temporary root before each
operation, so the files named on the command line are never consumed.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Sequence

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .. import __version__
from ..core.assembler import count_pages
from ..core.config import PipelineConfig
from ..core.exceptions import PipelineError
from ..core.model import OperationOutcome, QualityTier
from ..core.utils import get_logger, sizeof_fmt
from ..pipeline import DocumentPipeline
from ..tools.converter import supported_extensions

console = Console()


def _build_pipeline(ctx: click.Context, **overrides: object) -> DocumentPipeline:
    config: PipelineConfig = ctx.obj["config"]
    changes = {key: value for key, value in overrides.items() if value is not None}
    if changes:
        config = config.with_updates(**changes)
    return DocumentPipeline(config)


def _write_outputs(outcome: OperationOutcome, destinations: Sequence[Path]) -> None:
    table = Table(title=f"{outcome.operation.capitalize()} result")
    table.add_column("Output", style="cyan")
    table.add_column("Pages", justify="right")
    table.add_column("Size", justify="right", style="green")
    for buffer, destination in zip(outcome.buffers, destinations):
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(buffer)
        table.add_row(str(destination), str(count_pages(buffer)), sizeof_fmt(len(buffer)))
    console.print(table)


def _fail(error: PipelineError | OSError) -> None:
    if isinstance(error, PipelineError):
        kind, message = error.kind, error.message
    else:
        kind, message = "io", str(error)
    console.print(f"[bold red]✗ {kind}:[/bold red] {escape(message)}")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """
    pdfpipe - compress, convert, merge and split PDF documents.
    """
    if verbose:
        get_logger("pdfpipe").setLevel(logging.DEBUG)
    try:
        config = PipelineConfig.from_env()
    except PipelineError as exc:
        _fail(exc)
    ctx.obj = {"config": config}


@cli.command()
@click.argument("input_pdf", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Destination PDF")
@click.option(
    "--tier",
    "-t",
    type=click.Choice([tier.value for tier in QualityTier]),
    default=None,
    help="Compression level (defaults to the configured tier)",
)
@click.option(
    "--backend",
    type=click.Choice(["auto", "qpdf", "pypdf"]),
    default=None,
    help="Compression backend",
)
@click.pass_context
def compress(ctx: click.Context, input_pdf: Path, output: Path | None, tier: str | None, backend: str | None) -> None:
    """
    Compress a PDF file.

    Examples:

        pdfpipe compress report.pdf -t high -o report.small.pdf
    """
    pipeline = _build_pipeline(ctx, compression_backend=backend)
    destination = output or input_pdf.with_name(f"{input_pdf.stem}_compressed.pdf")
    try:
        source = pipeline.lifecycle.stage(input_pdf)
        outcome = pipeline.compress(source, tier)
        _write_outputs(outcome, [destination])
    except (PipelineError, OSError) as exc:
        _fail(exc)
    saved = input_pdf.stat().st_size - outcome.total_bytes
    console.print(f"[bold green]✓[/bold green] Saved {sizeof_fmt(max(saved, 0))}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Destination PDF")
@click.option(
    "--html-engine",
    type=click.Choice(["chromium", "simple"]),
    default=None,
    help="Renderer used for HTML sources",
)
@click.pass_context
def convert(ctx: click.Context, input_file: Path, output: Path | None, html_engine: str | None) -> None:
    """
    Convert an HTML, JPEG, PNG or text file to PDF.
    """
    pipeline = _build_pipeline(ctx, html_engine=html_engine)
    destination = output or input_file.with_suffix(".pdf")
    try:
        source = pipeline.lifecycle.stage(input_file)
        outcome = pipeline.convert(source)
        _write_outputs(outcome, [destination])
    except (PipelineError, OSError) as exc:
        _fail(exc)


@cli.command()
@click.argument(
    "input_pdfs",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("merged.pdf"),
    show_default=True,
    help="Destination PDF",
)
@click.pass_context
def merge(ctx: click.Context, input_pdfs: tuple[Path, ...], output: Path) -> None:
    """
    Merge PDF files in the order given.

    Examples:

        pdfpipe merge cover.pdf body.pdf appendix.pdf -o book.pdf
    """
    pipeline = _build_pipeline(ctx)
    staged = []
    try:
        for path in input_pdfs:
            staged.append(pipeline.lifecycle.stage(path))
    except OSError as exc:
        # Copies staged before the failure never reach the pipeline, which releases its own sources.
        for source in staged:
            pipeline.lifecycle.release(source.temporary_path)
        _fail(exc)
    try:
        outcome = pipeline.merge(staged)
        _write_outputs(outcome, [output])
    except (PipelineError, OSError) as exc:
        _fail(exc)


@cli.command()
@click.argument("input_pdf", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--range", "-r", "page_range", default="", help="Pages to keep, e.g. '1-3,5'. Empty keeps all")
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory for the single-page PDFs",
)
@click.pass_context
def split(ctx: click.Context, input_pdf: Path, page_range: str, output_dir: Path) -> None:
    """
    Split a PDF into one file per selected page.

    Examples:

        pdfpipe split scan.pdf -r 2-4,7 -o pages
    """
    pipeline = _build_pipeline(ctx)
    try:
        source = pipeline.lifecycle.stage(input_pdf)
        outcome = pipeline.split(source, page_range)
        _write_outputs(outcome, [output_dir / name for name in outcome.filenames])
    except (PipelineError, OSError) as exc:
        _fail(exc)


@cli.command()
def formats() -> None:
    """
    List the file extensions accepted by the convert command.
    """
    for extension in supported_extensions():
        console.print(extension)


if __name__ == "__main__":  # pragma: no cover
    cli()
