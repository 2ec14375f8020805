"""Pipeline façade exposing the compress, convert, merge and split operations.

Each call is one request that moves through ``VALIDATING``, ``PROCESSING``,
``CLEANING`` and finally ``DONE`` or ``FAILED``. The façade owns the source
files it is handed: they are deleted together with every intermediate file
before the call returns, whatever the outcome. A call either returns an
:class:`~pdfpipe.core.model.OperationOutcome` or raises a
:class:`~pdfpipe.core.exceptions.PipelineError`.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, Sequence

from .core.config import PipelineConfig
from .core.exceptions import PipelineError, ValidationError
from .core.lifecycle import ResourceLifecycleManager, TemporaryScope
from .core.model import OperationOutcome, QualityTier, SourceFile
from .core.utils import sizeof_fmt
from .tools import load_builtin_plugins
from .tools.common.interfaces import OperationContext
from .tools.common.pipeline import registry
from .tools.compressor.backends import CompressionBackend, detect_backend
from .tools.converter.html import ChromiumHtmlRenderer, HtmlRenderer, SimpleHtmlRenderer

LOGGER = logging.getLogger("pdfpipe.pipeline")

OPERATIONS = ("compress", "convert", "merge", "split")
_PDF_OPERATIONS = frozenset({"compress", "merge", "split"})


class RequestState(str, Enum):
    VALIDATING = "validating"
    PROCESSING = "processing"
    CLEANING = "cleaning"
    DONE = "done"
    FAILED = "failed"


class _RequestTracker:
    """Records the state transitions of a single request."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        self.state = RequestState.VALIDATING
        LOGGER.debug("%s: entering %s", operation, self.state.value)

    def advance(self, state: RequestState) -> None:
        LOGGER.debug("%s: %s -> %s", self.operation, self.state.value, state.value)
        self.state = state

    def fail(self, error: BaseException) -> None:
        LOGGER.debug("%s: %s -> failed (%s)", self.operation, self.state.value, error)
        self.state = RequestState.FAILED


def _single(source: SourceFile | None) -> tuple[SourceFile, ...]:
    return () if source is None else (source,)


class DocumentPipeline:
    """Entry point used by the upload-handling layer.

    The instance holds only configuration and stateless collaborators, so a
    single pipeline may serve concurrent requests from a thread pool.
    """

    def __init__(
        self,
        config: PipelineConfig | None = None,
        *,
        lifecycle: ResourceLifecycleManager | None = None,
        compression_backend: CompressionBackend | None = None,
        html_renderer: HtmlRenderer | None = None,
    ) -> None:
        load_builtin_plugins()
        self.config = config if config is not None else PipelineConfig.from_env()
        self.lifecycle = lifecycle or ResourceLifecycleManager(self.config.temp_root)
        self.compression_backend = compression_backend
        self.html_renderer = html_renderer or self._default_html_renderer()

    def _default_html_renderer(self) -> HtmlRenderer:
        if self.config.html_engine == "simple":
            return SimpleHtmlRenderer()
        return ChromiumHtmlRenderer(timeout=self.config.render_timeout)

    # -- public operations -------------------------------------------------

    def compress(
        self, source: SourceFile | None, tier: QualityTier | str | None = None
    ) -> OperationOutcome:
        """Compress a PDF at *tier* (``low``, ``medium`` or ``high``)."""

        return self.run("compress", _single(source), tier=tier)

    def convert(self, source: SourceFile | None) -> OperationOutcome:
        """Convert an HTML, JPEG, PNG or text file to PDF."""

        return self.run("convert", _single(source))

    def merge(self, sources: Iterable[SourceFile]) -> OperationOutcome:
        """Concatenate every page of *sources* in the order given."""

        return self.run("merge", tuple(sources))

    def split(self, source: SourceFile | None, page_range: str | None = None) -> OperationOutcome:
        """Produce one single-page PDF per page selected by *page_range*."""

        return self.run("split", _single(source), page_range=page_range)

    def run(self, operation: str, sources: Sequence[SourceFile], **options: Any) -> OperationOutcome:
        sources = tuple(sources)
        tracker = _RequestTracker(operation)
        scope = self.lifecycle.open_scope(sources)

        try:
            options = self._validate(operation, sources, options)
        except PipelineError as exc:
            tracker.fail(exc)
            scope.close()
            raise
        except Exception as exc:
            LOGGER.warning("%s rejected malformed input: %s", operation, exc)
            tracker.fail(exc)
            scope.close()
            raise ValidationError(f"Invalid {operation} request: {exc}") from exc

        tracker.advance(RequestState.PROCESSING)
        try:
            outcome = self._process(operation, sources, scope, options)
        except PipelineError as exc:
            self._cleanup(tracker, scope)
            tracker.fail(exc)
            raise
        except Exception as exc:
            LOGGER.exception("%s failed unexpectedly", operation)
            self._cleanup(tracker, scope)
            tracker.fail(exc)
            raise PipelineError(f"{operation} failed: {exc}") from exc
        finally:
            self._cleanup(tracker, scope)

        tracker.advance(RequestState.DONE)
        LOGGER.info(
            "%s produced %d document(s), %s",
            operation,
            outcome.count,
            sizeof_fmt(outcome.total_bytes),
        )
        return outcome

    # -- request stages ------------------------------------------------------

    def _validate(
        self, operation: str, sources: tuple[SourceFile, ...], options: dict[str, Any]
    ) -> dict[str, Any]:
        if operation not in OPERATIONS or operation not in registry:
            raise ValidationError(f"Unknown operation: {operation!r}")

        if operation == "merge":
            if len(sources) < 2:
                raise ValidationError("At least 2 PDF files are required")
            if len(sources) > self.config.max_merge_files:
                raise ValidationError(
                    f"At most {self.config.max_merge_files} PDF files can be merged at once"
                )
        elif not sources:
            noun = "PDF file" if operation in _PDF_OPERATIONS else "File"
            raise ValidationError(f"{noun} is required")
        elif len(sources) > 1:
            raise ValidationError(f"{operation} accepts a single file, got {len(sources)}")

        for source in sources:
            path = source.temporary_path
            if not path.is_file():
                raise ValidationError(f"Uploaded file is missing: {source.original_name}")
            size = max(source.size_bytes, path.stat().st_size)
            if size > self.config.max_upload_bytes:
                raise ValidationError(
                    f"{source.original_name} is {sizeof_fmt(size)}; the limit is "
                    f"{sizeof_fmt(self.config.max_upload_bytes)}"
                )
            if operation in _PDF_OPERATIONS and not source.looks_like_pdf():
                raise ValidationError(f"{source.original_name} is not a PDF file")

        validated = dict(options)
        if operation == "compress":
            validated["tier"] = QualityTier.parse(options.get("tier"), self.config.default_tier)
        return validated

    def _collaborators(self, operation: str) -> dict[str, Any]:
        if operation == "compress":
            backend = self.compression_backend or detect_backend(self.config, self.lifecycle)
            return {"compression_backend": backend}
        if operation == "convert":
            return {"html_renderer": self.html_renderer}
        return {}

    def _process(
        self,
        operation: str,
        sources: tuple[SourceFile, ...],
        scope: TemporaryScope,
        options: dict[str, Any],
    ) -> OperationOutcome:
        context = OperationContext(
            sources=sources,
            scope=scope,
            settings=self.config,
            collaborators=self._collaborators(operation),
            config=options,
        )
        return registry.create(operation, context).run()

    @staticmethod
    def _cleanup(tracker: _RequestTracker, scope: TemporaryScope) -> None:
        if scope.closed:
            return
        tracker.advance(RequestState.CLEANING)
        scope.close()


__all__ = ["DocumentPipeline", "RequestState", "OPERATIONS"]
