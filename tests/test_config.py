from __future__ import annotations

from pathlib import Path

import pytest

from pdfpipe.core.config import DEFAULT_MAX_MERGE_FILES, DEFAULT_MAX_UPLOAD_BYTES, PipelineConfig
from pdfpipe.core.exceptions import ValidationError
from pdfpipe.core.model import QualityTier


def test_defaults() -> None:
    config = PipelineConfig.from_env({})
    assert config.max_upload_bytes == DEFAULT_MAX_UPLOAD_BYTES == 50 * 1024 * 1024
    assert config.max_merge_files == DEFAULT_MAX_MERGE_FILES == 10
    assert config.default_tier is QualityTier.MEDIUM
    assert config.compression_backend == "auto"
    assert config.html_engine == "chromium"
    assert config.subprocess_timeout is None
    assert config.temp_root.name == "pdfpipe"


def test_from_env_reads_prefixed_variables(tmp_path: Path) -> None:
    config = PipelineConfig.from_env(
        {
            "PDFPIPE_TEMP_ROOT": str(tmp_path),
            "PDFPIPE_MAX_UPLOAD_BYTES": "1024",
            "PDFPIPE_MAX_MERGE_FILES": "4",
            "PDFPIPE_DEFAULT_TIER": "High",
            "PDFPIPE_COMPRESSION_BACKEND": "PYPDF",
            "PDFPIPE_QPDF": "/opt/qpdf/bin/qpdf",
            "PDFPIPE_SUBPROCESS_TIMEOUT": "12.5",
            "PDFPIPE_RENDER_TIMEOUT": "off",
            "PDFPIPE_HTML_ENGINE": "simple",
            "UNRELATED": "ignored",
        }
    )
    assert config.temp_root == tmp_path
    assert config.max_upload_bytes == 1024
    assert config.max_merge_files == 4
    assert config.default_tier is QualityTier.HIGH
    assert config.compression_backend == "pypdf"
    assert config.qpdf_executable == "/opt/qpdf/bin/qpdf"
    assert config.subprocess_timeout == 12.5
    assert config.render_timeout is None
    assert config.html_engine == "simple"


def test_blank_variables_keep_defaults() -> None:
    assert PipelineConfig.from_env({"PDFPIPE_MAX_MERGE_FILES": "  "}).max_merge_files == 10


@pytest.mark.parametrize(
    ("name", "value", "message"),
    [
        ("PDFPIPE_MAX_UPLOAD_BYTES", "lots", "must be an integer"),
        ("PDFPIPE_MAX_UPLOAD_BYTES", "0", "must be positive"),
        ("PDFPIPE_MAX_MERGE_FILES", "1", "at least two"),
        ("PDFPIPE_DEFAULT_TIER", "ultra", "Unknown compression level"),
        ("PDFPIPE_COMPRESSION_BACKEND", "ghostscript", "Unknown compression backend"),
        ("PDFPIPE_HTML_ENGINE", "wkhtmltopdf", "Unknown HTML engine"),
        ("PDFPIPE_SUBPROCESS_TIMEOUT", "soon", "number of seconds"),
        ("PDFPIPE_RENDER_TIMEOUT", "-3", "must be positive"),
    ],
)
def test_invalid_values_are_rejected(name: str, value: str, message: str) -> None:
    with pytest.raises(ValidationError, match=message):
        PipelineConfig.from_env({name: value})


def test_with_updates_revalidates(tmp_path: Path) -> None:
    config = PipelineConfig(temp_root=tmp_path)
    assert config.with_updates(default_tier="low").default_tier is QualityTier.LOW
    with pytest.raises(ValidationError):
        config.with_updates(html_engine="gecko")
