"""Raster image to PDF conversion."""

from __future__ import annotations

import io
import logging

from PIL import Image, UnidentifiedImageError
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ...core.exceptions import RenderError
from ...core.model import SourceFile

LOGGER = logging.getLogger("pdfpipe.convert.image")

_DIRECT_MODES = {"RGB", "RGBA", "L"}


def _load_image(data: bytes, name: str) -> Image.Image:
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            if img.mode in _DIRECT_MODES:
                return img.copy()
            has_alpha = img.mode in {"LA", "PA", "P"} and (
                img.mode != "P" or "transparency" in img.info
            )
            return img.convert("RGBA" if has_alpha else "RGB")
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
        raise RenderError(f"Unable to decode image {name}: {exc}") from exc


def render_image_page(img: Image.Image) -> bytes:
    """Place *img* at the origin of a page sized to its pixel dimensions."""

    width, height = img.size
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=(width, height))
    pdf.drawImage(ImageReader(img), 0, 0, width=width, height=height, mask="auto")
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


class ImageConverter:
    name = "image"

    def convert(self, source: SourceFile) -> bytes:
        try:
            data = source.temporary_path.read_bytes()
        except OSError as exc:
            raise RenderError(f"Unable to read image {source.original_name}: {exc}") from exc

        img = _load_image(data, source.original_name)
        LOGGER.debug("Embedding %s (%dx%d, %s)", source.original_name, img.width, img.height, img.mode)
        try:
            return render_image_page(img)
        except Exception as exc:
            LOGGER.error("Image embedding failed for %s: %s", source.original_name, exc)
            raise RenderError(f"Failed to embed image {source.original_name}: {exc}") from exc
        finally:
            img.close()


__all__ = ["ImageConverter", "render_image_page"]
