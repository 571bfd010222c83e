"""Thumbnail filter for PDF sources.

Renders the first page of a PDF to a small JPEG using PyMuPDF, in process.
The thumbnail fits within thumbnail.maxwidth x thumbnail.maxheight pixels
(default 80 x 80); pages smaller than that are not enlarged.
"""

import io
import logging
from typing import BinaryIO

import fitz  # PyMuPDF

from media_filter.exceptions import ConversionError, StagingError
from schemas.descriptor import FilterDescriptor

from .media_filter import MediaFilter

logger = logging.getLogger(__name__)

DEFAULT_MAX_WIDTH = 80
DEFAULT_MAX_HEIGHT = 80


def thumbnail_scale(width: float, height: float, max_width: int, max_height: int) -> float:
    """Return the zoom factor that fits a page within the thumbnail bounds."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid page size {width}x{height}")
    return min(1.0, max_width / width, max_height / height)


class PDFThumbnailFilter(MediaFilter):
    """Render page 1 of a PDF to a JPEG thumbnail."""

    descriptor = FilterDescriptor(
        name="pdfthumbnail",
        suffix=".jpg",
        bundle_name="THUMBNAIL",
        format_string="JPEG",
        description="Generated Thumbnail",
        source_suffixes=(".pdf",),
    )

    @property
    def max_width(self) -> int:
        return self.config.get_int("thumbnail.maxwidth", DEFAULT_MAX_WIDTH)

    @property
    def max_height(self) -> int:
        return self.config.get_int("thumbnail.maxheight", DEFAULT_MAX_HEIGHT)

    def get_destination_stream(self, source: BinaryIO, verbose: bool = False) -> BinaryIO:
        try:
            data = source.read()
        except (OSError, ValueError) as e:
            raise StagingError(f"Unable to read source: {e}") from e
        finally:
            source.close()

        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except (RuntimeError, ValueError) as e:
            raise ConversionError(f"Unable to open PDF: {e}") from e

        try:
            if doc.page_count == 0:
                raise ConversionError("PDF has no pages")

            page = doc[0]
            scale = thumbnail_scale(
                page.rect.width, page.rect.height, self.max_width, self.max_height
            )
            pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale))
            jpeg = pix.tobytes("jpeg")
        except (RuntimeError, ValueError) as e:
            raise ConversionError(f"Unable to render thumbnail: {e}") from e
        finally:
            doc.close()

        logger.log(
            logging.INFO if verbose else logging.DEBUG,
            f"Rendered {pix.width}x{pix.height} thumbnail ({len(jpeg)} bytes)",
        )
        return io.BytesIO(jpeg)
