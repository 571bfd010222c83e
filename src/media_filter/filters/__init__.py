"""Media filter implementations."""

from .media_filter import MediaFilter
from .pdf_thumbnail import PDFThumbnailFilter
from .registry import FILTERS, create_filter, load_filters
from .subprocess_filter import SubprocessFilter
from .xpdf_text import XPDFTextFilter

__all__ = [
    "FILTERS",
    "MediaFilter",
    "PDFThumbnailFilter",
    "SubprocessFilter",
    "XPDFTextFilter",
    "create_filter",
    "load_filters",
]
