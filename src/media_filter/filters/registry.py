"""Registry of the available media filters.

Filters are selected by plugin name through the comma-separated
"filter.plugins" configuration key.
"""

import logging

from media_filter.config import Configuration
from media_filter.exceptions import ConfigurationError

from .media_filter import MediaFilter
from .pdf_thumbnail import PDFThumbnailFilter
from .xpdf_text import XPDFTextFilter

logger = logging.getLogger(__name__)

FILTERS: dict[str, type[MediaFilter]] = {
    XPDFTextFilter.descriptor.name: XPDFTextFilter,
    PDFThumbnailFilter.descriptor.name: PDFThumbnailFilter,
}


def create_filter(name: str, config: Configuration | None = None) -> MediaFilter:
    """Instantiate a registered filter by plugin name.

    Raises:
        ConfigurationError: If no filter is registered under name
    """
    try:
        filter_class = FILTERS[name]
    except KeyError:
        known = ", ".join(FILTERS)
        raise ConfigurationError(f"Unknown media filter: {name} (known: {known})") from None
    return filter_class(config)


def load_filters(config: Configuration, names: list[str] | None = None) -> list[MediaFilter]:
    """Instantiate the configured filters, in configured order.

    Args:
        config: Configuration passed to every filter
        names: Plugin names to load; defaults to the "filter.plugins"
               setting, or every registered filter if that is unset

    Returns:
        List of filter instances
    """
    if names is None:
        names = config.get_list("filter.plugins", default=list(FILTERS))
    filters = [create_filter(name, config) for name in names]
    logger.debug(f"Loaded media filters: {[f.name for f in filters]}")
    return filters
