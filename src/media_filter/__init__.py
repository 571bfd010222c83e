"""Media filters that derive text and thumbnails from repository bitstreams."""

__version__ = "0.1.0"
