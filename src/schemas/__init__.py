"""Schema definitions for media filters."""

from .descriptor import FilterDescriptor
from .item import ORIGINAL_BUNDLE, BitstreamRecord, BundleRecord, ItemManifest

__all__ = [
    "BitstreamRecord",
    "BundleRecord",
    "FilterDescriptor",
    "ItemManifest",
    "ORIGINAL_BUNDLE",
]
