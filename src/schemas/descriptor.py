"""Filter descriptor schema.

Static metadata describing a media filter and the derivative it produces.
"""

from pydantic import BaseModel, ConfigDict


class FilterDescriptor(BaseModel):
    """Metadata for one media filter variant.

    Attributes:
        name: Plugin name the filter is registered and configured under
        suffix: Appended to the source file name to name the derivative
        bundle_name: Bundle the derivative is filed under (e.g. "TEXT")
        format_string: Format label of the derivative (e.g. "Text")
        description: Human-readable description of the derivative
        source_suffixes: File name endings of sources the filter accepts
    """

    model_config = ConfigDict(frozen=True)

    name: str
    suffix: str
    bundle_name: str
    format_string: str
    description: str
    source_suffixes: tuple[str, ...] = ()
