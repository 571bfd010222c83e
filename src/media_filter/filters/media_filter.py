"""Base class for media filters.

A media filter derives a new bitstream from a source bitstream, for example
extracted text or a thumbnail image. Each filter variant describes itself with
a FilterDescriptor and implements get_destination_stream().
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, ClassVar

from media_filter.config import Configuration
from schemas.descriptor import FilterDescriptor


class MediaFilter(ABC):
    """Abstract base class for media filters.

    Attributes:
        descriptor: Static metadata for the filter variant
        config: Configuration the filter reads its settings from
    """

    descriptor: ClassVar[FilterDescriptor]

    def __init__(self, config: Configuration | None = None):
        self.config = config or Configuration()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def bundle_name(self) -> str:
        return self.descriptor.bundle_name

    @property
    def format_string(self) -> str:
        return self.descriptor.format_string

    @property
    def description(self) -> str:
        return self.descriptor.description

    def filtered_name(self, source_name: str) -> str:
        """Return the derivative's file name for a source file name."""
        return source_name + self.descriptor.suffix

    def can_filter(self, source_name: str) -> bool:
        """Return True if the source file name has a suffix this filter accepts."""
        lowered = source_name.lower()
        return any(lowered.endswith(s.lower()) for s in self.descriptor.source_suffixes)

    @abstractmethod
    def get_destination_stream(self, source: BinaryIO, verbose: bool = False) -> BinaryIO:
        """Produce the derivative for a source asset.

        The source stream is consumed and closed. Either a complete
        derivative is returned or an exception is raised; partial output is
        never returned.

        Args:
            source: Readable binary stream of the source asset
            verbose: Log progress at INFO instead of DEBUG

        Returns:
            Readable binary stream of the derivative

        Raises:
            MediaFilterError: If the derivative cannot be produced
        """
        pass
