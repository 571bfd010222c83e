"""Item manifest schemas.

An item is a directory of bundles, each holding bitstream files:

    items/
    └── {item_id}/
        ├── item-manifest.json    # ItemManifest
        ├── ORIGINAL/
        │   └── report.pdf
        ├── TEXT/
        │   └── report.pdf.txt
        └── THUMBNAIL/
            └── report.pdf.jpg
"""

from pydantic import BaseModel

ORIGINAL_BUNDLE = "ORIGINAL"


class BitstreamRecord(BaseModel):
    """A file stored in a bundle.

    Attributes:
        name: File name within the bundle
        path: Path relative to the item directory
        size_bytes: Size of the file in bytes
        checksum: MD5 hex digest of the file contents
        format_string: Format label (set for derivatives)
        description: Description (set for derivatives)
        source: Name of the ORIGINAL bitstream a derivative was made from
    """

    name: str
    path: str
    size_bytes: int
    checksum: str
    format_string: str | None = None
    description: str | None = None
    source: str | None = None


class BundleRecord(BaseModel):
    """A named group of bitstreams."""

    name: str
    bitstreams: list[BitstreamRecord] = []

    def get_bitstream(self, name: str) -> BitstreamRecord | None:
        for bitstream in self.bitstreams:
            if bitstream.name == name:
                return bitstream
        return None

    def put_bitstream(self, record: BitstreamRecord) -> None:
        """Add a bitstream, replacing any existing record with the same name."""
        self.bitstreams = [b for b in self.bitstreams if b.name != record.name]
        self.bitstreams.append(record)


class ItemManifest(BaseModel):
    """Manifest for an item directory.

    Attributes:
        id: Item identifier (the directory name)
        bundles: Bundles keyed by name
        filter_errors: Errors recorded by the most recent filter run
    """

    id: str
    bundles: dict[str, BundleRecord] = {}
    filter_errors: list[str] = []

    model_config = {"extra": "allow"}

    def bundle(self, name: str) -> BundleRecord:
        """Return the named bundle, creating it if needed."""
        if name not in self.bundles:
            self.bundles[name] = BundleRecord(name=name)
        return self.bundles[name]
