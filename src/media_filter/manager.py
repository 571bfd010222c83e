"""Media filter manager for item directories.

Applies the configured filters to every ORIGINAL bitstream of an item and
files the derivatives in their bundles. Items are processed one bitstream and
one filter at a time.
"""

import hashlib
import json
import logging
import shutil
from pathlib import Path
from typing import BinaryIO

from pydantic import ValidationError

from media_filter.exceptions import ManifestError, MediaFilterError, StagingError
from media_filter.filters.media_filter import MediaFilter
from schemas.item import ORIGINAL_BUNDLE, BitstreamRecord, ItemManifest

logger = logging.getLogger(__name__)

MANIFEST_NAME = "item-manifest.json"


class MediaFilterManager:
    """Run media filters over the ORIGINAL bundle of item directories.

    The MediaFilterManager:
    1. Loads the item manifest, or builds one from the ORIGINAL/ directory
    2. For each ORIGINAL bitstream and each filter that accepts it:
       a. Skips it if the derivative already exists (unless force is set)
       b. Runs the filter and writes the derivative to {bundle}/{name}
       c. Records the derivative in the manifest
    3. Writes the updated item manifest

    Attributes:
        filters: Filters to apply, in order
        force: Regenerate derivatives that already exist
        verbose: Passed through to each filter
    """

    def __init__(
        self,
        filters: list[MediaFilter],
        force: bool = False,
        verbose: bool = False,
    ):
        self.filters = filters
        self.force = force
        self.verbose = verbose

    def filter_item(self, item_path: Path) -> ItemManifest:
        """Apply all filters to one item directory.

        Filter errors are logged and recorded in the manifest's
        filter_errors; processing continues with the next bitstream.

        Args:
            item_path: Path to the item directory

        Returns:
            The updated ItemManifest
        """
        manifest = self._load_item_manifest(item_path)
        manifest.filter_errors = []
        originals = list(manifest.bundle(ORIGINAL_BUNDLE).bitstreams)
        logger.info(f"Filtering item {manifest.id} with {len(originals)} original bitstreams")

        for bitstream in originals:
            for media_filter in self.filters:
                if not media_filter.can_filter(bitstream.name):
                    continue

                target_name = media_filter.filtered_name(bitstream.name)
                target_path = item_path / media_filter.bundle_name / target_name
                if target_path.exists() and not self.force:
                    logger.info(f"SKIPPED: {target_name} already exists in {media_filter.bundle_name}")
                    continue

                try:
                    record = self.filter_bitstream(
                        media_filter,
                        item_path / bitstream.path,
                        item_path,
                        source_name=bitstream.name,
                    )
                except MediaFilterError as e:
                    logger.error(
                        f"{media_filter.name} failed for {bitstream.name} in {manifest.id}: {e}"
                    )
                    manifest.filter_errors.append(
                        f"{media_filter.name} failed for {bitstream.name}: {e}"
                    )
                    continue

                manifest.bundle(media_filter.bundle_name).put_bitstream(record)
                logger.info(f"FILTERED: {bitstream.name} -> {record.path}")

        self._write_item_manifest(item_path, manifest)
        return manifest

    def filter_bitstream(
        self,
        media_filter: MediaFilter,
        source_path: Path,
        item_path: Path,
        source_name: str | None = None,
    ) -> BitstreamRecord:
        """Apply one filter to one file and store the derivative.

        The derivative is written under a temporary name and renamed into
        place, so a failed run never leaves a truncated derivative behind.

        Args:
            media_filter: Filter to apply
            source_path: Path to the source file
            item_path: Item directory that receives the bundle directory
            source_name: Bitstream name the derivative is named after
                (defaults to the source file's name)

        Returns:
            BitstreamRecord for the stored derivative

        Raises:
            MediaFilterError: If the source cannot be read or the filter fails
        """
        try:
            source = source_path.open("rb")
        except OSError as e:
            raise StagingError(f"Unable to open source {source_path}: {e}") from e

        if source_name is None:
            source_name = source_path.name

        derivative = media_filter.get_destination_stream(source, verbose=self.verbose)

        bundle_dir = item_path / media_filter.bundle_name
        bundle_dir.mkdir(parents=True, exist_ok=True)
        target_name = media_filter.filtered_name(source_name)
        target = bundle_dir / target_name
        write_derivative(derivative, target)

        return BitstreamRecord(
            name=target_name,
            path=target.relative_to(item_path).as_posix(),
            size_bytes=target.stat().st_size,
            checksum=_md5(target),
            format_string=media_filter.format_string,
            description=media_filter.description,
            source=source_name,
        )

    def _load_item_manifest(self, item_path: Path) -> ItemManifest:
        """Load the item manifest and add any unrecorded ORIGINAL files."""
        manifest_path = item_path / MANIFEST_NAME
        if manifest_path.exists():
            try:
                data = json.loads(manifest_path.read_text())
                manifest = ItemManifest.model_validate(data)
            except (OSError, json.JSONDecodeError, ValidationError) as e:
                raise ManifestError(f"Cannot load item manifest {manifest_path}: {e}") from e
        else:
            manifest = ItemManifest(id=item_path.name)

        original = manifest.bundle(ORIGINAL_BUNDLE)
        original_dir = item_path / ORIGINAL_BUNDLE
        if original_dir.is_dir():
            for file_path in sorted(original_dir.iterdir()):
                if file_path.is_file() and original.get_bitstream(file_path.name) is None:
                    original.put_bitstream(
                        BitstreamRecord(
                            name=file_path.name,
                            path=file_path.relative_to(item_path).as_posix(),
                            size_bytes=file_path.stat().st_size,
                            checksum=_md5(file_path),
                        )
                    )
        return manifest

    def _write_item_manifest(self, item_path: Path, manifest: ItemManifest) -> None:
        """Write the updated item manifest to disk."""
        manifest_path = item_path / MANIFEST_NAME
        manifest_path.write_text(manifest.model_dump_json(indent=2, exclude_none=True))
        logger.debug(f"Wrote item manifest to {manifest_path}")


def write_derivative(derivative: BinaryIO, target: Path) -> None:
    """Copy a derivative stream to target and close the stream.

    The bytes go to {target}.part first and are renamed into place, so a
    failed copy leaves neither a truncated target nor the partial file.

    Raises:
        StagingError: If the derivative cannot be written
    """
    partial = target.with_name(target.name + ".part")
    try:
        with derivative, partial.open("wb") as out:
            shutil.copyfileobj(derivative, out)
        partial.replace(target)
    except OSError as e:
        partial.unlink(missing_ok=True)
        raise StagingError(f"Unable to write derivative {target}: {e}") from e


def _md5(file_path: Path) -> str:
    md5 = hashlib.md5()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            md5.update(chunk)
    return md5.hexdigest()
