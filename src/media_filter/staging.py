"""Temporary staging files for tools that need random access to their input."""

import logging
import os
import shutil
import tempfile
import warnings
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

from .exceptions import CleanupWarning, StagingError

logger = logging.getLogger(__name__)

STAGING_PREFIX = "DSfilt"


def stage_source(
    source: BinaryIO,
    suffix: str = "",
    directory: Path | None = None,
) -> Path:
    """Copy a source stream into a new, uniquely named temporary file.

    The source stream is closed whether or not the copy succeeds. If the copy
    fails the partially written file is removed before the error is raised.

    Args:
        source: Readable binary stream holding the source asset
        suffix: File name suffix for the staging file (e.g. ".pdf")
        directory: Directory for the staging file (default: system temp dir)

    Returns:
        Path to the staging file

    Raises:
        StagingError: If the file cannot be created or written
    """
    try:
        try:
            fd, name = tempfile.mkstemp(prefix=STAGING_PREFIX, suffix=suffix, dir=directory)
        except OSError as e:
            raise StagingError(f"Unable to create staging file: {e}") from e

        path = Path(name)
        try:
            with os.fdopen(fd, "wb") as dest:
                shutil.copyfileobj(source, dest)
        except (OSError, ValueError) as e:
            remove_staging_file(path)
            raise StagingError(f"Unable to copy source to staging file {path}: {e}") from e
        except BaseException:
            remove_staging_file(path)
            raise
    finally:
        source.close()

    logger.debug(f"Staged source to {path} ({path.stat().st_size} bytes)")
    return path


def remove_staging_file(path: Path) -> bool:
    """Delete a staging file, logging instead of raising on failure.

    Returns:
        True if the file no longer exists, False if deletion failed
    """
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        message = f"Unable to delete temporary file {path}: {e}"
        logger.error(message)
        warnings.warn(message, CleanupWarning, stacklevel=2)
        return False
    return True


@contextmanager
def staged_copy(
    source: BinaryIO,
    suffix: str = "",
    directory: Path | None = None,
) -> Iterator[Path]:
    """Stage a source stream for the duration of a with-block.

    The staging file is deleted when the block exits, on success or error.
    """
    path = stage_source(source, suffix=suffix, directory=directory)
    try:
        yield path
    finally:
        remove_staging_file(path)
