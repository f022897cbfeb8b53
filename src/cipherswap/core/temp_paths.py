"""Temporary path helpers for the ciphertext hand-off.

The orchestrator moves the ciphertext out of the way before recreating the
source path. These helpers name the temporary file, perform the move and
remove the temporary file afterwards.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
import uuid
from collections.abc import Callable
from pathlib import Path

from cipherswap.core.exceptions import RelocationError


_logger = logging.getLogger(__name__)

TempNameFactory = Callable[[], str]


def random_temp_name() -> str:
    """Return a fresh random UUID string."""
    return str(uuid.uuid4())


def temp_file_path(
    temp_dir: Path, name_factory: TempNameFactory | None = None
) -> Path:
    """Build a unique temporary file path inside temp_dir.

    Args:
        temp_dir: Directory to place the temporary file in.
        name_factory: Callable producing the file name. Defaults to a
            random UUID, so names are never reused across calls.

    Returns:
        Path to a file that does not yet exist (with overwhelming probability).
    """
    factory = name_factory or random_temp_name
    return Path(temp_dir) / factory()


def relocate(
    source: Path,
    dest: Path,
    *,
    allow_cross_device: bool = True,
    logger: logging.Logger | None = None,
) -> None:
    """Move source to dest, replacing anything already at dest.

    On one volume this is a single atomic rename. When dest is on another
    volume and allow_cross_device is set, the file is copied to dest and the
    source removed afterwards. A crash during the copy leaves the source
    intact.

    Args:
        source: The file to move.
        dest: The destination path.
        allow_cross_device: Permit the copy-then-delete fallback.
        logger: Logger for diagnostics. Defaults to the module logger.

    Raises:
        RelocationError: If the move fails.
    """
    log = logger or _logger
    try:
        os.replace(source, dest)
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise RelocationError(
                f"Cannot move {source} to {dest}: {e.strerror or e}",
                path=source,
                dest=dest,
                cause=e,
            ) from e
        if not allow_cross_device:
            raise RelocationError(
                f"Cannot move {source} to {dest}: temp directory is on another volume",
                path=source,
                dest=dest,
                cause=e,
            ) from e
    else:
        log.debug("-- relocate() - renamed: %s > %s", source, dest)
        return

    log.warning(
        "-- relocate() - cross-device move, copying: %s > %s", source, dest
    )
    try:
        shutil.copy2(source, dest)
        Path(source).unlink()
    except OSError as e:
        remove_quietly(dest, logger=log)
        raise RelocationError(
            f"Cannot copy {source} to {dest}: {e.strerror or e}",
            path=source,
            dest=dest,
            cause=e,
        ) from e


def remove_quietly(path: Path, logger: logging.Logger | None = None) -> bool:
    """Delete path if it exists, logging instead of raising on failure.

    Args:
        path: The file to delete.
        logger: Logger for diagnostics. Defaults to the module logger.

    Returns:
        True if the path no longer exists, False if deletion failed.
    """
    log = logger or _logger
    try:
        Path(path).unlink(missing_ok=True)
    except OSError as e:
        log.warning("-- remove_quietly() - failed to delete temporary file: %s: %s", path, e)
        return False
    return True
