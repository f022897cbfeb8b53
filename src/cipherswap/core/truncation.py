"""Length correction for decrypted files.

Block ciphers pad their output to a block boundary, so a decrypted file can
carry trailing bytes past the true plaintext length. truncate() trims them.
It never extends a file: a file shorter than the declared size only produces
a warning.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from cipherswap.core.exceptions import TruncationError
from cipherswap.core.models import TruncateOutcome


_logger = logging.getLogger(__name__)


def truncate(
    path: Path, to: int, logger: logging.Logger | None = None
) -> TruncateOutcome:
    """Shrink path to exactly `to` bytes if it is longer.

    Args:
        path: The decrypted file.
        to: Declared plaintext size. 0 means unknown, and leaves the file alone.
        logger: Logger for diagnostics. Defaults to the module logger.

    Returns:
        What was done to the file.

    Raises:
        TruncationError: If the size probe or the truncate call fails.
    """
    log = logger or _logger

    if to == 0:
        return TruncateOutcome.SKIPPED

    try:
        size = os.stat(path).st_size
    except OSError as e:
        raise TruncationError(
            f"Cannot read size of {path}: {e.strerror or e}",
            path=Path(path),
            size=to,
            cause=e,
        ) from e

    if size > to:
        try:
            os.truncate(path, to)
        except OSError as e:
            raise TruncationError(
                f"Cannot truncate {path} to {to} bytes: {e.strerror or e}",
                path=Path(path),
                size=to,
                cause=e,
            ) from e
        log.debug("-- truncate() - truncated: %s, %d > %d", path, size, to)
        return TruncateOutcome.TRUNCATED

    if size < to:
        log.warning("-- truncate() - cannot truncate: %s, %d < %d", path, size, to)
        return TruncateOutcome.UNDERSIZED

    return TruncateOutcome.UNCHANGED
