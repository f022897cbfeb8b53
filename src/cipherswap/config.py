"""Configuration for cipherswap.

Settings can be passed explicitly or read from CIPHERSWAP_* environment
variables. The temp directory defaults to the source file's own directory
so that the ciphertext hand-off stays a same-volume rename.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Self

from cipherswap.core.exceptions import ConfigurationError


BLOCK_LENGTH = 0x1000

# AES block size; stream blocks must stay aligned to it
CIPHER_BLOCK_SIZE = 16

ENV_TEMP_DIR = "CIPHERSWAP_TEMP_DIR"
ENV_BLOCK_LENGTH = "CIPHERSWAP_BLOCK_LENGTH"
ENV_ALLOW_CROSS_DEVICE = "CIPHERSWAP_ALLOW_CROSS_DEVICE"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True, slots=True)
class DecrypterConfig:
    """Settings for in-place decryption.

    Attributes:
        block_length: Bytes of ciphertext decrypted per transform call.
        temp_dir: Directory for the temporary ciphertext copy. If None,
            the source file's parent directory is used.
        allow_cross_device: Whether to fall back to copy-then-delete when
            the temp directory is on another volume.
    """

    block_length: int = BLOCK_LENGTH
    temp_dir: Path | None = None
    allow_cross_device: bool = True

    def __post_init__(self) -> None:
        """Validate block length after initialization."""
        if self.block_length <= 0 or self.block_length % CIPHER_BLOCK_SIZE:
            raise ConfigurationError(
                f"block_length must be a positive multiple of {CIPHER_BLOCK_SIZE}, "
                f"got {self.block_length}"
            )

    def with_temp_dir(self, temp_dir: Path | None) -> Self:
        """Return a new config with the specified temp directory."""
        return replace(self, temp_dir=temp_dir)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Self:
        """Build a config from CIPHERSWAP_* environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            Config with defaults for any variable that is unset or empty.

        Raises:
            ConfigurationError: If a variable holds an invalid value.
        """
        if environ is None:
            environ = os.environ

        temp_dir_value = environ.get(ENV_TEMP_DIR, "").strip()
        temp_dir = Path(temp_dir_value).expanduser() if temp_dir_value else None

        block_value = environ.get(ENV_BLOCK_LENGTH, "").strip()
        try:
            block_length = int(block_value, 0) if block_value else BLOCK_LENGTH
        except ValueError:
            raise ConfigurationError(
                f"{ENV_BLOCK_LENGTH} must be an integer, got {block_value!r}"
            ) from None

        cross_value = environ.get(ENV_ALLOW_CROSS_DEVICE, "").strip().lower()
        if not cross_value:
            allow_cross_device = True
        elif cross_value in _TRUTHY:
            allow_cross_device = True
        elif cross_value in _FALSY:
            allow_cross_device = False
        else:
            raise ConfigurationError(
                f"{ENV_ALLOW_CROSS_DEVICE} must be a boolean, got {cross_value!r}"
            )

        return cls(
            block_length=block_length,
            temp_dir=temp_dir,
            allow_cross_device=allow_cross_device,
        )


def resolve_temp_dir(
    file: Path,
    temp_dir: Path | None = None,
    config: DecrypterConfig | None = None,
) -> Path:
    """Pick the directory that will hold the temporary ciphertext.

    Searches in the following priority order:
    1. The explicit temp_dir argument
    2. config.temp_dir
    3. The parent directory of file

    Args:
        file: The file about to be decrypted.
        temp_dir: Explicit directory, if the caller supplied one.
        config: Optional configuration to fall back on.

    Returns:
        Directory path for the temporary file.

    Example:
        >>> resolve_temp_dir(Path("/data/photo.jpg"))
        PosixPath('/data')
    """
    if temp_dir is not None:
        return Path(temp_dir)
    if config is not None and config.temp_dir is not None:
        return config.temp_dir
    return Path(file).parent
