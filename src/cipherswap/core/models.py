"""Core domain models for cipherswap.

These models are pure Python dataclasses with no I/O dependencies.
They describe the outcome of an in-place decryption.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class TruncateOutcome(Enum):
    """What the length corrector did to a decrypted file."""

    SKIPPED = "skipped"
    UNCHANGED = "unchanged"
    TRUNCATED = "truncated"
    UNDERSIZED = "undersized"


@dataclass(frozen=True, slots=True)
class DecryptResult:
    """Result of decrypting one file in place.

    Attributes:
        path: The file that now holds plaintext.
        digest: Digest over every plaintext byte the decrypter emitted,
            computed before any truncation.
        bytes_written: Number of plaintext bytes the decrypter emitted.
        final_size: Size of the file on disk after length correction.
        outcome: What the length corrector did.

    Example:
        >>> result = DecryptResult(
        ...     path=Path("photo.jpg"),
        ...     digest=bytes(20),
        ...     bytes_written=8192,
        ...     final_size=8000,
        ...     outcome=TruncateOutcome.TRUNCATED,
        ... )
        >>> result.trimmed
        192
    """

    path: Path
    digest: bytes
    bytes_written: int
    final_size: int
    outcome: TruncateOutcome

    def __post_init__(self) -> None:
        """Validate sizes after initialization."""
        if self.bytes_written < 0:
            raise ValueError("bytes_written cannot be negative")
        if self.final_size < 0:
            raise ValueError("final_size cannot be negative")

    @property
    def hexdigest(self) -> str:
        """The digest as a lowercase hex string."""
        return self.digest.hex()

    @property
    def trimmed(self) -> int:
        """Number of trailing bytes removed by the length corrector."""
        return max(self.bytes_written - self.final_size, 0)
