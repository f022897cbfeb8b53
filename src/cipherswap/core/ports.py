"""Port interfaces for hexagonal architecture.

Ports define contracts that adapters must implement. The orchestrator
depends only on these protocols, never on a concrete cipher or digest.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from typing import BinaryIO

ProgressCallback = Callable[[int, int], None]


@runtime_checkable
class BlockDecrypterPort(Protocol):
    """Decrypts one fixed-size block of ciphertext."""

    def decrypt_block(self, block: bytes, index: int) -> bytes:
        """Decrypt a single block.

        Args:
            block: Ciphertext of at most one block length.
            index: Zero-based position of the block in the stream. Ciphers
                that derive a per-block IV use it; others may ignore it.

        Returns:
            The plaintext for this block.

        Raises:
            CipherError: If the block cannot be decrypted (e.g. misaligned).
        """
        ...


@runtime_checkable
class StreamDecrypterPort(Protocol):
    """Decrypts a whole byte stream while digesting the plaintext."""

    def decrypt(
        self,
        source: BinaryIO,
        sink: BinaryIO,
        progress: ProgressCallback | None = None,
        total: int = 0,
    ) -> bytes:
        """Decrypt source into sink and return the plaintext digest.

        Consumes source until EOF. Neither stream is retained after the
        call returns.

        Args:
            source: Readable binary stream of ciphertext.
            sink: Writable binary stream receiving plaintext.
            progress: Optional callback function(bytes_processed, total).
            total: Total ciphertext bytes, passed through to progress.

        Returns:
            The finalized digest over every plaintext byte written.
        """
        ...


@runtime_checkable
class ProgressReporter(Protocol):
    """Reports decryption progress to the user.

    The orchestrator uses this to report progress without depending
    on any specific UI library.
    """

    def start_task(self, name: str, total: int) -> ProgressCallback:
        """Start tracking a decryption task.

        Args:
            name: Unique key for the task (the file path).
            total: Total bytes to decrypt.

        Returns:
            A ProgressCallback to call with (bytes_processed, total_bytes).
        """
        ...

    def finish_task(self, name: str) -> None:
        """Mark a task as complete.

        Args:
            name: The task name passed to start_task().
        """
        ...


class NullProgressReporter:
    """A ProgressReporter that produces no output.

    Used as the default when no progress reporting is desired.
    """

    def start_task(self, name: str, total: int) -> ProgressCallback:  # noqa: ARG002
        """Return a no-op callback."""
        return lambda _processed, _total: None

    def finish_task(self, name: str) -> None:
        """Do nothing."""
        _ = name  # Unused but required by protocol
