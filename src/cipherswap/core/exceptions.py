"""Domain exceptions for cipherswap.

All library errors inherit from CipherswapError, allowing users to catch
any library exception with a single except clause. Each exception provides
a recovery_hint property with guidance on resolving the error.

File operation failures additionally inherit from OSError through
DecryptIOError, so callers that only care about "an I/O error happened"
can keep catching OSError.
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from pathlib import Path


class CipherswapError(Exception):
    """Base class for all cipherswap exceptions.

    Catch this to handle any error from the library.
    """

    @property
    def recovery_hint(self) -> str | None:
        """Optional guidance on how to resolve this error."""
        return None


class DecryptIOError(CipherswapError, OSError):
    """Base class for file operation failures during in-place decryption.

    Attributes:
        path: The source file being decrypted.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        path: Path,
        cause: Exception | None = None,
    ) -> None:
        self.path = path
        self.cause = cause
        super().__init__(message)


class RelocationError(DecryptIOError):
    """Raised when the source file cannot be moved to the temporary path.

    Nothing has been modified when this is raised: the ciphertext is still
    at the source path.

    Attributes:
        dest: The temporary path the file was being moved to.
    """

    def __init__(
        self,
        message: str,
        path: Path,
        dest: Path,
        cause: Exception | None = None,
    ) -> None:
        self.dest = dest
        super().__init__(message, path=path, cause=cause)

    @property
    def recovery_hint(self) -> str:
        """Suggest checking the source and temp directory."""
        return (
            f"Check that {self.path} exists and that {self.dest.parent} is "
            "writable and on the same volume"
        )


class StreamDecryptError(DecryptIOError):
    """Raised when reading, decrypting or writing fails mid-stream.

    The source path holds whatever plaintext was flushed before the failure.

    Attributes:
        temp_path: The temporary path that held the ciphertext.
    """

    def __init__(
        self,
        message: str,
        path: Path,
        temp_path: Path,
        cause: Exception | None = None,
    ) -> None:
        self.temp_path = temp_path
        super().__init__(message, path=path, cause=cause)

    @property
    def recovery_hint(self) -> str:
        """Explain the state the source file was left in."""
        return (
            f"{self.path} is partially decrypted; restore it from a copy of "
            "the ciphertext before retrying"
        )


class TruncationError(DecryptIOError):
    """Raised when the decrypted file cannot be sized or truncated.

    Attributes:
        size: The requested decrypted size.
    """

    def __init__(
        self,
        message: str,
        path: Path,
        size: int,
        cause: Exception | None = None,
    ) -> None:
        self.size = size
        super().__init__(message, path=path, cause=cause)

    @property
    def recovery_hint(self) -> str:
        """Explain that the plaintext is in place but may be oversized."""
        return f"{self.path} is decrypted but may be longer than {self.size} bytes"


class CipherError(CipherswapError, ValueError):
    """Raised for invalid keys or ciphertext the cipher cannot process."""

    @property
    def recovery_hint(self) -> str:
        """Suggest checking key material and file integrity."""
        return "Check the key length and that the file is not truncated"


class ConfigurationError(CipherswapError):
    """Raised for configuration problems (bad environment values)."""

    pass
