"""Core domain services for cipherswap."""

import logging
from pathlib import Path
from typing import BinaryIO

from cipherswap.config import DecrypterConfig, resolve_temp_dir
from cipherswap.core.exceptions import StreamDecryptError
from cipherswap.core.models import DecryptResult, TruncateOutcome
from cipherswap.core.ports import (
    NullProgressReporter,
    ProgressReporter,
    StreamDecrypterPort,
)
from cipherswap.core.temp_paths import (
    TempNameFactory,
    relocate,
    remove_quietly,
    temp_file_path,
)
from cipherswap.core.truncation import truncate


_logger = logging.getLogger(__name__)


class FileDecrypter:
    """Decrypts a file in place through a temporary ciphertext copy.

    The ciphertext is moved to a temporary path, then streamed through the
    injected decrypter into a recreated file at the original path. The
    temporary file is removed on every exit path.

    Example:
        >>> decrypter = FileDecrypter.for_key(key)
        >>> digest = decrypter.decrypt(Path("photo.jpg"), decrypted_size=81234)
    """

    def __init__(
        self,
        stream_decrypter: StreamDecrypterPort,
        *,
        logger: logging.Logger | None = None,
        temp_name_factory: TempNameFactory | None = None,
        config: DecrypterConfig | None = None,
    ) -> None:
        self._stream_decrypter = stream_decrypter
        self._logger = logger or _logger
        self._temp_name_factory = temp_name_factory
        self._config = config or DecrypterConfig()

    @classmethod
    def for_key(
        cls,
        key: bytes,
        *,
        logger: logging.Logger | None = None,
        config: DecrypterConfig | None = None,
    ) -> "FileDecrypter":
        """Create a FileDecrypter using the default AES-CBC block stream.

        Args:
            key: Raw AES key bytes (16, 24 or 32 bytes).
            logger: Optional logger for diagnostics.
            config: Optional settings; block_length is taken from here.

        Returns:
            FileDecrypter with a BlockStreamDecrypter over AesCbcBlockDecrypter.

        Raises:
            CipherError: If the key length is not supported.
        """
        from cipherswap.adapters.cipher import create_stream_decrypter

        config = config or DecrypterConfig()
        stream = create_stream_decrypter(key, block_length=config.block_length)
        return cls(stream, logger=logger, config=config)

    @property
    def config(self) -> DecrypterConfig:
        """The settings this decrypter runs with."""
        return self._config

    def decrypt(
        self,
        file: Path,
        decrypted_size: int,
        temp_dir: Path | None = None,
        progress: ProgressReporter | None = None,
    ) -> bytes:
        """Decrypt file in place and return the plaintext digest.

        Args:
            file: Existing, readable and writable file holding ciphertext.
            decrypted_size: Expected plaintext length. 0 disables truncation.
            temp_dir: Directory for the temporary ciphertext. Defaults to
                the configured directory, then the file's own directory.
            progress: Optional progress reporter.

        Returns:
            Digest over the full decrypted stream, before truncation.

        Raises:
            ValueError: If decrypted_size is negative.
            RelocationError: If the file cannot be moved aside.
            StreamDecryptError: If decryption fails mid-stream.
            TruncationError: If the decrypted file cannot be truncated.
        """
        return self.decrypt_with_result(file, decrypted_size, temp_dir, progress).digest

    def decrypt_with_result(
        self,
        file: Path,
        decrypted_size: int,
        temp_dir: Path | None = None,
        progress: ProgressReporter | None = None,
    ) -> DecryptResult:
        """Decrypt file in place and describe what happened.

        Same contract as decrypt(), returning a DecryptResult instead of
        the bare digest.
        """
        if decrypted_size < 0:
            raise ValueError(f"decrypted_size cannot be negative: {decrypted_size}")

        file = Path(file)
        directory = resolve_temp_dir(file, temp_dir, self._config)
        temp_file = temp_file_path(directory, self._temp_name_factory)

        try:
            relocate(
                file,
                temp_file,
                allow_cross_device=self._config.allow_cross_device,
                logger=self._logger,
            )

            digest, written = self._decrypt_stream(
                temp_file, file, progress or NullProgressReporter()
            )

            outcome = truncate(file, decrypted_size, logger=self._logger)

        finally:
            remove_quietly(temp_file, logger=self._logger)

        final_size = decrypted_size if outcome is TruncateOutcome.TRUNCATED else written
        self._logger.debug(
            "-- decrypt() - decrypted: %s, %d bytes, %s", file, final_size, outcome.value
        )

        return DecryptResult(
            path=file,
            digest=digest,
            bytes_written=written,
            final_size=final_size,
            outcome=outcome,
        )

    def _decrypt_stream(
        self, temp_file: Path, file: Path, progress: ProgressReporter
    ) -> tuple[bytes, int]:
        """Stream temp_file through the decrypter into a recreated file.

        Returns:
            Tuple of (digest, plaintext bytes written).
        """
        try:
            total = temp_file.stat().st_size
            with temp_file.open("rb") as source, file.open("wb") as sink:
                callback = progress.start_task(str(file), total)
                try:
                    digest = self._stream_decrypter.decrypt(
                        source, sink, progress=callback, total=total
                    )
                finally:
                    progress.finish_task(str(file))
                written = _position(sink)
        except Exception as e:
            raise StreamDecryptError(
                f"Failed to decrypt {file}: {e}",
                path=file,
                temp_path=temp_file,
                cause=e,
            ) from e

        return digest, written


def _position(stream: BinaryIO) -> int:
    """Return the write position of a sequentially written stream."""
    stream.flush()
    return stream.tell()


def decrypt_file(
    file: Path,
    key: bytes,
    decrypted_size: int,
    temp_dir: Path | None = None,
    *,
    logger: logging.Logger | None = None,
    progress: ProgressReporter | None = None,
    config: DecrypterConfig | None = None,
) -> bytes:
    """Decrypt file in place with the default cipher and return its digest.

    Convenience wrapper around FileDecrypter.for_key(key).decrypt(...).

    Args:
        file: File holding ciphertext.
        key: Raw AES key bytes.
        decrypted_size: Expected plaintext length. 0 disables truncation.
        temp_dir: Directory for the temporary ciphertext.
        logger: Optional logger for diagnostics.
        progress: Optional progress reporter.
        config: Optional settings.

    Returns:
        SHA-1 digest (20 bytes) over the decrypted stream.
    """
    decrypter = FileDecrypter.for_key(key, logger=logger, config=config)
    return decrypter.decrypt(file, decrypted_size, temp_dir, progress)
