"""Block stream decrypter implementing StreamDecrypterPort."""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from cipherswap.config import BLOCK_LENGTH


if TYPE_CHECKING:
    from typing import BinaryIO

    from cipherswap.core.ports import BlockDecrypterPort, ProgressCallback

DigestFactory = Callable[[], Any]


class BlockStreamDecrypter:
    """Decrypts a stream block by block while hashing the plaintext.

    Reads block_length bytes at a time, so memory use stays bounded by one
    block regardless of file size. A fresh digest is created per call and
    no per-call state is kept, so one instance can serve several threads.

    Attributes:
        block_length: Bytes of ciphertext per transform call.
    """

    def __init__(
        self,
        block_decrypter: BlockDecrypterPort,
        digest_factory: DigestFactory = hashlib.sha1,
        block_length: int = BLOCK_LENGTH,
    ) -> None:
        """Initialize the stream decrypter.

        Args:
            block_decrypter: Transform applied to each block.
            digest_factory: Zero-argument callable returning a hashlib-style
                object with update() and digest().
            block_length: Bytes of ciphertext per block.
        """
        if block_length <= 0:
            raise ValueError(f"block_length must be positive, got {block_length}")
        self._block_decrypter = block_decrypter
        self._digest_factory = digest_factory
        self.block_length = block_length

    def decrypt(
        self,
        source: BinaryIO,
        sink: BinaryIO,
        progress: ProgressCallback | None = None,
        total: int = 0,
    ) -> bytes:
        """Decrypt source into sink and return the plaintext digest.

        Args:
            source: Readable binary stream of ciphertext.
            sink: Writable binary stream receiving plaintext.
            progress: Optional callback function(bytes_processed, total).
            total: Total ciphertext bytes, passed through to progress.

        Returns:
            Digest over every plaintext byte written to sink.

        Raises:
            CipherError: If a block cannot be decrypted.
            OSError: If reading or writing fails.
        """
        digest = self._digest_factory()
        processed = 0

        for index, block in enumerate(iter(lambda: source.read(self.block_length), b"")):
            plaintext = self._block_decrypter.decrypt_block(block, index)
            sink.write(plaintext)
            digest.update(plaintext)
            processed += len(block)
            if progress:
                progress(processed, total)

        return digest.digest()
