"""AES-CBC block decrypter with per-block IVs.

Each block of the file is an independent CBC stream. Its IV is the
block's byte offset, encoded as a 16-byte little-endian integer and
encrypted with AES-ECB under an IV key: the first 16 bytes of SHA-1(key).
"""

from __future__ import annotations

import hashlib

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from cipherswap.config import BLOCK_LENGTH, CIPHER_BLOCK_SIZE
from cipherswap.core.exceptions import CipherError


_KEY_LENGTHS = (16, 24, 32)


class AesCbcBlockDecrypter:
    """Block decrypter implementing BlockDecrypterPort with AES-CBC.

    Attributes:
        block_length: Size of one file block, used to turn a block index
            into the byte offset that seeds its IV.
    """

    def __init__(self, key: bytes, block_length: int = BLOCK_LENGTH) -> None:
        """Initialize with raw key bytes.

        Args:
            key: AES key of 16, 24 or 32 bytes.
            block_length: File block size in bytes.

        Raises:
            CipherError: If the key length is not supported.
        """
        if len(key) not in _KEY_LENGTHS:
            raise CipherError(
                f"AES key must be 16, 24 or 32 bytes, got {len(key)}"
            )
        self._key = bytes(key)
        self._iv_cipher = Cipher(
            algorithms.AES(hashlib.sha1(key).digest()[:16]), modes.ECB()
        )
        self.block_length = block_length

    def block_iv(self, index: int) -> bytes:
        """Derive the IV for the block at the given index."""
        offset = index * self.block_length
        encryptor = self._iv_cipher.encryptor()
        return encryptor.update(offset.to_bytes(16, "little")) + encryptor.finalize()

    def decrypt_block(self, block: bytes, index: int) -> bytes:
        """Decrypt one block.

        Raises:
            CipherError: If block is not a multiple of the AES block size.
        """
        self._check_aligned(block)
        decryptor = Cipher(
            algorithms.AES(self._key), modes.CBC(self.block_iv(index))
        ).decryptor()
        return decryptor.update(block) + decryptor.finalize()

    def encrypt_block(self, block: bytes, index: int) -> bytes:
        """Encrypt one block; the inverse of decrypt_block()."""
        self._check_aligned(block)
        encryptor = Cipher(
            algorithms.AES(self._key), modes.CBC(self.block_iv(index))
        ).encryptor()
        return encryptor.update(block) + encryptor.finalize()

    @staticmethod
    def _check_aligned(block: bytes) -> None:
        if len(block) % CIPHER_BLOCK_SIZE:
            raise CipherError(
                f"Block length {len(block)} is not a multiple of {CIPHER_BLOCK_SIZE}"
            )
