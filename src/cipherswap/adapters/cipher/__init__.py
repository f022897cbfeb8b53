"""Cipher adapters implementing the block and stream decrypter ports."""

from cipherswap.adapters.cipher.aes_cbc import AesCbcBlockDecrypter
from cipherswap.adapters.cipher.block_stream import BlockStreamDecrypter
from cipherswap.config import BLOCK_LENGTH


def create_stream_decrypter(
    key: bytes, block_length: int = BLOCK_LENGTH
) -> BlockStreamDecrypter:
    """Create the default AES-CBC/SHA-1 stream decrypter for a key.

    Args:
        key: Raw AES key bytes.
        block_length: Bytes of ciphertext per block.

    Returns:
        BlockStreamDecrypter hashing plaintext with SHA-1.

    Raises:
        CipherError: If the key length is not supported.
    """
    block_decrypter = AesCbcBlockDecrypter(key, block_length=block_length)
    return BlockStreamDecrypter(block_decrypter, block_length=block_length)


__all__ = ["AesCbcBlockDecrypter", "BlockStreamDecrypter", "create_stream_decrypter"]
