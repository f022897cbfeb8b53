"""Custom cipher example.

FileDecrypter does not know which cipher is in use. Any object with a
decrypt_block(block, index) method can be plugged into a
BlockStreamDecrypter, and any object with the StreamDecrypterPort
decrypt() method can replace the stream layer entirely.
"""

import hashlib
from pathlib import Path

from cipherswap import BlockStreamDecrypter, FileDecrypter


class XorBlockDecrypter:
    """Toy cipher: XOR every byte with a one-byte key."""

    def __init__(self, key: int) -> None:
        self.key = key

    def decrypt_block(self, block: bytes, index: int) -> bytes:
        return bytes(b ^ self.key for b in block)


# Swap in the toy cipher and a different digest
stream = BlockStreamDecrypter(XorBlockDecrypter(0x5A), digest_factory=hashlib.sha256)
decrypter = FileDecrypter(stream)

path = Path("./data/obfuscated.bin")
digest = decrypter.decrypt(path, decrypted_size=0)
print(f"sha256 {digest.hex()}  {path}")
