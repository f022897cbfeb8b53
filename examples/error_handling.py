"""Error handling patterns with recovery hints.

This example demonstrates how to handle the failures of an in-place
decryption and use the recovery_hint property to provide actionable
guidance.
"""

import logging
from pathlib import Path

from cipherswap import (
    CipherError,
    # Exceptions
    CipherswapError,
    DecrypterConfig,
    FileDecrypter,
    RelocationError,
    StreamDecryptError,
)


logging.basicConfig(level=logging.INFO)

key = bytes(32)


# Pattern 1: Handle keys the cipher rejects before any file is touched
def build_decrypter(raw_key: bytes) -> FileDecrypter | None:
    """Build a decrypter, returning None for an unusable key."""
    try:
        return FileDecrypter.for_key(raw_key)
    except CipherError as e:
        print(f"Rejected key: {e}")
        print(f"Hint: {e.recovery_hint}")
        return None


# Pattern 2: Refuse to copy ciphertext across volumes
def decrypt_same_volume_only(path: Path, size: int, temp_dir: Path) -> bytes | None:
    """Decrypt only when the temp directory shares a volume with path."""
    config = DecrypterConfig(temp_dir=temp_dir, allow_cross_device=False)
    try:
        return FileDecrypter.for_key(key, config=config).decrypt(path, size)
    except RelocationError as e:
        # The ciphertext never left its original path
        print(f"Could not move {e.path} to {e.dest}")
        print(f"Hint: {e.recovery_hint}")
        return None


# Pattern 3: A failure mid-stream leaves a partially decrypted file
def decrypt_or_report(path: Path, size: int) -> bytes | None:
    """Decrypt and report a damaged result instead of raising."""
    try:
        return FileDecrypter.for_key(key).decrypt(path, size)
    except StreamDecryptError as e:
        # The temporary ciphertext has already been removed
        print(f"Decryption failed: {e}")
        print(f"Hint: {e.recovery_hint}")
        return None


# Pattern 4: Catch all cipherswap errors with the base class
def safe_decrypt(path: Path, size: int) -> bytes | None:
    """Decrypt with a catch-all for cipherswap errors."""
    try:
        return FileDecrypter.for_key(key).decrypt(path, size)
    except CipherswapError as e:
        print(f"Error: {e}")
        if e.recovery_hint:
            print(f"Hint: {e.recovery_hint}")
        return None


if __name__ == "__main__":
    build_decrypter(b"too short")
    safe_decrypt(Path("./data/missing.bin"), 0)
