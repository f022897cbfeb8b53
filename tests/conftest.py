"""Pytest configuration and shared fixtures.

This module registers custom markers for CI job separation and provides
shared fixtures for the test suite.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from cipherswap.adapters.cipher import AesCbcBlockDecrypter, BlockStreamDecrypter
from cipherswap.config import BLOCK_LENGTH, CIPHER_BLOCK_SIZE


AES_KEY = bytes(range(32))


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "core: Core models, ports, and services")
    config.addinivalue_line("markers", "cipher: Cipher and stream adapters")
    config.addinivalue_line("markers", "progress: Rich progress integration")
    config.addinivalue_line("markers", "cli: CLI tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")
    config.addinivalue_line(
        "markers", "tra: Test Responsibility Anchor (TRA) - namespace.Anchor format"
    )
    config.addinivalue_line(
        "markers",
        "tier: Test tier for CI job separation (0=instant, 1=fast, 2=standard, 3=slow, 4=manual)",
    )


class IdentityBlockDecrypter:
    """Block decrypter that returns every block unchanged."""

    def decrypt_block(self, block: bytes, index: int) -> bytes:
        return block


class FailingBlockDecrypter:
    """Block decrypter that raises once it reaches a given block index."""

    def __init__(self, fail_at: int, error: Exception | None = None) -> None:
        self.fail_at = fail_at
        self.error = error or OSError("simulated read failure")

    def decrypt_block(self, block: bytes, index: int) -> bytes:
        if index >= self.fail_at:
            raise self.error
        return block


@pytest.fixture
def identity_stream() -> BlockStreamDecrypter:
    """Stream decrypter whose plaintext equals its ciphertext."""
    return BlockStreamDecrypter(IdentityBlockDecrypter())


@pytest.fixture
def aes_key() -> bytes:
    """A fixed 256-bit AES key."""
    return AES_KEY


def encrypt_bytes(key: bytes, plaintext: bytes, block_length: int = BLOCK_LENGTH) -> bytes:
    """Encrypt plaintext block by block, zero-padding to the AES block size."""
    remainder = len(plaintext) % CIPHER_BLOCK_SIZE
    if remainder:
        plaintext += bytes(CIPHER_BLOCK_SIZE - remainder)

    cipher = AesCbcBlockDecrypter(key, block_length=block_length)
    chunks = [
        cipher.encrypt_block(plaintext[offset : offset + block_length], index)
        for index, offset in enumerate(range(0, len(plaintext), block_length))
    ]
    return b"".join(chunks)


@pytest.fixture
def write_encrypted(tmp_path: Path, aes_key: bytes) -> Callable[[str, bytes], Path]:
    """Factory writing an AES-encrypted file under tmp_path."""

    def _write(name: str, plaintext: bytes) -> Path:
        path = tmp_path / name
        path.write_bytes(encrypt_bytes(aes_key, plaintext))
        return path

    return _write


@pytest.fixture
def failing_stream() -> Callable[..., BlockStreamDecrypter]:
    """Factory for a stream decrypter that fails at a given block index."""

    def _make(fail_at: int = 1, error: Exception | None = None) -> BlockStreamDecrypter:
        return BlockStreamDecrypter(FailingBlockDecrypter(fail_at, error))

    return _make
