"""Core domain module for cipherswap.

This module contains the in-place decryption orchestrator, its models and
its port definitions. It does not depend on any concrete cipher.
"""

from cipherswap.core.models import DecryptResult, TruncateOutcome
from cipherswap.core.ports import (
    BlockDecrypterPort,
    ProgressCallback,
    StreamDecrypterPort,
)


__all__ = [
    "BlockDecrypterPort",
    "DecryptResult",
    "ProgressCallback",
    "StreamDecrypterPort",
    "TruncateOutcome",
]
