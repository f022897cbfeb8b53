"""cipherswap - In-place file decryption through a temporary ciphertext copy.

This library decrypts a file at its own path: the ciphertext is moved
aside with a single rename, streamed block by block through a decrypter
into a recreated file, trimmed to its true plaintext length, and the
temporary copy is removed whatever happens.

Example:
    >>> from cipherswap import decrypt_file
    >>> digest = decrypt_file(Path("photo.jpg"), key, decrypted_size=81234)
    >>> digest.hex()
    '2fd4e1c67a2d28fced849ee1bb76e7391b93eb12'
"""

from cipherswap.adapters.cipher import (
    AesCbcBlockDecrypter,
    BlockStreamDecrypter,
    create_stream_decrypter,
)
from cipherswap.config import BLOCK_LENGTH, DecrypterConfig, resolve_temp_dir
from cipherswap.core.exceptions import (
    CipherError,
    CipherswapError,
    ConfigurationError,
    DecryptIOError,
    RelocationError,
    StreamDecryptError,
    TruncationError,
)
from cipherswap.core.models import DecryptResult, TruncateOutcome
from cipherswap.core.ports import (
    BlockDecrypterPort,
    NullProgressReporter,
    ProgressCallback,
    ProgressReporter,
    StreamDecrypterPort,
)
from cipherswap.core.services import FileDecrypter, decrypt_file
from cipherswap.core.truncation import truncate
from cipherswap.progress import RichProgressReporter


__version__ = "0.1.0"

__all__ = [
    "BLOCK_LENGTH",
    "AesCbcBlockDecrypter",
    "BlockDecrypterPort",
    "BlockStreamDecrypter",
    "CipherError",
    "CipherswapError",
    "ConfigurationError",
    "DecryptIOError",
    "DecryptResult",
    "DecrypterConfig",
    "FileDecrypter",
    "NullProgressReporter",
    "ProgressCallback",
    "ProgressReporter",
    "RelocationError",
    "RichProgressReporter",
    "StreamDecryptError",
    "StreamDecrypterPort",
    "TruncateOutcome",
    "TruncationError",
    "__version__",
    "create_stream_decrypter",
    "decrypt_file",
    "resolve_temp_dir",
    "truncate",
]
