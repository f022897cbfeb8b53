"""Basic in-place decryption example.

This example shows the simplest usage pattern: point decrypt_file at an
encrypted file, pass the key and the expected plaintext size, and keep
the returned SHA-1 digest for integrity checks.
"""

from pathlib import Path

from cipherswap import FileDecrypter, decrypt_file


key = bytes.fromhex("000102030405060708090a0b0c0d0e0f101112131415161718191a1b1c1d1e1f")
encrypted = Path("./data/photo.jpg")

# Option 1: Convenience function (recommended for one-off calls)
# Builds the default AES-CBC/SHA-1 decrypter for this key
digest = decrypt_file(encrypted, key, decrypted_size=48_213)
print(f"{digest.hex()}  {encrypted}")

# Option 2: Reusable decrypter (recommended for many files)
# One instance keeps no per-call state and can serve several files
decrypter = FileDecrypter.for_key(key)
result = decrypter.decrypt_with_result(Path("./data/notes.txt"), decrypted_size=0)

# decrypted_size=0 disables truncation, so block padding stays on disk
print(f"{result.hexdigest}  {result.path} ({result.outcome.value})")
