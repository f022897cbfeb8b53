"""Unit tests for the FileDecrypter orchestrator."""

from __future__ import annotations

import errno
import hashlib
import logging
import os
from pathlib import Path

import pytest

from cipherswap.core.exceptions import (
    DecryptIOError,
    RelocationError,
    StreamDecryptError,
    TruncationError,
)
from cipherswap.core.models import TruncateOutcome
from cipherswap.core.services import FileDecrypter


TEMP_NAME = "fixed-temp-name"


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "tmp"
    directory.mkdir()
    return directory


@pytest.fixture
def source(tmp_path: Path) -> Path:
    path = tmp_path / "photo.jpg"
    path.write_bytes(os.urandom(10_000))
    return path


@pytest.mark.core
@pytest.mark.tra("UseCase.Decrypt")
@pytest.mark.tier(1)
class TestDecrypt:
    """Tests for the successful decrypt() path."""

    def test_identity_digest_matches_hash_of_plaintext(
        self, source: Path, temp_dir: Path, identity_stream
    ) -> None:
        """With an identity transform the digest is the hash of the file."""
        original = source.read_bytes()
        decrypter = FileDecrypter(identity_stream)

        digest = decrypter.decrypt(source, 0, temp_dir)

        assert digest == hashlib.sha1(original).digest()
        assert len(digest) == 20
        assert source.read_bytes() == original

    def test_zero_size_leaves_decrypted_length(
        self, source: Path, temp_dir: Path, identity_stream
    ) -> None:
        """decrypted_size=0 disables truncation."""
        decrypter = FileDecrypter(identity_stream)

        result = decrypter.decrypt_with_result(source, 0, temp_dir)

        assert source.stat().st_size == 10_000
        assert result.outcome is TruncateOutcome.SKIPPED
        assert result.final_size == 10_000

    def test_truncates_to_declared_size(
        self, source: Path, temp_dir: Path, identity_stream
    ) -> None:
        """A declared size below the decrypted length trims the file."""
        original = source.read_bytes()
        decrypter = FileDecrypter(identity_stream)

        result = decrypter.decrypt_with_result(source, 9_998, temp_dir)

        assert source.stat().st_size == 9_998
        assert source.read_bytes() == original[:9_998]
        assert result.outcome is TruncateOutcome.TRUNCATED
        assert result.trimmed == 2

    def test_digest_covers_bytes_removed_by_truncation(
        self, source: Path, temp_dir: Path, identity_stream
    ) -> None:
        """The digest is computed before truncation."""
        original = source.read_bytes()
        decrypter = FileDecrypter(identity_stream)

        digest = decrypter.decrypt(source, 9_998, temp_dir)

        assert digest == hashlib.sha1(original).digest()
        assert digest != hashlib.sha1(original[:9_998]).digest()

    def test_undersized_result_is_not_padded(
        self,
        source: Path,
        temp_dir: Path,
        identity_stream,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """A declared size above the decrypted length only logs a warning."""
        decrypter = FileDecrypter(
            identity_stream, logger=logging.getLogger("test.decrypter")
        )

        with caplog.at_level(logging.WARNING, logger="test.decrypter"):
            result = decrypter.decrypt_with_result(source, 12_000, temp_dir)

        assert source.stat().st_size == 10_000
        assert result.outcome is TruncateOutcome.UNDERSIZED
        assert any(
            r.name == "test.decrypter" and r.levelno == logging.WARNING
            for r in caplog.records
        )

    def test_no_temp_file_left_after_success(
        self, source: Path, temp_dir: Path, identity_stream
    ) -> None:
        """The temporary ciphertext is removed after a successful call."""
        decrypter = FileDecrypter(identity_stream, temp_name_factory=lambda: TEMP_NAME)

        decrypter.decrypt(source, 0, temp_dir)

        assert not (temp_dir / TEMP_NAME).exists()
        assert list(temp_dir.iterdir()) == []

    def test_default_temp_dir_is_source_directory(
        self, source: Path, identity_stream
    ) -> None:
        """Without a temp_dir the ciphertext is parked next to the source."""
        decrypter = FileDecrypter(identity_stream)

        decrypter.decrypt(source, 0)

        assert sorted(p.name for p in source.parent.iterdir()) == ["photo.jpg"]

    def test_overwrites_existing_file_at_temp_path(
        self, source: Path, temp_dir: Path, identity_stream
    ) -> None:
        """A stale file at the generated temp path is replaced and removed."""
        original = source.read_bytes()
        (temp_dir / TEMP_NAME).write_bytes(b"stale")
        decrypter = FileDecrypter(identity_stream, temp_name_factory=lambda: TEMP_NAME)

        digest = decrypter.decrypt(source, 0, temp_dir)

        assert digest == hashlib.sha1(original).digest()
        assert not (temp_dir / TEMP_NAME).exists()

    def test_empty_file(self, tmp_path: Path, temp_dir: Path, identity_stream) -> None:
        """An empty file decrypts to an empty file with the empty digest."""
        empty = tmp_path / "empty.bin"
        empty.write_bytes(b"")
        decrypter = FileDecrypter(identity_stream)

        digest = decrypter.decrypt(empty, 0, temp_dir)

        assert digest == hashlib.sha1(b"").digest()
        assert empty.read_bytes() == b""

    def test_negative_size_rejected_before_touching_file(
        self, source: Path, temp_dir: Path, identity_stream
    ) -> None:
        """A negative decrypted size raises ValueError and moves nothing."""
        original = source.read_bytes()
        decrypter = FileDecrypter(identity_stream)

        with pytest.raises(ValueError, match="negative"):
            decrypter.decrypt(source, -1, temp_dir)

        assert source.read_bytes() == original
        assert list(temp_dir.iterdir()) == []

    def test_sequential_calls_on_different_files(
        self, tmp_path: Path, temp_dir: Path, identity_stream
    ) -> None:
        """One decrypter can process several files in sequence."""
        first = tmp_path / "a.bin"
        second = tmp_path / "b.bin"
        first.write_bytes(b"a" * 5000)
        second.write_bytes(b"b" * 300)
        decrypter = FileDecrypter(identity_stream)

        digest_a = decrypter.decrypt(first, 4000, temp_dir)
        digest_b = decrypter.decrypt(second, 0, temp_dir)

        assert digest_a == hashlib.sha1(b"a" * 5000).digest()
        assert digest_b == hashlib.sha1(b"b" * 300).digest()
        assert first.stat().st_size == 4000
        assert list(temp_dir.iterdir()) == []


@pytest.mark.core
@pytest.mark.tra("UseCase.Decrypt")
@pytest.mark.tier(1)
class TestDecryptFailures:
    """Tests for error propagation and cleanup."""

    def test_missing_source_raises_relocation_error(
        self, tmp_path: Path, temp_dir: Path, identity_stream
    ) -> None:
        """A missing source fails the move and leaves nothing behind."""
        decrypter = FileDecrypter(identity_stream)

        with pytest.raises(RelocationError) as exc:
            decrypter.decrypt(tmp_path / "missing.bin", 0, temp_dir)

        assert isinstance(exc.value, OSError)
        assert isinstance(exc.value.cause, FileNotFoundError)
        assert list(temp_dir.iterdir()) == []
        assert not (tmp_path / "missing.bin").exists()

    def test_stream_failure_propagates_after_cleanup(
        self, source: Path, temp_dir: Path, failing_stream
    ) -> None:
        """A mid-stream failure removes the temp file and re-raises."""
        original = source.read_bytes()
        decrypter = FileDecrypter(failing_stream(fail_at=1), temp_name_factory=lambda: TEMP_NAME)

        with pytest.raises(StreamDecryptError) as exc:
            decrypter.decrypt(source, 0, temp_dir)

        assert exc.value.temp_path == temp_dir / TEMP_NAME
        assert isinstance(exc.value.cause, OSError)
        assert not (temp_dir / TEMP_NAME).exists()
        # Only the first block was flushed before the failure
        assert source.read_bytes() == original[:4096]

    def test_cipher_failure_is_reported_as_io_error(
        self, source: Path, temp_dir: Path, failing_stream
    ) -> None:
        """Cipher errors surface as StreamDecryptError (an OSError)."""
        from cipherswap.core.exceptions import CipherError

        decrypter = FileDecrypter(failing_stream(fail_at=0, error=CipherError("bad block")))

        with pytest.raises(DecryptIOError) as exc:
            decrypter.decrypt(source, 0, temp_dir)

        assert isinstance(exc.value, StreamDecryptError)
        assert isinstance(exc.value.cause, CipherError)
        assert source.read_bytes() == b""
        assert list(temp_dir.iterdir()) == []

    def test_arbitrary_stream_error_is_reported_as_io_error(
        self, source: Path, temp_dir: Path
    ) -> None:
        """Any exception from an injected stream decrypter is wrapped."""

        class UnavailableStreamDecrypter:
            def decrypt(self, source, sink, progress=None, total=0) -> bytes:
                sink.write(source.read(10))
                raise RuntimeError("hsm unavailable")

        decrypter = FileDecrypter(UnavailableStreamDecrypter())

        with pytest.raises(StreamDecryptError) as exc:
            decrypter.decrypt(source, 0, temp_dir)

        assert isinstance(exc.value, OSError)
        assert isinstance(exc.value.cause, RuntimeError)
        assert exc.value.recovery_hint is not None
        assert list(temp_dir.iterdir()) == []

    def test_progress_reporter_error_is_wrapped(
        self, source: Path, temp_dir: Path, identity_stream
    ) -> None:
        class BrokenReporter:
            def start_task(self, name: str, total: int):
                raise TypeError("bad reporter")

            def finish_task(self, name: str) -> None:
                pass

        with pytest.raises(StreamDecryptError) as exc:
            FileDecrypter(identity_stream).decrypt(
                source, 0, temp_dir, progress=BrokenReporter()
            )

        assert isinstance(exc.value.cause, TypeError)
        assert list(temp_dir.iterdir()) == []

    def test_truncation_failure_propagates(
        self,
        source: Path,
        temp_dir: Path,
        identity_stream,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """A failing truncate raises TruncationError; plaintext stays in place."""
        original = source.read_bytes()

        def broken_truncate(path: object, length: int) -> None:
            raise OSError(errno.EIO, "I/O error")

        monkeypatch.setattr("cipherswap.core.truncation.os.truncate", broken_truncate)
        decrypter = FileDecrypter(identity_stream)

        with pytest.raises(TruncationError) as exc:
            decrypter.decrypt(source, 100, temp_dir)

        assert exc.value.size == 100
        assert source.read_bytes() == original
        assert list(temp_dir.iterdir()) == []

    def test_cleanup_failure_is_logged_not_raised(
        self,
        source: Path,
        temp_dir: Path,
        identity_stream,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """A temp file that cannot be deleted does not mask success."""
        original = source.read_bytes()
        original_unlink = Path.unlink

        def locked_unlink(self: Path, missing_ok: bool = False) -> None:
            if self.name == TEMP_NAME:
                raise PermissionError(errno.EACCES, "Permission denied")
            original_unlink(self, missing_ok=missing_ok)

        monkeypatch.setattr(Path, "unlink", locked_unlink)
        decrypter = FileDecrypter(
            identity_stream,
            logger=logging.getLogger("test.cleanup"),
            temp_name_factory=lambda: TEMP_NAME,
        )

        with caplog.at_level(logging.WARNING, logger="test.cleanup"):
            digest = decrypter.decrypt(source, 0, temp_dir)

        assert digest == hashlib.sha1(original).digest()
        assert "failed to delete temporary file" in caplog.text
        assert (temp_dir / TEMP_NAME).exists()

    def test_cleanup_failure_does_not_mask_stream_error(
        self,
        source: Path,
        temp_dir: Path,
        failing_stream,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """The original error still propagates when cleanup also fails."""
        original_unlink = Path.unlink

        def locked_unlink(self: Path, missing_ok: bool = False) -> None:
            if self.name == TEMP_NAME:
                raise PermissionError(errno.EACCES, "Permission denied")
            original_unlink(self, missing_ok=missing_ok)

        monkeypatch.setattr(Path, "unlink", locked_unlink)
        decrypter = FileDecrypter(failing_stream(fail_at=0), temp_name_factory=lambda: TEMP_NAME)

        with pytest.raises(StreamDecryptError):
            decrypter.decrypt(source, 0, temp_dir)


@pytest.mark.core
@pytest.mark.tier(1)
class TestProgress:
    """Tests for progress reporting during decrypt()."""

    def test_progress_reporter_receives_task(
        self, source: Path, temp_dir: Path, identity_stream
    ) -> None:
        """decrypt() starts and finishes one task keyed by the file path."""
        events: list[tuple[str, object]] = []

        class RecordingReporter:
            def start_task(self, name: str, total: int):
                events.append(("start", (name, total)))
                return lambda processed, _total: events.append(("update", processed))

            def finish_task(self, name: str) -> None:
                events.append(("finish", name))

        FileDecrypter(identity_stream).decrypt(
            source, 0, temp_dir, progress=RecordingReporter()
        )

        assert events[0] == ("start", (str(source), 10_000))
        assert events[-1] == ("finish", str(source))
        updates = [value for kind, value in events if kind == "update"]
        assert updates == [4096, 8192, 10_000]
