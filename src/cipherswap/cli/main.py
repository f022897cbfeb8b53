"""CLI commands for cipherswap."""

from __future__ import annotations

import hashlib
import logging
import os
from dataclasses import replace
from pathlib import Path

import typer
from rich.logging import RichHandler

from cipherswap.config import BLOCK_LENGTH
from cipherswap.core.exceptions import CipherswapError


app = typer.Typer(
    name="cipherswap",
    help="Decrypt files in place through a temporary ciphertext copy.",
    no_args_is_help=True,
)

ENV_LOG_LEVEL = "CIPHERSWAP_LOG_LEVEL"


def configure_logging(verbose: bool = False) -> None:
    """Send library diagnostics to stderr through Rich.

    Args:
        verbose: Log at DEBUG instead of the environment/default level.
    """
    if verbose:
        level = logging.DEBUG
    else:
        name = os.getenv(ENV_LOG_LEVEL, "WARNING").upper()
        level = getattr(logging, name, logging.WARNING)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(show_path=False, rich_tracebacks=False)],
        force=True,
    )


def _parse_key(key_hex: str) -> bytes:
    """Decode a hex key, exiting with an error message if it is invalid."""
    try:
        return bytes.fromhex(key_hex.strip())
    except ValueError:
        typer.echo("Error: --key must be a hex string.", err=True)
        raise typer.Exit(1) from None


def _version_callback(value: bool) -> None:
    if value:
        from cipherswap import __version__

        typer.echo(f"cipherswap {__version__}")
        raise typer.Exit()


@app.callback()
def root(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Decrypt files in place through a temporary ciphertext copy."""


@app.command()
def decrypt(
    file: Path = typer.Argument(..., help="Encrypted file to decrypt in place."),
    key: str = typer.Option(
        ...,
        "--key",
        "-k",
        envvar="CIPHERSWAP_KEY",
        help="AES key as hex (16, 24 or 32 bytes).",
    ),
    size: int = typer.Option(
        0,
        "--size",
        "-s",
        min=0,
        help="Expected plaintext size in bytes. 0 disables truncation.",
    ),
    temp_dir: Path | None = typer.Option(
        None,
        "--temp-dir",
        "-t",
        help="Directory for the temporary ciphertext. Defaults to the file's directory.",
    ),
    no_cross_device: bool = typer.Option(
        False,
        "--no-cross-device",
        help="Fail instead of copying when the temp directory is on another volume.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Print only the digest, without a progress bar.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log debug diagnostics.",
    ),
) -> None:
    """Decrypt FILE in place and print the SHA-1 of the plaintext."""
    from cipherswap import (
        DecrypterConfig,
        FileDecrypter,
        NullProgressReporter,
        RichProgressReporter,
    )

    configure_logging(verbose)
    raw_key = _parse_key(key)

    if not file.is_file():
        typer.echo(f"Error: {file} is not a file.", err=True)
        raise typer.Exit(1)

    try:
        config = DecrypterConfig.from_env()
        if no_cross_device:
            config = replace(config, allow_cross_device=False)
        decrypter = FileDecrypter.for_key(raw_key, config=config)

        if quiet:
            result = decrypter.decrypt_with_result(
                file, size, temp_dir, progress=NullProgressReporter()
            )
        else:
            with RichProgressReporter() as progress:
                result = decrypter.decrypt_with_result(
                    file, size, temp_dir, progress=progress
                )
    except CipherswapError as e:
        typer.echo(f"Error: {e}", err=True)
        if e.recovery_hint:
            typer.echo(f"Hint: {e.recovery_hint}", err=True)
        raise typer.Exit(1) from None

    if quiet:
        typer.echo(result.hexdigest)
        return

    typer.echo(f"{result.hexdigest}  {result.path}")
    typer.echo(f"  Size: {_format_size(result.final_size)} ({result.outcome.value})")
    if result.trimmed:
        typer.echo(f"  Trimmed: {result.trimmed} bytes")


@app.command()
def digest(
    file: Path = typer.Argument(..., help="File to hash."),
) -> None:
    """Print the SHA-1 of FILE, for comparing with a decrypt result."""
    try:
        sha1 = hashlib.sha1()
        with file.open("rb") as f:
            for chunk in iter(lambda: f.read(BLOCK_LENGTH), b""):
                sha1.update(chunk)
    except OSError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    typer.echo(f"{sha1.hexdigest()}  {file}")


def _format_size(size_bytes: int) -> str:
    """Format size in bytes to human-readable format."""
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0
    return f"{size:.1f} TB"


def main() -> None:
    """Entry point for the CLI."""
    app()
