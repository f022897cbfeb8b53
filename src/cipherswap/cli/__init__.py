"""CLI for cipherswap."""

from cipherswap.cli.main import app, main


__all__ = ["app", "main"]
