"""Adapters implementing cipherswap ports."""
