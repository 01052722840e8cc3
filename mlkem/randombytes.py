"""Cryptographically secure random bytes from the operating system."""

from __future__ import annotations

import os

__all__ = ["randombytes"]


def randombytes(n: int) -> bytes:
    """Return ``n`` bytes of high-quality randomness from the OS generator."""
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError(f"byte count must be an integer, got {type(n).__name__}")
    if n < 0:
        raise ValueError(f"byte count must not be negative, got {n}")
    return os.urandom(n)