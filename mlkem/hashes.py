"""SHA-3 hash functions and SHAKE extendable-output functions."""

from __future__ import annotations

from .keccak import Sponge

__all__ = [
    "SHAKE128_RATE",
    "SHAKE256_RATE",
    "SHA3_256_RATE",
    "SHA3_384_RATE",
    "SHA3_512_RATE",
    "Shake128",
    "Shake256",
    "Sha3",
    "Sha3_256",
    "Sha3_384",
    "Sha3_512",
    "shake128",
    "shake256",
    "sha3_256",
    "sha3_384",
    "sha3_512",
]

SHAKE128_RATE = 168
SHAKE256_RATE = 136
SHA3_256_RATE = 136
SHA3_384_RATE = 104
SHA3_512_RATE = 72

_SHAKE_PAD = 0x1F
_SHA3_PAD = 0x06


class Shake128(Sponge):
    """SHAKE128 extendable-output function.

    Absorb input with :meth:`absorb`, call :meth:`finalize`, then read any
    amount of output with :meth:`squeeze` or :meth:`squeeze_blocks`.
    """

    def __init__(self, data: bytes = b"") -> None:
        super().__init__(SHAKE128_RATE, _SHAKE_PAD)
        if data:
            self.absorb(data)


class Shake256(Sponge):
    """SHAKE256 extendable-output function."""

    def __init__(self, data: bytes = b"") -> None:
        super().__init__(SHAKE256_RATE, _SHAKE_PAD)
        if data:
            self.absorb(data)


class Sha3:
    """Incremental SHA-3 hash with a fixed digest size."""

    def __init__(self, rate: int, digest_size: int, data: bytes = b"") -> None:
        if not 0 < digest_size <= rate:
            raise ValueError(
                f"digest size must be between 1 and the rate {rate}, got {digest_size}"
            )
        self.digest_size = digest_size
        self._sponge = Sponge(rate, _SHA3_PAD)
        if data:
            self.update(data)

    @property
    def block_size(self) -> int:
        """The sponge rate in bytes."""
        return self._sponge.rate

    def update(self, data: bytes) -> Sha3:
        """Absorb more input."""
        self._sponge.absorb(data)
        return self

    def digest(self) -> bytes:
        """Return the digest of everything absorbed so far.

        The hash object stays usable: further updates continue from the
        same state.
        """
        sponge = self._sponge.copy().finalize()
        return sponge.squeeze_blocks(1)[: self.digest_size]

    def hexdigest(self) -> str:
        """Return the digest as a lower-case hexadecimal string."""
        return self.digest().hex()

    def copy(self) -> Sha3:
        """Return an independent copy of this hash object."""
        clone = object.__new__(type(self))
        clone.digest_size = self.digest_size
        clone._sponge = self._sponge.copy()
        return clone


class Sha3_256(Sha3):
    """SHA3-256."""

    def __init__(self, data: bytes = b"") -> None:
        super().__init__(SHA3_256_RATE, 32, data)


class Sha3_384(Sha3):
    """SHA3-384."""

    def __init__(self, data: bytes = b"") -> None:
        super().__init__(SHA3_384_RATE, 48, data)


class Sha3_512(Sha3):
    """SHA3-512."""

    def __init__(self, data: bytes = b"") -> None:
        super().__init__(SHA3_512_RATE, 64, data)


def shake128(data: bytes, length: int) -> bytes:
    """Return ``length`` bytes of SHAKE128 output for ``data``."""
    return Shake128(data).finalize().squeeze(length)


def shake256(data: bytes, length: int) -> bytes:
    """Return ``length`` bytes of SHAKE256 output for ``data``."""
    return Shake256(data).finalize().squeeze(length)


def sha3_256(data: bytes) -> bytes:
    """Return the SHA3-256 digest of ``data``."""
    return Sha3_256(data).digest()


def sha3_384(data: bytes) -> bytes:
    """Return the SHA3-384 digest of ``data``."""
    return Sha3_384(data).digest()


def sha3_512(data: bytes) -> bytes:
    """Return the SHA3-512 digest of ``data``."""
    return Sha3_512(data).digest()