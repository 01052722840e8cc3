"""Keccak-f[1600] permutation and an incremental sponge built on it."""

from __future__ import annotations

from typing import Iterable

__all__ = ["Sponge", "keccak_f1600"]

_MASK = (1 << 64) - 1
_LANES = 25
_STATE_BYTES = 8 * _LANES
_ROUNDS = 24

# Rotation offsets indexed as _RHO[x][y].
_RHO = (
    (0, 36, 3, 41, 18),
    (1, 44, 10, 45, 2),
    (62, 6, 43, 15, 61),
    (28, 55, 25, 21, 56),
    (27, 20, 39, 8, 14),
)


def _round_constants() -> tuple[int, ...]:
    """Derive the iota constants from the Keccak LFSR."""
    lfsr = 1
    constants = []
    for _ in range(_ROUNDS):
        constant = 0
        for j in range(7):
            if lfsr & 1:
                constant ^= 1 << ((1 << j) - 1)
            lfsr = ((lfsr << 1) ^ ((lfsr >> 7) * 0x71)) & 0xFF
        constants.append(constant)
    return tuple(constants)


_ROUND_CONSTANTS = _round_constants()

# (destination, source, rotation) for the combined rho and pi steps,
# with lane (x, y) stored at index x + 5 * y.
_RHO_PI = tuple(
    (y + 5 * ((2 * x + 3 * y) % 5), x + 5 * y, _RHO[x][y])
    for x in range(5)
    for y in range(5)
)

_ROWS = tuple(tuple(range(5 * y, 5 * y + 5)) for y in range(5))


def _rol(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (64 - shift))) & _MASK


def keccak_f1600(state: Iterable[int]) -> list[int]:
    """Apply the 24-round Keccak-f[1600] permutation to 25 64-bit lanes.

    Returns the permuted lanes as a new list; the input is left untouched.
    """
    lanes = [lane & _MASK for lane in state]
    if len(lanes) != _LANES:
        raise ValueError(f"Keccak state must hold {_LANES} lanes, got {len(lanes)}")

    for constant in _ROUND_CONSTANTS:
        # theta
        columns = [
            lanes[x] ^ lanes[x + 5] ^ lanes[x + 10] ^ lanes[x + 15] ^ lanes[x + 20]
            for x in range(5)
        ]
        mix = [columns[(x - 1) % 5] ^ _rol(columns[(x + 1) % 5], 1) for x in range(5)]
        lanes = [lane ^ mix[i % 5] for i, lane in enumerate(lanes)]

        # rho and pi
        moved = [0] * _LANES
        for dst, src, shift in _RHO_PI:
            moved[dst] = _rol(lanes[src], shift)

        # chi
        lanes = []
        for row in _ROWS:
            values = [moved[i] for i in row]
            lanes.extend(
                values[x] ^ (~values[(x + 1) % 5] & values[(x + 2) % 5])
                for x in range(5)
            )

        # iota
        lanes[0] ^= constant

    return lanes


class Sponge:
    """Incremental Keccak sponge with a given rate and domain padding byte.

    Data is absorbed with :meth:`absorb`, the absorb phase is closed with
    :meth:`finalize`, and output is read with :meth:`squeeze` (any number
    of bytes) or :meth:`squeeze_blocks` (whole rate-sized blocks).
    """

    def __init__(self, rate: int, pad: int) -> None:
        if rate <= 0 or rate >= _STATE_BYTES or rate % 8:
            raise ValueError(
                f"rate must be a positive multiple of 8 below {_STATE_BYTES}, got {rate}"
            )
        if not 0 <= pad <= 0xFF:
            raise ValueError(f"padding byte must fit in one byte, got {pad}")
        self.rate = rate
        self.pad = pad
        self._lanes = [0] * _LANES
        self._buffer = bytearray()
        self._output = b""
        self._finalized = False

    @property
    def finalized(self) -> bool:
        """Whether the absorb phase has been closed."""
        return self._finalized

    def _xor_block(self, block: bytes) -> None:
        for i in range(len(block) // 8):
            self._lanes[i] ^= int.from_bytes(block[8 * i : 8 * i + 8], "little")

    def _permute(self) -> None:
        self._lanes = keccak_f1600(self._lanes)

    def _block(self) -> bytes:
        return b"".join(
            lane.to_bytes(8, "little") for lane in self._lanes[: self.rate // 8]
        )

    def absorb(self, data: bytes) -> Sponge:
        """Absorb more input; may be called any number of times before finalizing."""
        if self._finalized:
            raise RuntimeError("cannot absorb after the sponge has been finalized")
        self._buffer.extend(data)
        rate = self.rate
        if len(self._buffer) >= rate:
            view = memoryview(self._buffer)
            full = len(self._buffer) - len(self._buffer) % rate
            for start in range(0, full, rate):
                self._xor_block(bytes(view[start : start + rate]))
                self._permute()
            view.release()
            del self._buffer[:full]
        return self

    def finalize(self) -> Sponge:
        """Apply the domain byte and final padding bit; prepares for squeezing."""
        if self._finalized:
            raise RuntimeError("sponge has already been finalized")
        block = bytearray(self.rate)
        block[: len(self._buffer)] = self._buffer
        block[len(self._buffer)] ^= self.pad
        block[-1] ^= 0x80
        self._xor_block(bytes(block))
        self._buffer.clear()
        self._output = b""
        self._finalized = True
        return self

    def _require_finalized(self) -> None:
        if not self._finalized:
            raise RuntimeError("sponge must be finalized before squeezing")

    def squeeze(self, length: int) -> bytes:
        """Return the next ``length`` output bytes."""
        self._require_finalized()
        if length < 0:
            raise ValueError(f"length must not be negative, got {length}")
        pieces = [self._output[:length]]
        self._output = self._output[length:]
        remaining = length - len(pieces[0])
        while remaining > 0:
            self._permute()
            block = self._block()
            pieces.append(block[:remaining])
            self._output = block[remaining:]
            remaining -= len(pieces[-1])
        return b"".join(pieces)

    def squeeze_blocks(self, count: int) -> bytes:
        """Return ``count`` whole blocks of ``rate`` bytes each.

        Any bytes left over from an earlier :meth:`squeeze` are discarded.
        """
        self._require_finalized()
        if count < 0:
            raise ValueError(f"block count must not be negative, got {count}")
        blocks = []
        for _ in range(count):
            self._permute()
            blocks.append(self._block())
        self._output = b""
        return b"".join(blocks)

    def copy(self) -> Sponge:
        """Return an independent copy of this sponge in its current state."""
        clone = Sponge(self.rate, self.pad)
        clone._lanes = list(self._lanes)
        clone._buffer = bytearray(self._buffer)
        clone._output = self._output
        clone._finalized = self._finalized
        return clone