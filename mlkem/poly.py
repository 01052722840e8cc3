"""Polynomial arithmetic, encoding and sampling over Z_q[X]/(X^256 + 1)."""

from __future__ import annotations

from typing import Iterable, Sequence

from .hashes import Shake128, shake256

__all__ = [
    "N",
    "Q",
    "ZETAS",
    "GAMMAS",
    "sum_poly",
    "transpose",
    "compress",
    "decompress",
    "prf",
    "bits_to_bytes",
    "bytes_to_bits",
    "byte_encode",
    "byte_decode",
    "sample_ntt",
    "generate_matrix",
    "sample_poly_cbd",
    "ntt",
    "ntt_inverse",
    "base_case_multiply",
    "multiply_ntts",
]

N = 256
Q = 3329

_ROOT = 17
_N_INVERSE = 3303  # 128^-1 mod Q
_MAX_BITS = 12


def _bitrev7(value: int) -> int:
    return int(f"{value:07b}"[::-1], 2)


ZETAS = tuple(pow(_ROOT, _bitrev7(i), Q) for i in range(128))
"""Powers of the primitive 256th root of unity in bit-reversed order."""

GAMMAS = tuple(pow(_ROOT, 2 * _bitrev7(i) + 1, Q) for i in range(128))
"""Moduli gamma_i of the degree-two factors used by base-case multiplication."""


def _poly(f: Iterable[int]) -> list[int]:
    coeffs = list(f)
    if len(coeffs) != N:
        raise ValueError(f"polynomial must have {N} coefficients, got {len(coeffs)}")
    return coeffs


def _check_width(d: int) -> None:
    if not 1 <= d <= _MAX_BITS:
        raise ValueError(f"bit width must be between 1 and {_MAX_BITS}, got {d}")


def sum_poly(a: Sequence[int], b: Sequence[int]) -> list[int]:
    """Return the coefficient-wise sum of two polynomials modulo Q."""
    return [(x + y) % Q for x, y in zip(_poly(a), _poly(b), strict=True)]


def transpose(matrix: Sequence[Sequence[Sequence[int]]]) -> list[list[list[int]]]:
    """Return the transpose of a square matrix of polynomials."""
    rows = [list(row) for row in matrix]
    if any(len(row) != len(rows) for row in rows):
        raise ValueError("matrix must be square")
    return [[list(poly) for poly in column] for column in zip(*rows)]


def compress(coeffs: Iterable[int], d: int) -> list[int]:
    """Map coefficients in Z_q to d-bit values, rounding to nearest."""
    _check_width(d)
    mask = (1 << d) - 1
    return [(((x << d) + Q // 2) // Q) & mask for x in _poly(coeffs)]


def decompress(coeffs: Iterable[int], d: int) -> list[int]:
    """Map d-bit values back to Z_q, rounding to nearest."""
    _check_width(d)
    half = 1 << (d - 1)
    return [(x * Q + half) >> d for x in _poly(coeffs)]


def prf(sigma: bytes, nonce: int, eta: int) -> bytes:
    """Return 64 * eta pseudorandom bytes derived from a 32-byte seed and a nonce."""
    if len(sigma) != 32:
        raise ValueError(f"seed must be 32 bytes, got {len(sigma)}")
    if not 0 <= nonce <= 0xFF:
        raise ValueError(f"nonce must fit in one byte, got {nonce}")
    if eta <= 0:
        raise ValueError(f"eta must be positive, got {eta}")
    return shake256(bytes(sigma) + bytes([nonce]), 64 * eta)


def bits_to_bytes(bits: Sequence[int]) -> bytes:
    """Pack a bit sequence into bytes, least significant bit first."""
    if len(bits) % 8:
        raise ValueError(f"bit count must be a multiple of 8, got {len(bits)}")
    out = bytearray(len(bits) // 8)
    for position, bit in enumerate(bits):
        if bit:
            out[position // 8] |= 1 << (position % 8)
    return bytes(out)


def bytes_to_bits(data: bytes) -> list[int]:
    """Unpack bytes into bits, least significant bit first."""
    return [(byte >> j) & 1 for byte in data for j in range(8)]


def byte_encode(coeffs: Iterable[int], d: int) -> bytes:
    """Serialize 256 d-bit coefficients into 32 * d bytes."""
    _check_width(d)
    mask = (1 << d) - 1
    packed = 0
    for i, x in enumerate(_poly(coeffs)):
        packed |= (x & mask) << (d * i)
    return packed.to_bytes(32 * d, "little")


def byte_decode(data: bytes, d: int) -> list[int]:
    """Deserialize 32 * d bytes into 256 d-bit coefficients."""
    _check_width(d)
    if len(data) != 32 * d:
        raise ValueError(f"encoded polynomial must be {32 * d} bytes, got {len(data)}")
    packed = int.from_bytes(data, "little")
    mask = (1 << d) - 1
    return [(packed >> (d * i)) & mask for i in range(N)]


def sample_ntt(seed: bytes) -> list[int]:
    """Sample a uniform polynomial in NTT form from a 34-byte seed by rejection."""
    if len(seed) != 34:
        raise ValueError(f"seed must be 34 bytes, got {len(seed)}")
    xof = Shake128(bytes(seed)).finalize()
    out: list[int] = []
    while len(out) < N:
        block = xof.squeeze(168)
        for c0, c1, c2 in zip(*[iter(block)] * 3):
            d1 = c0 + 256 * (c1 & 0x0F)
            d2 = (c1 >> 4) + 16 * c2
            if d1 < Q:
                out.append(d1)
            if len(out) < N and d2 < Q:
                out.append(d2)
            if len(out) == N:
                break
    return out


def generate_matrix(rho: bytes, k: int) -> list[list[list[int]]]:
    """Expand a 32-byte seed into the k-by-k matrix A in NTT form."""
    if len(rho) != 32:
        raise ValueError(f"seed must be 32 bytes, got {len(rho)}")
    if k <= 0:
        raise ValueError(f"matrix dimension must be positive, got {k}")
    rho = bytes(rho)
    return [[sample_ntt(rho + bytes([j, i])) for j in range(k)] for i in range(k)]


def sample_poly_cbd(data: bytes, eta: int) -> list[int]:
    """Sample a polynomial from the centred binomial distribution with parameter eta."""
    if eta <= 0:
        raise ValueError(f"eta must be positive, got {eta}")
    if len(data) != 64 * eta:
        raise ValueError(f"input must be {64 * eta} bytes, got {len(data)}")
    bits = bytes_to_bits(data)
    width = 2 * eta
    out = []
    for start in range(0, len(bits), width):
        a = sum(bits[start : start + eta])
        b = sum(bits[start + eta : start + width])
        out.append((a - b) % Q)
    return out


def ntt(f: Iterable[int]) -> list[int]:
    """Return the number-theoretic transform of a polynomial."""
    f = _poly(f)
    zetas = iter(ZETAS[1:])
    length = 128
    while length >= 2:
        for start in range(0, N, 2 * length):
            zeta = next(zetas)
            for j in range(start, start + length):
                t = zeta * f[j + length] % Q
                f[j + length] = (f[j] - t) % Q
                f[j] = (f[j] + t) % Q
        length //= 2
    return f


def ntt_inverse(f: Iterable[int]) -> list[int]:
    """Return the polynomial whose number-theoretic transform is ``f``."""
    f = _poly(f)
    zetas = iter(reversed(ZETAS[1:]))
    length = 2
    while length <= 128:
        for start in range(0, N, 2 * length):
            zeta = next(zetas)
            for j in range(start, start + length):
                t = f[j]
                f[j] = (t + f[j + length]) % Q
                f[j + length] = zeta * (f[j + length] - t) % Q
        length *= 2
    return [x * _N_INVERSE % Q for x in f]


def base_case_multiply(
    a0: int, a1: int, b0: int, b1: int, gamma: int
) -> tuple[int, int]:
    """Multiply two degree-one polynomials modulo X^2 - gamma."""
    gamma %= Q
    c0 = (a0 * b0 + a1 * b1 * gamma) % Q
    c1 = (a0 * b1 + a1 * b0) % Q
    return c0, c1


def multiply_ntts(a: Sequence[int], b: Sequence[int]) -> list[int]:
    """Multiply two polynomials given in NTT form."""
    a = _poly(a)
    b = _poly(b)
    out: list[int] = []
    for a0, a1, b0, b1, gamma in zip(a[0::2], a[1::2], b[0::2], b[1::2], GAMMAS):
        out.extend(base_case_multiply(a0, a1, b0, b1, gamma))
    return out