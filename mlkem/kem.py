"""ML-KEM key encapsulation: the K-PKE scheme and the KEM built on it."""

from __future__ import annotations

import hmac
import itertools
from dataclasses import dataclass
from functools import reduce
from typing import Iterator, Sequence

from .hashes import sha3_256, sha3_512, shake256
from .poly import (
    N,
    Q,
    byte_decode,
    byte_encode,
    compress,
    decompress,
    generate_matrix,
    multiply_ntts,
    ntt,
    ntt_inverse,
    prf,
    sample_poly_cbd,
    sum_poly,
    transpose,
)
from .randombytes import randombytes

__all__ = [
    "MLKEMError",
    "ParameterSet",
    "ML_KEM_512",
    "ML_KEM_768",
    "ML_KEM_1024",
    "PARAMETER_SETS",
    "kpke_keygen",
    "kpke_encrypt",
    "kpke_decrypt",
    "keygen_internal",
    "encaps_internal",
    "decaps_internal",
    "keygen",
    "encaps",
    "decaps",
]

_SEED_BYTES = 32
_POLY_BYTES = 384
_COEFF_BITS = 12


class MLKEMError(ValueError):
    """Raised when keys or ciphertexts fail the ML-KEM input checks."""


@dataclass(frozen=True)
class ParameterSet:
    """Parameters of one ML-KEM security level."""

    name: str
    k: int
    eta1: int
    eta2: int
    du: int
    dv: int

    def encapsulation_key_size(self) -> int:
        """Length of an encapsulation key in bytes."""
        return _POLY_BYTES * self.k + _SEED_BYTES

    def decapsulation_key_size(self) -> int:
        """Length of a decapsulation key in bytes."""
        return 2 * _POLY_BYTES * self.k + 3 * _SEED_BYTES

    def ciphertext_size(self) -> int:
        """Length of a ciphertext in bytes."""
        return 32 * (self.du * self.k + self.dv)


ML_KEM_512 = ParameterSet("ML-KEM-512", k=2, eta1=3, eta2=2, du=10, dv=4)
ML_KEM_768 = ParameterSet("ML-KEM-768", k=3, eta1=2, eta2=2, du=10, dv=4)
ML_KEM_1024 = ParameterSet("ML-KEM-1024", k=4, eta1=2, eta2=2, du=11, dv=5)

PARAMETER_SETS = {p.name: p for p in (ML_KEM_512, ML_KEM_768, ML_KEM_1024)}


def _require_length(what: str, data: bytes, expected: int) -> None:
    if len(data) != expected:
        raise MLKEMError(
            f"invalid {what} length: expected {expected}, got {len(data)}"
        )


def _chunks(data: bytes, size: int) -> Iterator[bytes]:
    return (data[start : start + size] for start in range(0, len(data), size))


def _dot(row: Sequence[Sequence[int]], vector: Sequence[Sequence[int]]) -> list[int]:
    """Inner product of two vectors of polynomials in NTT form."""
    return reduce(
        sum_poly,
        (multiply_ntts(a, b) for a, b in zip(row, vector, strict=True)),
        [0] * N,
    )


def _sample_vector(
    seed: bytes, nonces: Iterator[int], eta: int, count: int
) -> list[list[int]]:
    return [sample_poly_cbd(prf(seed, next(nonces), eta), eta) for _ in range(count)]


def kpke_keygen(d: bytes, params: ParameterSet = ML_KEM_512) -> tuple[bytes, bytes]:
    """Derive a K-PKE key pair (encryption key, decryption key) from a 32-byte seed."""
    _require_length("seed d", d, _SEED_BYTES)
    k = params.k
    expanded = sha3_512(bytes(d) + bytes([k]))
    rho, sigma = expanded[:_SEED_BYTES], expanded[_SEED_BYTES:]

    a_hat = generate_matrix(rho, k)
    nonces = itertools.count()
    s = _sample_vector(sigma, nonces, params.eta1, k)
    e = _sample_vector(sigma, nonces, params.eta1, k)
    s_hat = [ntt(p) for p in s]
    e_hat = [ntt(p) for p in e]

    t_hat = [sum_poly(_dot(row, s_hat), err) for row, err in zip(a_hat, e_hat)]

    ek = b"".join(byte_encode(t, _COEFF_BITS) for t in t_hat) + rho
    dk = b"".join(byte_encode(p, _COEFF_BITS) for p in s_hat)
    return ek, dk


def kpke_encrypt(
    ek: bytes, m: bytes, r: bytes, params: ParameterSet = ML_KEM_512
) -> bytes:
    """Encrypt a 32-byte message under ``ek`` using the 32-byte randomness ``r``."""
    _require_length("encryption key", ek, params.encapsulation_key_size())
    _require_length("message", m, _SEED_BYTES)
    _require_length("randomness", r, _SEED_BYTES)
    k = params.k
    split = _POLY_BYTES * k

    t_hat = [byte_decode(chunk, _COEFF_BITS) for chunk in _chunks(ek[:split], _POLY_BYTES)]
    rho = ek[split:]
    a_hat_t = transpose(generate_matrix(rho, k))

    nonces = itertools.count()
    y = _sample_vector(r, nonces, params.eta1, k)
    e1 = _sample_vector(r, nonces, params.eta2, k)
    e2 = sample_poly_cbd(prf(r, next(nonces), params.eta2), params.eta2)
    y_hat = [ntt(p) for p in y]

    u = [sum_poly(ntt_inverse(_dot(row, y_hat)), err) for row, err in zip(a_hat_t, e1)]
    mu = decompress(byte_decode(m, 1), 1)
    v = sum_poly(sum_poly(ntt_inverse(_dot(t_hat, y_hat)), e2), mu)

    c1 = b"".join(byte_encode(compress(p, params.du), params.du) for p in u)
    c2 = byte_encode(compress(v, params.dv), params.dv)
    return c1 + c2


def kpke_decrypt(dk: bytes, c: bytes, params: ParameterSet = ML_KEM_512) -> bytes:
    """Decrypt a K-PKE ciphertext with the decryption key ``dk``."""
    _require_length("decryption key", dk, _POLY_BYTES * params.k)
    _require_length("ciphertext", c, params.ciphertext_size())
    split = 32 * params.du * params.k
    c1, c2 = c[:split], c[split:]

    u = [
        decompress(byte_decode(chunk, params.du), params.du)
        for chunk in _chunks(c1, 32 * params.du)
    ]
    v = decompress(byte_decode(c2, params.dv), params.dv)
    s_hat = [byte_decode(chunk, _COEFF_BITS) for chunk in _chunks(dk, _POLY_BYTES)]

    product = ntt_inverse(_dot(s_hat, [ntt(p) for p in u]))
    w = [(a - b) % Q for a, b in zip(v, product)]
    return byte_encode(compress(w, 1), 1)


def keygen_internal(
    d: bytes, z: bytes, params: ParameterSet = ML_KEM_512
) -> tuple[bytes, bytes]:
    """Derive an ML-KEM key pair (encapsulation key, decapsulation key) from seeds."""
    _require_length("seed z", z, _SEED_BYTES)
    ek, dk_pke = kpke_keygen(d, params)
    dk = dk_pke + ek + sha3_256(ek) + bytes(z)
    return ek, dk


def encaps_internal(
    ek: bytes, m: bytes, params: ParameterSet = ML_KEM_512
) -> tuple[bytes, bytes]:
    """Encapsulate with explicit randomness ``m``; returns (shared key, ciphertext)."""
    _require_length("message", m, _SEED_BYTES)
    g = sha3_512(bytes(m) + sha3_256(ek))
    key, r = g[:_SEED_BYTES], g[_SEED_BYTES:]
    return key, kpke_encrypt(ek, m, r, params)


def decaps_internal(dk: bytes, c: bytes, params: ParameterSet = ML_KEM_512) -> bytes:
    """Recover the shared key, or the implicit-rejection key if ``c`` is not genuine."""
    _require_length("decapsulation key", dk, params.decapsulation_key_size())
    _require_length("ciphertext", c, params.ciphertext_size())
    dk_end = _POLY_BYTES * params.k
    ek_end = dk_end + params.encapsulation_key_size()
    dk_pke = dk[:dk_end]
    ek_pke = dk[dk_end:ek_end]
    h = dk[ek_end : ek_end + _SEED_BYTES]
    z = dk[ek_end + _SEED_BYTES :]

    m_prime = kpke_decrypt(dk_pke, c, params)
    g = sha3_512(m_prime + h)
    key_prime, r_prime = g[:_SEED_BYTES], g[_SEED_BYTES:]
    key_bar = shake256(z + bytes(c), _SEED_BYTES)
    c_prime = kpke_encrypt(ek_pke, m_prime, r_prime, params)
    return key_prime if hmac.compare_digest(bytes(c), c_prime) else key_bar


def keygen(
    params: ParameterSet = ML_KEM_512,
    d: bytes | None = None,
    z: bytes | None = None,
) -> tuple[bytes, bytes]:
    """Generate an ML-KEM key pair; seeds not given are drawn from the OS."""
    if d is None:
        d = randombytes(_SEED_BYTES)
    if z is None:
        z = randombytes(_SEED_BYTES)
    return keygen_internal(d, z, params)


def _check_encapsulation_key(ek: bytes, params: ParameterSet) -> None:
    _require_length("encapsulation key", ek, params.encapsulation_key_size())
    for chunk in _chunks(ek[: _POLY_BYTES * params.k], _POLY_BYTES):
        reduced = [x % Q for x in byte_decode(chunk, _COEFF_BITS)]
        if byte_encode(reduced, _COEFF_BITS) != chunk:
            raise MLKEMError("encapsulation key holds coefficients out of range")


def encaps(
    ek: bytes, params: ParameterSet = ML_KEM_512, m: bytes | None = None
) -> tuple[bytes, bytes]:
    """Check ``ek`` and encapsulate; returns (shared key, ciphertext)."""
    ek = bytes(ek)
    _check_encapsulation_key(ek, params)
    if m is None:
        m = randombytes(_SEED_BYTES)
    return encaps_internal(ek, m, params)


def decaps(dk: bytes, c: bytes, params: ParameterSet = ML_KEM_512) -> bytes:
    """Check ``dk`` and ``c`` and decapsulate; returns the shared key."""
    dk = bytes(dk)
    c = bytes(c)
    _require_length("decapsulation key", dk, params.decapsulation_key_size())
    _require_length("ciphertext", c, params.ciphertext_size())
    ek_start = _POLY_BYTES * params.k
    h_start = ek_start + params.encapsulation_key_size()
    if sha3_256(dk[ek_start:h_start]) != dk[h_start : h_start + _SEED_BYTES]:
        raise MLKEMError("decapsulation key hash check failed")
    return decaps_internal(dk, c, params)