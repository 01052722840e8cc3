import hashlib

import pytest

from mlkem.hashes import (
    Sha3,
    Sha3_256,
    Sha3_384,
    Sha3_512,
    Shake128,
    Shake256,
    sha3_256,
    sha3_384,
    sha3_512,
    shake128,
    shake256,
)

MESSAGES = [
    b"",
    b"abc",
    bytes(range(71)),
    bytes(range(72)),
    bytes(range(73)),
    bytes(range(135)),
    bytes(range(136)),
    bytes(range(137)),
    bytes(range(168)),
    bytes(i % 251 for i in range(500)),
]


def test_sha3_256_empty_known_value():
    assert sha3_256(b"").hex() == (
        "a7ffc6f8bf1ed76651c14756a061d662f580ff4de43b49fa82d80a4b80f8434a"
    )


def test_sha3_256_abc_known_value():
    assert sha3_256(b"abc").hex() == (
        "3a985da74fe225b2045c172d6bd390bd855f086e3e9d525b46bfe24511431532"
    )


@pytest.mark.parametrize("message", MESSAGES)
def test_sha3_one_shot_matches_reference(message):
    assert sha3_256(message) == hashlib.sha3_256(message).digest()
    assert sha3_384(message) == hashlib.sha3_384(message).digest()
    assert sha3_512(message) == hashlib.sha3_512(message).digest()


@pytest.mark.parametrize("message", MESSAGES)
@pytest.mark.parametrize("length", [0, 1, 32, 136, 168, 200, 1344])
def test_shake_one_shot_matches_reference(message, length):
    assert shake128(message, length) == hashlib.shake_128(message).digest(length)
    assert shake256(message, length) == hashlib.shake_256(message).digest(length)


def test_digest_sizes():
    assert len(sha3_256(b"x")) == 32
    assert len(sha3_384(b"x")) == 48
    assert len(sha3_512(b"x")) == 64
    assert Sha3_256().block_size == 136
    assert Sha3_384().block_size == 104
    assert Sha3_512().block_size == 72


@pytest.mark.parametrize("cls", [Sha3_256, Sha3_384, Sha3_512])
def test_incremental_sha3_matches_one_shot(cls):
    message = bytes(i % 256 for i in range(400))
    h = cls()
    for start in range(0, len(message), 37):
        h.update(message[start : start + 37])
    assert h.digest() == cls(message).digest()


def test_digest_does_not_consume_state():
    h = Sha3_256(b"hello ")
    first = h.digest()
    assert h.digest() == first
    h.update(b"world")
    assert h.digest() == hashlib.sha3_256(b"hello world").digest()
    assert first == hashlib.sha3_256(b"hello ").digest()


def test_sha3_copy_is_independent():
    h = Sha3_512(b"prefix")
    clone = h.copy()
    clone.update(b"-more")
    assert isinstance(clone, Sha3_512)
    assert h.digest() == hashlib.sha3_512(b"prefix").digest()
    assert clone.digest() == hashlib.sha3_512(b"prefix-more").digest()


def test_hexdigest_matches_digest():
    h = Sha3_384(b"data")
    assert h.hexdigest() == h.digest().hex()


def test_sha3_rejects_bad_digest_size():
    with pytest.raises(ValueError):
        Sha3(72, 0)
    with pytest.raises(ValueError):
        Sha3(72, 73)


def test_generic_sha3_equals_named_variant():
    assert Sha3(136, 32, b"abc").digest() == sha3_256(b"abc")


@pytest.mark.parametrize("cls,ref", [(Shake128, hashlib.shake_128), (Shake256, hashlib.shake_256)])
def test_incremental_shake_absorb_and_squeeze(cls, ref):
    message = bytes(i % 256 for i in range(333))
    xof = cls()
    for start in range(0, len(message), 50):
        xof.absorb(message[start : start + 50])
    xof.finalize()
    out = b"".join(xof.squeeze(n) for n in (1, 7, 200, 0, 92))
    assert out == ref(message).digest(300)


@pytest.mark.parametrize("cls,ref,rate", [
    (Shake128, hashlib.shake_128, 168),
    (Shake256, hashlib.shake_256, 136),
])
def test_shake_squeeze_blocks(cls, ref, rate):
    xof = cls(b"seed").finalize()
    blocks = xof.squeeze_blocks(2) + xof.squeeze_blocks(1)
    assert len(blocks) == 3 * rate
    assert blocks == ref(b"seed").digest(3 * rate)


def test_shake_copy_continues_identically():
    xof = Shake128(b"abc").finalize()
    xof.squeeze(10)
    clone = xof.copy()
    assert clone.squeeze(50) == xof.squeeze(50)


def test_shake_squeeze_before_finalize_raises():
    with pytest.raises(RuntimeError):
        Shake256(b"abc").squeeze(4)


def test_shake_absorb_after_finalize_raises():
    xof = Shake128(b"abc").finalize()
    with pytest.raises(RuntimeError):
        xof.absorb(b"more")