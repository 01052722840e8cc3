import hashlib

import pytest

from mlkem.keccak import Sponge, keccak_f1600

SHA3_256_RATE = 136
SHA3_512_RATE = 72
SHAKE128_RATE = 168
SHAKE256_RATE = 136


def _sha3_256(data):
    return Sponge(SHA3_256_RATE, 0x06).absorb(data).finalize().squeeze(32)


def test_permutation_of_zero_state_first_lane():
    result = keccak_f1600([0] * 25)
    assert result[0] == 0xF1258F7940E1DDE7
    assert len(result) == 25


def test_permutation_keeps_lanes_in_64_bits():
    result = keccak_f1600([(1 << 64) - 1] * 25)
    assert all(0 <= lane < (1 << 64) for lane in result)


def test_permutation_does_not_modify_input():
    state = list(range(25))
    keccak_f1600(state)
    assert state == list(range(25))


def test_permutation_rejects_wrong_length():
    with pytest.raises(ValueError):
        keccak_f1600([0] * 24)


@pytest.mark.parametrize("length", [0, 1, 71, 72, 73, 135, 136, 137, 300, 1000])
def test_sha3_256_matches_hashlib(length):
    data = bytes(i % 251 for i in range(length))
    assert _sha3_256(data) == hashlib.sha3_256(data).digest()


@pytest.mark.parametrize("length", [0, 71, 72, 73, 200])
def test_sha3_512_matches_hashlib(length):
    data = bytes((7 * i) % 256 for i in range(length))
    sponge = Sponge(SHA3_512_RATE, 0x06).absorb(data).finalize()
    assert sponge.squeeze(64) == hashlib.sha3_512(data).digest()


def test_chunked_absorb_matches_single_absorb():
    data = bytes(range(256)) * 3
    sponge = Sponge(SHA3_256_RATE, 0x06)
    for start in range(0, len(data), 37):
        sponge.absorb(data[start : start + 37])
    assert sponge.finalize().squeeze(32) == _sha3_256(data)


@pytest.mark.parametrize("length", [0, 1, 167, 168, 169, 500])
def test_shake128_squeeze_matches_hashlib(length):
    data = b"abc" * 10
    sponge = Sponge(SHAKE128_RATE, 0x1F).absorb(data).finalize()
    assert sponge.squeeze(length) == hashlib.shake_128(data).digest(length)


def test_squeeze_in_pieces_matches_single_squeeze():
    data = b"sponge input"
    whole = Sponge(SHAKE256_RATE, 0x1F).absorb(data).finalize().squeeze(600)
    sponge = Sponge(SHAKE256_RATE, 0x1F).absorb(data).finalize()
    pieces = b"".join(sponge.squeeze(n) for n in (1, 50, 135, 136, 0, 278))
    assert pieces == whole


def test_squeeze_blocks_matches_hashlib():
    data = bytes(34)
    sponge = Sponge(SHAKE128_RATE, 0x1F).absorb(data).finalize()
    out = sponge.squeeze_blocks(3)
    assert len(out) == 3 * SHAKE128_RATE
    assert out == hashlib.shake_128(data).digest(3 * SHAKE128_RATE)


def test_squeeze_blocks_is_incremental():
    data = b"more"
    sponge = Sponge(SHAKE256_RATE, 0x1F).absorb(data).finalize()
    first = sponge.squeeze_blocks(1)
    second = sponge.squeeze_blocks(2)
    assert first + second == hashlib.shake_256(data).digest(3 * SHAKE256_RATE)


def test_copy_is_independent():
    sponge = Sponge(SHA3_256_RATE, 0x06).absorb(b"prefix-")
    clone = sponge.copy()
    sponge.absorb(b"one")
    clone.absorb(b"two")
    assert sponge.finalize().squeeze(32) == hashlib.sha3_256(b"prefix-one").digest()
    assert clone.finalize().squeeze(32) == hashlib.sha3_256(b"prefix-two").digest()


def test_copy_during_squeeze_continues_identically():
    sponge = Sponge(SHAKE128_RATE, 0x1F).absorb(b"x").finalize()
    sponge.squeeze(10)
    clone = sponge.copy()
    assert sponge.squeeze(300) == clone.squeeze(300)


def test_finalized_flag():
    sponge = Sponge(SHA3_256_RATE, 0x06)
    assert sponge.finalized is False
    sponge.finalize()
    assert sponge.finalized is True


def test_absorb_after_finalize_raises():
    sponge = Sponge(SHA3_256_RATE, 0x06).finalize()
    with pytest.raises(RuntimeError):
        sponge.absorb(b"late")


def test_double_finalize_raises():
    sponge = Sponge(SHA3_256_RATE, 0x06).finalize()
    with pytest.raises(RuntimeError):
        sponge.finalize()


def test_squeeze_before_finalize_raises():
    sponge = Sponge(SHAKE128_RATE, 0x1F)
    with pytest.raises(RuntimeError):
        sponge.squeeze(1)
    with pytest.raises(RuntimeError):
        sponge.squeeze_blocks(1)


def test_negative_lengths_raise():
    sponge = Sponge(SHAKE128_RATE, 0x1F).finalize()
    with pytest.raises(ValueError):
        sponge.squeeze(-1)
    with pytest.raises(ValueError):
        sponge.squeeze_blocks(-1)


@pytest.mark.parametrize("rate", [0, 7, 200, 201, -8])
def test_invalid_rate_raises(rate):
    with pytest.raises(ValueError):
        Sponge(rate, 0x06)


@pytest.mark.parametrize("pad", [-1, 256])
def test_invalid_pad_raises(pad):
    with pytest.raises(ValueError):
        Sponge(SHA3_256_RATE, pad)