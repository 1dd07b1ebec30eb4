from __future__ import annotations

import pytest
from cryptography.hazmat.primitives import hashes

from blake2core.config import Variant, VariantParams
from blake2core.crypto import (
    Blake2,
    ConfigurationError,
    StateError,
    blake2b,
    blake2s,
    new,
)

# RFC 7693 Appendix A and the BLAKE2s reference test.
KNOWN_DIGESTS = {
    (Variant.BLAKE2B, b""): (
        "786a02f742015903c6c6fd852552d272912f4740e15847618a86e217f71f5419"
        "d25e1031afee585313896444934eb04b903a685b1448b755d56f701afe9be2ce"
    ),
    (Variant.BLAKE2B, b"abc"): (
        "ba80a53f981c4d0d6a2797b69f12f6e94c212f14685ac4b74b12bb6fdbffa2d1"
        "7d87c5392aab792dc252d5de4533cc9518d38aa8dbf1925ab92386edd4009923"
    ),
    (Variant.BLAKE2S, b""): "69217a3079908094e11121d042354a7c1f55b6482ca1a51e1b250dfd1ed0eef9",
    (Variant.BLAKE2S, b"abc"): "508c5e8c327c14e2e1a72ba34eeb452f37458b209ed63a294d999b4c86675982",
}


def _digest(params: VariantParams, data: bytes, key: bytes = b"") -> bytes:
    engine = Blake2(params, key)
    engine.absorb(data)
    return engine.finalize()


def _lengths(block_size: int) -> list[int]:
    b = block_size
    return [0, 1, b - 1, b, b + 1, 2 * b - 1, 2 * b, 2 * b + 1, 3 * b, 5 * b + 7]


@pytest.mark.parametrize(("which", "message"), list(KNOWN_DIGESTS))
def test_known_vectors(which: Variant, message: bytes) -> None:
    params = VariantParams.for_variant(which)
    assert _digest(params, message).hex() == KNOWN_DIGESTS[(which, message)]


def test_matches_hashlib_across_block_boundaries(params, reference) -> None:
    for n in _lengths(params.block_size):
        data = bytes((i * 7 + 3) & 0xFF for i in range(n))
        assert _digest(params, data) == reference(data).digest(), n


def test_matches_cryptography_backend(variant, params, sample_message) -> None:
    algorithm = hashes.BLAKE2b(64) if variant is Variant.BLAKE2B else hashes.BLAKE2s(32)
    h = hashes.Hash(algorithm)
    h.update(sample_message)
    assert _digest(params, sample_message) == h.finalize()


def test_keyed_matches_hashlib(params, reference, sample_message) -> None:
    for key_len in (1, 16, params.key_size - 1, params.key_size):
        key = bytes(range(key_len))
        for n in (0, 3, params.block_size, 2 * params.block_size + 5):
            data = sample_message[:n]
            assert _digest(params, data, key) == reference(data, key=key).digest(), (key_len, n)


def test_digest_size_is_fixed_for_every_key_length(params) -> None:
    for key_len in range(params.key_size + 1):
        for n in (0, 1, params.block_size + 1):
            digest = _digest(params, b"\x5a" * n, bytes(key_len))
            assert len(digest) == params.digest_size


def test_empty_key_equals_unkeyed(params, sample_message) -> None:
    unkeyed = Blake2(params)
    unkeyed.absorb(sample_message)
    assert _digest(params, sample_message, b"") == unkeyed.finalize()


def test_streaming_any_split_point(params, sample_message) -> None:
    message = sample_message[: 2 * params.block_size + 9]
    expected = _digest(params, message)
    for split in range(len(message) + 1):
        engine = Blake2(params)
        engine.absorb(message[:split])
        engine.absorb(message[split:])
        assert engine.finalize() == expected, split


def test_streaming_small_chunks(params, sample_message) -> None:
    expected = _digest(params, sample_message)
    for chunk in (1, 7, params.block_size - 1, params.block_size, 3 * params.block_size):
        engine = Blake2(params)
        for i in range(0, len(sample_message), chunk):
            engine.absorb(sample_message[i:i + chunk])
        assert engine.finalize() == expected, chunk


def test_accepts_bytes_like_input(params, sample_message) -> None:
    expected = _digest(params, sample_message)
    for data in (bytearray(sample_message), memoryview(sample_message)):
        assert _digest(params, data) == expected


def test_rejects_text_input(params) -> None:
    engine = Blake2(params)
    with pytest.raises(TypeError):
        engine.absorb("abc")


@pytest.mark.parametrize("case", ["empty", "one", "block-1", "block", "block+1", "2block", "2block+1"])
def test_compression_count(params, case) -> None:
    b = params.block_size
    n = {
        "empty": 0,
        "one": 1,
        "block-1": b - 1,
        "block": b,
        "block+1": b + 1,
        "2block": 2 * b,
        "2block+1": 2 * b + 1,
    }[case]

    engine = Blake2(params)
    flags: list[int] = []
    compress = engine._compress

    def counting(block):
        flags.append(engine._f[0])
        compress(block)

    engine._compress = counting
    engine.absorb(b"\x00" * n)
    engine.finalize()

    non_final = [f for f in flags if f == 0]
    final = [f for f in flags if f != 0]
    assert len(non_final) == (0 if n == 0 else (n - 1) // b)
    assert len(final) == 1
    assert flags[-1] == params.mask


def test_keyed_empty_message_compresses_key_block_once(params) -> None:
    engine = Blake2(params, b"k")
    flags: list[int] = []
    compress = engine._compress

    def counting(block):
        flags.append(engine._f[0])
        compress(block)

    engine._compress = counting
    engine.finalize()
    assert flags == [params.mask]


def test_finalize_twice_raises_state_error(params) -> None:
    engine = Blake2(params)
    engine.absorb(b"abc")
    engine.finalize()
    assert engine.finalized

    with pytest.raises(StateError):
        engine.finalize()
    with pytest.raises(StateError):
        engine.absorb(b"more")


def test_state_error_leaves_engine_untouched(params, sample_message) -> None:
    engine = Blake2(params)
    engine.absorb(sample_message)
    engine.finalize()
    snapshot = (list(engine._h), list(engine._t), list(engine._f), bytes(engine._buf), engine._buflen)

    with pytest.raises(StateError):
        engine.absorb(b"x" * (3 * params.block_size))
    with pytest.raises(StateError):
        engine.sum(b"prefix")

    assert snapshot == (list(engine._h), list(engine._t), list(engine._f), bytes(engine._buf), engine._buflen)


def test_oversized_key_raises_configuration_error(params) -> None:
    with pytest.raises(ConfigurationError):
        Blake2(params, bytes(params.key_size + 1))


def test_oversized_key_on_reset_keeps_state(params, sample_message) -> None:
    engine = Blake2(params)
    engine.absorb(sample_message)
    with pytest.raises(ConfigurationError):
        engine.reset(bytes(params.key_size + 1))
    assert engine.finalize() == _digest(params, sample_message)


def test_reset_reuses_key(params, reference) -> None:
    key = b"secret key"
    engine = Blake2(params, key)
    engine.absorb(b"first")
    first = engine.finalize()

    engine.reset()
    engine.absorb(b"first")
    assert engine.finalize() == first == reference(b"first", key=key).digest()

    engine.reset(b"")
    engine.absorb(b"first")
    assert engine.finalize() == reference(b"first").digest()


def test_write_and_sum(params, reference) -> None:
    engine = Blake2(params)
    assert engine.write(b"hello ") == 6
    assert engine.write(bytearray(b"world")) == 5
    assert engine.write(b"") == 0

    out = engine.sum(b"\x01\x02")
    assert out[:2] == b"\x01\x02"
    assert out[2:] == reference(b"hello world").digest()


def test_sizes(params) -> None:
    engine = Blake2(params)
    assert engine.block_size == params.block_size
    assert engine.output_size == params.digest_size
    assert engine.key_size == params.key_size
    assert engine.name == params.name


def test_counter_carry_increments_high_word(params) -> None:
    engine = Blake2(params)
    engine._t = [params.mask, 0]
    engine._increment_counter(1)
    assert engine._t == [0, 1]

    engine._t = [params.mask - 1, 5]
    engine._increment_counter(3)
    assert engine._t == [1, 6]

    engine._t = [10, 0]
    engine._increment_counter(params.block_size)
    assert engine._t == [10 + params.block_size, 0]


def test_instances_are_independent(params) -> None:
    a = Blake2(params)
    b = Blake2(params, b"key")
    a.absorb(b"shared")
    b.absorb(b"shared")
    assert a.finalize() != b.finalize()


def test_factories(sample_message) -> None:
    b = blake2b(sample_message)
    s = blake2s(sample_message, key=b"k")
    assert b.block_size == 128 and b.output_size == 64
    assert s.block_size == 64 and s.output_size == 32
    assert new("BLAKE2B", sample_message).finalize() == b.finalize()
    assert new(Variant.BLAKE2S, sample_message, key=b"k").finalize() == s.finalize()


def test_new_uses_configured_default(sample_config) -> None:
    assert new(config=sample_config).output_size == 32
    assert new().output_size == 64


def test_new_rejects_unknown_variant() -> None:
    with pytest.raises(ConfigurationError, match="Unknown BLAKE2 variant"):
        new("blake3")
