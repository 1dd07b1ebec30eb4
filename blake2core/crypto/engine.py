"""Streaming BLAKE2 engine.

One implementation covers both BLAKE2b (64-bit words) and BLAKE2s (32-bit
words); everything that depends on the word width comes from a
:class:`~blake2core.config.VariantParams`.

The input buffer holds up to two blocks. A completed block is only compressed
once more input arrives behind it, so the last block of the message is always
still buffered when :meth:`Blake2.finalize` runs and can be compressed with the
finalization flag set.
"""

from __future__ import annotations

import logging
import struct
from typing import Optional, Union

from ..config import Config, Variant, VariantParams
from .errors import ConfigurationError, StateError

logger = logging.getLogger(__name__)

# Message word schedule. BLAKE2s uses the first ten rows; BLAKE2b runs twelve
# rounds, with rows 10 and 11 repeating rows 0 and 1.
SIGMA: tuple[tuple[int, ...], ...] = (
    (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15),
    (14, 10, 4, 8, 9, 15, 13, 6, 1, 12, 0, 2, 11, 7, 5, 3),
    (11, 8, 12, 0, 5, 2, 15, 13, 10, 14, 3, 6, 7, 1, 9, 4),
    (7, 9, 3, 1, 13, 12, 11, 14, 2, 6, 5, 10, 4, 0, 15, 8),
    (9, 0, 5, 7, 2, 4, 10, 15, 14, 1, 11, 12, 6, 8, 3, 13),
    (2, 12, 6, 10, 0, 11, 8, 3, 4, 13, 7, 5, 15, 14, 1, 9),
    (12, 5, 1, 15, 14, 13, 4, 10, 0, 7, 6, 3, 9, 2, 8, 11),
    (13, 11, 7, 14, 12, 1, 3, 9, 5, 0, 15, 4, 8, 6, 2, 10),
    (6, 15, 14, 9, 11, 3, 0, 8, 12, 2, 13, 7, 1, 4, 10, 5),
    (10, 2, 8, 4, 7, 6, 1, 5, 15, 11, 9, 14, 3, 12, 13, 0),
    (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15),
    (14, 10, 4, 8, 9, 15, 13, 6, 1, 12, 0, 2, 11, 7, 5, 3),
)

# (a, b, c, d) work vector indices of each mixing step: four columns, then
# four diagonals.
MIX_LANES: tuple[tuple[int, int, int, int], ...] = (
    (0, 4, 8, 12),
    (1, 5, 9, 13),
    (2, 6, 10, 14),
    (3, 7, 11, 15),
    (0, 5, 10, 15),
    (1, 6, 11, 12),
    (2, 7, 8, 13),
    (3, 4, 9, 14),
)

BytesLike = Union[bytes, bytearray, memoryview]


class Blake2:
    """Incremental BLAKE2 hash computation.

    Args:
        params: Variant parameter set (see :meth:`VariantParams.blake2b`).
        key: Optional key of at most ``params.key_size`` bytes. A non-empty
            key turns the hash into a MAC.

    Raises:
        ConfigurationError: If ``key`` is longer than ``params.key_size``.
    """

    def __init__(self, params: VariantParams, key: BytesLike = b"") -> None:
        self.params = params
        self._key = b""
        self._h: list[int] = []
        self._t = [0, 0]
        self._f = [0, 0]
        self._buf = bytearray(2 * params.block_size)
        self._buflen = 0
        self.reset(key)

    @property
    def name(self) -> str:
        return self.params.name

    @property
    def block_size(self) -> int:
        return self.params.block_size

    @property
    def output_size(self) -> int:
        return self.params.digest_size

    @property
    def key_size(self) -> int:
        return self.params.key_size

    @property
    def finalized(self) -> bool:
        """Whether the final block has been compressed."""
        return self._f[0] != 0

    def reset(self, key: Optional[BytesLike] = None) -> None:
        """(Re)initialize the engine.

        Args:
            key: New key. ``None`` keeps the key the engine was last set up
                with; ``b""`` switches to unkeyed hashing.

        Raises:
            ConfigurationError: If ``key`` is too long. The engine is left
                untouched in that case.
        """

        key = self._key if key is None else bytes(key)
        p = self.params
        if len(key) > p.key_size:
            logger.debug("rejecting %d-byte key for %s", len(key), p.name)
            raise ConfigurationError(
                f"{p.name} key must be at most {p.key_size} bytes, got {len(key)}"
            )

        param_block = bytes([p.digest_size, len(key), 1, 1]).ljust(8 * p.word_bytes, b"\x00")
        self._h = [iv ^ w for iv, w in zip(p.iv, struct.unpack(p.state_format, param_block))]
        self._t = [0, 0]
        self._f = [0, 0]
        self._buflen = 0
        self._key = key
        logger.debug("initialized %s engine (key length %d)", p.name, len(key))

        if key:
            self.absorb(key.ljust(p.block_size, b"\x00"))

    def absorb(self, data: BytesLike) -> None:
        """Feed ``data`` into the hash.

        Raises:
            StateError: If the engine has already been finalized.
        """

        view = memoryview(data).cast("B")
        self._ensure_active("absorb")

        block_size = self.params.block_size
        capacity = 2 * block_size
        offset = 0
        remaining = len(view)
        while remaining > 0:
            free = capacity - self._buflen
            if remaining > free:
                self._buf[self._buflen:] = view[offset:offset + free]
                self._buflen = capacity
                self._increment_counter(block_size)
                self._compress(self._buf)
                self._buf[:block_size] = self._buf[block_size:]
                self._buflen -= block_size
                offset += free
                remaining -= free
            else:
                self._buf[self._buflen:self._buflen + remaining] = view[offset:]
                self._buflen += remaining
                remaining = 0

    def finalize(self) -> bytes:
        """Compress the last block and return the digest.

        The engine is terminal afterwards until :meth:`reset` is called.

        Raises:
            StateError: If the engine has already been finalized.
        """

        self._ensure_active("finalize")

        p = self.params
        block_size = p.block_size
        if self._buflen > block_size:
            self._increment_counter(block_size)
            self._compress(self._buf)
            self._buf[:block_size] = self._buf[block_size:]
            self._buflen -= block_size

        self._increment_counter(self._buflen)
        self._f[0] = p.mask
        self._buf[self._buflen:] = bytes(len(self._buf) - self._buflen)
        self._compress(self._buf)

        total = self._t[0] | (self._t[1] << p.word_bits)
        logger.debug("finalized %s engine after %d bytes", p.name, total)
        return struct.pack(p.state_format, *self._h)[: p.digest_size]

    def write(self, data: BytesLike) -> int:
        """Absorb ``data`` and return the number of bytes consumed."""

        self.absorb(data)
        return memoryview(data).nbytes

    def sum(self, prefix: BytesLike = b"") -> bytes:
        """Finalize and return ``prefix`` followed by the digest."""

        return bytes(prefix) + self.finalize()

    def _ensure_active(self, operation: str) -> None:
        if self.finalized:
            logger.debug("%s called on finalized %s engine", operation, self.params.name)
            raise StateError(f"cannot {operation}: {self.params.name} engine is already finalized")

    def _increment_counter(self, n: int) -> None:
        mask = self.params.mask
        t0 = (self._t[0] + n) & mask
        self._t[0] = t0
        if t0 < n:
            self._t[1] = (self._t[1] + 1) & mask

    def _compress(self, block: BytesLike) -> None:
        """Mix the first block of ``block`` into the chaining value."""

        p = self.params
        mask = p.mask
        bits = p.word_bits
        r1, r2, r3, r4 = p.rotations
        iv = p.iv

        m = struct.unpack_from(p.block_format, block)
        v = self._h + list(iv)
        v[12] ^= self._t[0]
        v[13] ^= self._t[1]
        v[14] ^= self._f[0]
        v[15] ^= self._f[1]

        for r in range(p.rounds):
            s = SIGMA[r]
            for i, (a, b, c, d) in enumerate(MIX_LANES):
                va, vb, vc, vd = v[a], v[b], v[c], v[d]

                va = (va + vb + m[s[2 * i]]) & mask
                w = vd ^ va
                vd = ((w >> r1) | (w << (bits - r1))) & mask
                vc = (vc + vd) & mask
                w = vb ^ vc
                vb = ((w >> r2) | (w << (bits - r2))) & mask

                va = (va + vb + m[s[2 * i + 1]]) & mask
                w = vd ^ va
                vd = ((w >> r3) | (w << (bits - r3))) & mask
                vc = (vc + vd) & mask
                w = vb ^ vc
                vb = ((w >> r4) | (w << (bits - r4))) & mask

                v[a], v[b], v[c], v[d] = va, vb, vc, vd

        self._h = [h ^ v[i] ^ v[i + 8] for i, h in enumerate(self._h)]


def blake2b(data: BytesLike = b"", *, key: BytesLike = b"") -> Blake2:
    """Create a BLAKE2b engine, optionally keyed, and absorb ``data``."""

    engine = Blake2(VariantParams.for_variant(Variant.BLAKE2B), key)
    if data:
        engine.absorb(data)
    return engine


def blake2s(data: BytesLike = b"", *, key: BytesLike = b"") -> Blake2:
    """Create a BLAKE2s engine, optionally keyed, and absorb ``data``."""

    engine = Blake2(VariantParams.for_variant(Variant.BLAKE2S), key)
    if data:
        engine.absorb(data)
    return engine


def new(
    variant: Optional[Union[Variant, str]] = None,
    data: BytesLike = b"",
    *,
    key: BytesLike = b"",
    config: Optional[Config] = None,
) -> Blake2:
    """Create an engine for ``variant`` (default taken from ``config``).

    Raises:
        ConfigurationError: If the variant is unknown or the key too long.
    """

    config = config or Config()
    engine = Blake2(config.get_params(variant), key)
    if data:
        engine.absorb(data)
    return engine
