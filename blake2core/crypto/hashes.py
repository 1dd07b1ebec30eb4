"""Digest primitives."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from cryptography.hazmat.primitives import constant_time

from ..config import Config, Variant
from .engine import BytesLike, blake2b, blake2s, new
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def blake2b_digest(data: BytesLike, *, key: BytesLike | None = None) -> bytes:
    """Compute a 64-byte BLAKE2b digest.

    Args:
        data: Data to hash.
        key: Optional key (up to 64 bytes) for keyed BLAKE2b (MAC-like usage).

    Returns:
        Digest bytes.
    """

    return blake2b(data, key=key or b"").finalize()


def blake2s_digest(data: BytesLike, *, key: BytesLike | None = None) -> bytes:
    """Compute a 32-byte BLAKE2s digest; ``key`` may be up to 32 bytes."""

    return blake2s(data, key=key or b"").finalize()


def hash_file(
    path: str | Path,
    *,
    variant: Optional[Union[Variant, str]] = None,
    key: BytesLike | None = None,
    chunk_size: int | None = None,
    config: Config | None = None,
) -> bytes:
    """
    Hash a file without loading it into memory.

    Args:
        path: Path to file.
        variant: Variant to use. Defaults to the configured default variant.
        key: Optional key.
        chunk_size: Read chunk size in bytes. Defaults to the configured size.
        config: Configuration supplying the defaults.

    Returns:
        Raw digest bytes.

    Raises:
        ConfigurationError: If ``chunk_size`` is not positive.
    """
    config = config or Config()
    if chunk_size is None:
        chunk_size = config.chunk_size
    if chunk_size <= 0:
        raise ConfigurationError("chunk_size must be positive")

    engine = new(variant, key=key or b"", config=config)
    path = Path(path)

    with path.open("rb") as f:
        while chunk := f.read(chunk_size):
            engine.absorb(chunk)

    logger.debug("hashed %s with %s", path, engine.name)
    return engine.finalize()


def verify_digest(
    data: BytesLike,
    expected: bytes,
    *,
    variant: Optional[Union[Variant, str]] = None,
    key: BytesLike | None = None,
) -> bool:
    """
    Verify data matches an expected digest.

    The comparison runs in constant time, which matters when ``key`` is set
    and the digest acts as a MAC.

    Args:
        data: Data to verify.
        expected: Expected raw digest.
        variant: Variant the digest was produced with. Defaults to BLAKE2b.
        key: Key the digest was produced with, if any.

    Returns:
        True if the digests match.
    """
    actual = new(variant, data, key=key or b"").finalize()
    if len(actual) != len(expected):
        return False
    return constant_time.bytes_eq(actual, bytes(expected))
