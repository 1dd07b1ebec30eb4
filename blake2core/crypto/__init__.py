"""BLAKE2 hashing for blake2core.

:mod:`~blake2core.crypto.engine` holds the streaming engine shared by both
variants; :mod:`~blake2core.crypto.hashes` adds one-shot helpers on top of it.
"""

from __future__ import annotations

from .errors import (
    Blake2Error,
    ConfigurationError,
    StateError,
)
from .engine import Blake2, blake2b, blake2s, new
from .hashes import blake2b_digest, blake2s_digest, hash_file, verify_digest

__all__ = [
    "Blake2",
    "Blake2Error",
    "ConfigurationError",
    "StateError",
    "blake2b",
    "blake2b_digest",
    "blake2s",
    "blake2s_digest",
    "hash_file",
    "new",
    "verify_digest",
]
