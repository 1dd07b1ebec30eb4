"""blake2core: streaming BLAKE2b and BLAKE2s in pure Python."""

__version__ = "0.1.0"

from .crypto import (
    Blake2,
    Blake2Error,
    ConfigurationError,
    StateError,
    blake2b,
    blake2b_digest,
    blake2s,
    blake2s_digest,
    new,
)
from .config import Config, Variant, VariantParams

__all__ = [
    "Blake2",
    "Blake2Error",
    "Config",
    "ConfigurationError",
    "StateError",
    "Variant",
    "VariantParams",
    "blake2b",
    "blake2b_digest",
    "blake2s",
    "blake2s_digest",
    "new",
]
