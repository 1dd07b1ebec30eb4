"""Configuration management for blake2core.

Each BLAKE2 variant is described by a :class:`VariantParams` value. The hash
engine is generic over these parameters, so adding a variant means adding a
parameter set, not another engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union
from enum import Enum
import os

from .crypto.errors import ConfigurationError


class Variant(Enum):
    """BLAKE2 variants, named by word width."""
    BLAKE2B = "blake2b"
    BLAKE2S = "blake2s"

    @classmethod
    def parse(cls, value: Union["Variant", str]) -> "Variant":
        """Resolve an enum member or a case-insensitive variant name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(f"Unknown BLAKE2 variant: {value!r}") from None


# Initialization vectors are the fractional parts of the square roots of the
# first eight primes (the SHA-512 and SHA-256 IVs respectively).
BLAKE2B_IV: Tuple[int, ...] = (
    0x6A09E667F3BCC908, 0xBB67AE8584CAA73B,
    0x3C6EF372FE94F82B, 0xA54FF53A5F1D36F1,
    0x510E527FADE682D1, 0x9B05688C2B3E6C1F,
    0x1F83D9ABFB41BD6B, 0x5BE0CD19137E2179,
)

BLAKE2S_IV: Tuple[int, ...] = (
    0x6A09E667, 0xBB67AE85,
    0x3C6EF372, 0xA54FF53A,
    0x510E527F, 0x9B05688C,
    0x1F83D9AB, 0x5BE0CD19,
)


@dataclass(frozen=True)
class VariantParams:
    """Word-width dependent constants of one BLAKE2 variant."""

    name: str
    word_bits: int
    rounds: int
    rotations: Tuple[int, int, int, int]
    iv: Tuple[int, ...]

    @property
    def word_bytes(self) -> int:
        return self.word_bits // 8

    @property
    def block_size(self) -> int:
        """Bytes consumed by one compression (16 words)."""
        return 16 * self.word_bytes

    @property
    def digest_size(self) -> int:
        """Full output size (8 words)."""
        return 8 * self.word_bytes

    @property
    def key_size(self) -> int:
        return self.digest_size

    @property
    def mask(self) -> int:
        return (1 << self.word_bits) - 1

    @property
    def word_format(self) -> str:
        return "Q" if self.word_bits == 64 else "I"

    @property
    def block_format(self) -> str:
        """``struct`` format of a message block as 16 little-endian words."""
        return f"<16{self.word_format}"

    @property
    def state_format(self) -> str:
        """``struct`` format of the chaining value as 8 little-endian words."""
        return f"<8{self.word_format}"

    @classmethod
    def blake2b(cls) -> VariantParams:
        """Create the 64-bit word parameter set."""
        return cls(
            name=Variant.BLAKE2B.value,
            word_bits=64,
            rounds=12,
            rotations=(32, 24, 16, 63),
            iv=BLAKE2B_IV,
        )

    @classmethod
    def blake2s(cls) -> VariantParams:
        """Create the 32-bit word parameter set."""
        return cls(
            name=Variant.BLAKE2S.value,
            word_bits=32,
            rounds=10,
            rotations=(16, 12, 8, 7),
            iv=BLAKE2S_IV,
        )

    @classmethod
    def for_variant(cls, variant: Union[Variant, str]) -> VariantParams:
        return _PARAMS[Variant.parse(variant)]


_PARAMS: Dict[Variant, VariantParams] = {
    Variant.BLAKE2B: VariantParams.blake2b(),
    Variant.BLAKE2S: VariantParams.blake2s(),
}


@dataclass
class HashConfig:
    """Defaults used by the factories and one-shot helpers."""

    default_variant: Variant = Variant.BLAKE2B
    chunk_size: int = 64 * 1024  # read size for hash_file


class Config:
    """
    Main configuration manager for blake2core.

    Holds the default variant and streaming chunk size, with support for
    custom overrides and environment-specific settings.
    """

    VARIANT_ENV = "BLAKE2CORE_VARIANT"
    CHUNK_SIZE_ENV = "BLAKE2CORE_CHUNK_SIZE"

    def __init__(self, variant: Optional[Union[Variant, str]] = None, chunk_size: Optional[int] = None) -> None:
        """
        Initialize configuration manager.

        Args:
            variant: Default variant. If None, BLAKE2b is used.
            chunk_size: Read size used when hashing files.

        Raises:
            ConfigurationError: If ``variant`` names no known variant.
        """
        self.settings = HashConfig()
        if variant is not None:
            self.settings.default_variant = Variant.parse(variant)
        if chunk_size is not None:
            self.settings.chunk_size = chunk_size
        self._custom_config: Dict[str, Any] = {}

    @classmethod
    def from_environment(cls) -> Config:
        """
        Build a configuration from ``BLAKE2CORE_*`` environment variables.

        Raises:
            ConfigurationError: If a variable holds an unusable value.
        """
        variant = os.getenv(cls.VARIANT_ENV)
        chunk_env = os.getenv(cls.CHUNK_SIZE_ENV)
        chunk_size = None
        if chunk_env is not None:
            try:
                chunk_size = int(chunk_env)
            except ValueError:
                raise ConfigurationError(
                    f"{cls.CHUNK_SIZE_ENV} must be an integer, got {chunk_env!r}"
                ) from None
        return cls(variant=variant, chunk_size=chunk_size)

    @property
    def default_variant(self) -> Variant:
        return self.settings.default_variant

    @property
    def chunk_size(self) -> int:
        return self.get("chunk_size", self.settings.chunk_size)

    def get_params(self, variant: Optional[Union[Variant, str]] = None) -> VariantParams:
        """
        Get the parameter set for a variant.

        Args:
            variant: Variant or variant name. If None, uses the default variant.

        Returns:
            Parameter set shared by all engines of that variant.
        """
        return VariantParams.for_variant(variant if variant is not None else self.default_variant)

    def set_custom_config(self, key: str, value: Any) -> None:
        """
        Set custom configuration value.

        Args:
            key: Configuration key.
            value: Configuration value.
        """
        self._custom_config[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value.

        Checks custom config first, then falls back to the settings.

        Args:
            key: Configuration key.
            default: Default value if key not found.

        Returns:
            Configuration value or default.
        """
        if key in self._custom_config:
            return self._custom_config[key]

        if hasattr(self.settings, key):
            return getattr(self.settings, key)

        return default

    def get_from_environment(self, key: str, env_var: str, default: Any = None) -> Any:
        """
        Get configuration value from environment variable or config.

        Args:
            key: Configuration key.
            env_var: Environment variable name.
            default: Default value.

        Returns:
            Configuration value from environment or config.
        """
        env_value = os.getenv(env_var)
        if env_value is not None:
            return env_value
        return self.get(key, default)

    def validate(self) -> List[str]:
        """
        Validate current configuration.

        Returns:
            List of validation errors. Empty if valid.
        """
        errors = []

        chunk_size = self.chunk_size
        if not isinstance(chunk_size, int) or chunk_size <= 0:
            errors.append("chunk_size must be a positive integer")

        if not isinstance(self.default_variant, Variant):
            errors.append("default_variant must be a Variant")

        return errors
