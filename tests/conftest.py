"""Test configuration for blake2core package."""

import hashlib

import pytest

from blake2core.config import Config, Variant, VariantParams


@pytest.fixture(params=[Variant.BLAKE2B, Variant.BLAKE2S], ids=lambda v: v.value)
def variant(request) -> Variant:
    """Run a test once per BLAKE2 variant."""
    return request.param


@pytest.fixture
def params(variant: Variant) -> VariantParams:
    """Parameter set of the current variant."""
    return VariantParams.for_variant(variant)


@pytest.fixture
def reference(variant: Variant):
    """hashlib implementation of the current variant, used as an oracle."""
    return getattr(hashlib, variant.value)


@pytest.fixture
def sample_config() -> Config:
    """Provide a sample configuration for testing."""
    return Config(variant=Variant.BLAKE2S, chunk_size=100)


@pytest.fixture
def sample_message() -> bytes:
    """A message spanning several blocks of either variant."""
    return bytes(range(256)) * 3 + b"tail"
