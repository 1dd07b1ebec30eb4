"""Shared exceptions for :mod:`blake2core.crypto`.

The library raises a small set of domain-specific exceptions. Misuse of the
Python API itself (for example passing ``str`` where bytes are expected) is
left to the built-in exception types.
"""

from __future__ import annotations


class Blake2Error(Exception):
    """Base error for hashing operations."""


class ConfigurationError(Blake2Error, ValueError):
    """Raised when an engine or configuration is set up with invalid values.

    The most common cause is a key longer than the variant's maximum key size.
    Keys are never silently truncated.
    """


class StateError(Blake2Error):
    """Raised when input or finalization is requested on a finalized engine."""
