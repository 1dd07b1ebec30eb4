#!/usr/bin/env python3
"""Basic blake2core example.

Hashes a file (or a built-in sample message) with both BLAKE2 variants,
incrementally and in one shot, and checks a keyed digest.
"""

import logging
import sys
from pathlib import Path

# Add the parent directory to the path so we can import blake2core
sys.path.insert(0, str(Path(__file__).parent.parent))

from blake2core import Config, Variant, blake2b_digest, new
from blake2core.crypto import hash_file, verify_digest


def basic_example(path=None):
    """Run a basic example of blake2core usage."""
    print("blake2core example")
    print("=" * 40)

    # Example 1: Streaming a message through an engine
    print("\n1. Streaming input through a BLAKE2b engine...")
    engine = new(Variant.BLAKE2B)
    for part in (b"hello", b" ", b"world"):
        engine.write(part)
    print(f"   digest: {engine.sum().hex()}")

    # Example 2: One-shot digest gives the same result
    print("\n2. One-shot digest...")
    print(f"   digest: {blake2b_digest(b'hello world').hex()}")

    # Example 3: Keyed BLAKE2s as a MAC
    print("\n3. Keyed BLAKE2s...")
    key = b"example key"
    tag = new("blake2s", b"message", key=key).finalize()
    print(f"   tag:      {tag.hex()}")
    print(f"   verifies: {verify_digest(b'message', tag, variant='blake2s', key=key)}")

    # Example 4: Hashing a file with configuration from the environment
    if path is not None:
        print(f"\n4. Hashing {path}...")
        config = Config.from_environment()
        digest = hash_file(path, config=config)
        print(f"   {config.default_variant.value}: {digest.hex()}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    basic_example(sys.argv[1] if len(sys.argv) > 1 else None)
