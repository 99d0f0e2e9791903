"""
Content-addressed hashing using BLAKE3.

Provides deterministic digest computation for all object kinds.

Digests are BLAKE3, not SHA-256, so object stores written by SHA-256
based tools with the same header and sharding layout are not readable
here, and the other way round.
"""

import string

import blake3


DIGEST_LENGTH = 64
_HEX_DIGITS = frozenset(string.hexdigits.lower())


def compute_hash(data: bytes) -> str:
    """
    Compute the digest of raw bytes.

    The digest is a 256-bit BLAKE3 hash rendered as 64 lowercase hex
    characters. Callers pass a full canonical encoding (header + body).
    """
    return blake3.blake3(data).hexdigest()


def verify_hash(data: bytes, expected_hash: str) -> bool:
    """
    Verify that data matches expected hash.

    Returns True if match, False otherwise.
    """
    return compute_hash(data) == expected_hash


def is_valid_digest(value: str) -> bool:
    """Check that a string is a well-formed digest."""
    return (
        isinstance(value, str)
        and len(value) == DIGEST_LENGTH
        and all(c in _HEX_DIGITS for c in value)
    )


def get_hash_prefix(hash_str: str, prefix_length: int = 2) -> str:
    """
    Get prefix of hash for directory sharding.

    Default is 2 characters, creating 256 subdirectories.
    """
    if len(hash_str) <= prefix_length:
        raise ValueError(f"Hash too short for prefix length {prefix_length}")
    return hash_str[:prefix_length]
