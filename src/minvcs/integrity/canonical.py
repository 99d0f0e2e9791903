"""
Canonical encoding for deterministic hashing.

Every object is stored as ``b"<kind> <body-length>\\0" + body``. The digest
is taken over the whole encoding so the declared kind and length are part
of the object's identity.
"""

from typing import Optional, Tuple

from ..errors import (
    CorruptObjectError,
    LENGTH_MISMATCH,
    MALFORMED_HEADER,
    MISSING_SEPARATOR,
)

SEPARATOR = b'\x00'


def encode_object(kind: str, body: bytes) -> bytes:
    """
    Encode an object body with its canonical header.

    Same kind and body always produce the same bytes.
    """
    header = f"{kind} {len(body)}".encode('ascii')
    return header + SEPARATOR + body


def split_object(data: bytes, digest: Optional[str] = None) -> Tuple[str, bytes]:
    """
    Split a canonical encoding into (kind, body).

    Raises CorruptObjectError if the header is missing, malformed, or
    declares a length different from the actual body length. The kind is
    returned as-is; deciding whether it is known is up to the caller.
    """
    null_idx = data.find(SEPARATOR)
    if null_idx < 0:
        raise CorruptObjectError(MISSING_SEPARATOR, "no null byte after header", digest)

    try:
        header = data[:null_idx].decode('ascii')
    except UnicodeDecodeError:
        raise CorruptObjectError(MALFORMED_HEADER, "header is not ASCII", digest)

    parts = header.split(' ')
    if len(parts) != 2 or not parts[0]:
        raise CorruptObjectError(MALFORMED_HEADER, f"expected '<kind> <length>', got {header!r}", digest)

    kind, length_str = parts
    if not length_str.isdigit():
        raise CorruptObjectError(MALFORMED_HEADER, f"invalid length {length_str!r}", digest)

    body = data[null_idx + 1:]
    if int(length_str) != len(body):
        raise CorruptObjectError(
            LENGTH_MISMATCH,
            f"header declares {length_str} bytes, body has {len(body)}",
            digest,
        )

    return kind, body
