"""
settleid/core/digest.py

Digest Engine. Plain one-way hash over the canonical buffer: no key,
no salt, no truncation, no text encoding of the result.
"""

import hashlib

from settleid.core.exceptions import EncodingError


DIGEST_LENGTH = 32


def compute_digest(buffer: bytes, algorithm: str = "sha256") -> bytes:
    """
    Hash the canonical buffer and return the raw digest.

    algorithm comes from the schema layout. Anything that does not yield
    exactly 32 bytes cannot be a Settlement ID and is rejected.
    """
    try:
        hasher = hashlib.new(algorithm)
    except ValueError as exc:
        raise EncodingError(
            f"unsupported hash algorithm '{algorithm}'"
        ) from exc
    if hasher.digest_size != DIGEST_LENGTH:
        raise EncodingError(
            f"hash algorithm '{algorithm}' does not produce {DIGEST_LENGTH} bytes",
            {"digest_size": hasher.digest_size},
        )
    hasher.update(buffer)
    return hasher.digest()
