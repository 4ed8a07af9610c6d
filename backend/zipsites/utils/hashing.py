"""SHA-256 hashing utility."""

import hashlib


def hash_bytes(data: bytes) -> str:
    """Compute the SHA-256 hex digest of an in-memory payload."""
    return hashlib.sha256(data).hexdigest()
