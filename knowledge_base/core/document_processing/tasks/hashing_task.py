"""
Content hashing for duplicate detection.

Dependencies: hashlib
System role: Content-addressed fingerprint of uploaded bytes
"""

import hashlib

HASH_HEX_LENGTH = 64


def compute_content_hash(content: bytes) -> str:
    """
    SHA-256 hex digest of raw content.

    Args:
        content: Uploaded bytes

    Returns:
        str: 64-character lowercase hex digest
    """
    return hashlib.sha256(content).hexdigest()
