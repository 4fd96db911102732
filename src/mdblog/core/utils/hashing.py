"""Content hashing used by the catalog to detect edited documents"""

import hashlib


def sha256(content: str) -> str:
    """Hex SHA-256 of the UTF-8 encoded text (64 chars, fits the String(64) hash column)."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()
