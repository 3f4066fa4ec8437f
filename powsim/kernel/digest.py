import hashlib


def encode_text(text: str) -> bytes:
    return (text or "").encode("utf-8")

def sha256_raw(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()

def hash_once(data: bytes) -> str:
    """SHA-256 of data as 64 lowercase hex characters."""
    return hashlib.sha256(data).hexdigest()

def hash_twice(data: bytes) -> str:
    """
    Bitcoin-style double SHA-256.
    The second pass consumes the raw first digest, not its hex text.
    """
    return hashlib.sha256(sha256_raw(data)).hexdigest()
