"""
Secret Fingerprints
Short, one-way identifiers for recovered secrets.

Recovered secrets are only ever written to stdout. Log records and
reports refer to them by fingerprint so that a log file alone never
leaks a secret.
"""

from cryptography.hazmat.primitives import hashes

FINGERPRINT_LENGTH = 16  # hex characters (64 bits)


def secret_bytes(secret: int) -> bytes:
    """Minimal signed big-endian encoding of ``secret``."""
    length = (secret.bit_length() + 8) // 8  # room for the sign bit
    return secret.to_bytes(length, "big", signed=True)


def fingerprint(secret: int, length: int = FINGERPRINT_LENGTH) -> str:
    """SHA-256 of the secret's encoding, truncated to ``length`` hex chars."""
    digest = hashes.Hash(hashes.SHA256())
    digest.update(secret_bytes(secret))
    return digest.finalize().hex()[:length]
