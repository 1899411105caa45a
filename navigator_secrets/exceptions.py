"""
Navigator Secrets exceptions.

All vault failures derive from ``VaultError`` so callers can catch the
family at once, or branch on the concrete kind.

Security Note:
    Messages never carry plaintext, ciphertext or key material.
"""
from typing import Optional


class VaultError(Exception):
    """Base class for vault failures."""

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.__doc__
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ConfigurationError(VaultError):
    """Master key is missing or malformed."""


class EncryptionError(VaultError):
    """Failed to encrypt data."""


class DecryptionError(VaultError):
    """Failed to decrypt data."""

    MALFORMED = "malformed envelope"
    AUTHENTICATION = "authentication failed"

    def __init__(self, reason: str = AUTHENTICATION):
        self.reason = reason
        super().__init__(f"Decryption error: {reason}")
