"""Navigator Secrets.

Stores short user secrets encrypted at rest with AES-256-GCM.
"""
from .version import (
    __title__,
    __description__,
    __version__,
    __author__,
    __author_email__,
    __license__,
)
from .exceptions import (
    VaultError,
    ConfigurationError,
    EncryptionError,
    DecryptionError,
)
from .vault import EnvelopeCipher, EncryptedEnvelope, SecretStore

__all__ = (
    "EnvelopeCipher",
    "EncryptedEnvelope",
    "SecretStore",
    "VaultError",
    "ConfigurationError",
    "EncryptionError",
    "DecryptionError",
)
