"""Secrets Vault — Encrypted storage of user secrets.

Security Note (Threat Model):
    Secrets are decrypted in process memory while a request is served,
    and the master key stays in memory for the process lifetime.
    A memory dump of the application process could expose both.
    This is an accepted limitation — mitigation requires HSM/KMS
    integration which is out of scope.
"""

from .config import VaultConfig, load_master_key, generate_master_key
from .crypto import EncryptedEnvelope, EnvelopeCipher
from .models import SecretRecord, SecretResponse
from .secret_store import SecretStore

__all__ = [
    "EnvelopeCipher",
    "EncryptedEnvelope",
    "SecretStore",
    "SecretRecord",
    "SecretResponse",
    "VaultConfig",
    "load_master_key",
    "generate_master_key",
]
