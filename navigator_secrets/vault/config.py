"""
Vault Configuration — Master key loading and validated settings.

Reads the master key from a single environment variable:
    ENCRYPTION_KEY = <hex-encoded 32-byte key (64 hex characters)>

Security Note:
    Never log key material. Only log the variable name and key length.
"""
import os
import binascii
import secrets
import logging

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..conf import ENCRYPTION_KEY_ENV
from ..exceptions import ConfigurationError

logger = logging.getLogger("navigator.secrets")

KEY_LENGTH = 32  # AES-256


def decode_master_key(value: str, name: str = ENCRYPTION_KEY_ENV) -> bytes:
    """Decode a hex-encoded master key and check its length.

    Args:
        value: Hex string, 64 characters for a 32-byte key.
        name: Source name used in error messages.

    Returns:
        Raw 32-byte key.

    Raises:
        ConfigurationError: If value is not hex or not exactly 32 bytes.
    """
    if not isinstance(value, str):
        raise ConfigurationError(f"{name} must be a hex-encoded string")
    try:
        key_bytes = binascii.unhexlify(value.strip())
    except ValueError:
        raise ConfigurationError(
            f"{name} must be a hex-encoded string"
        ) from None
    if len(key_bytes) != KEY_LENGTH:
        raise ConfigurationError(
            f"{name} must decode to exactly {KEY_LENGTH} bytes "
            f"({KEY_LENGTH * 2} hex characters), got {len(key_bytes)}"
        )
    return key_bytes


def load_master_key(env_var: str = ENCRYPTION_KEY_ENV) -> bytes:
    """Load the master key from the environment.

    Args:
        env_var: Name of the environment variable holding the hex key.

    Returns:
        Raw 32-byte key.

    Raises:
        ConfigurationError: If the variable is unset, empty, not hex,
            or does not decode to exactly 32 bytes.
    """
    raw = os.environ.get(env_var)
    if not raw:
        raise ConfigurationError(
            f"{env_var} is not set in environment variables. "
            f"Generate one with navigator-secrets-keygen"
        )
    key_bytes = decode_master_key(raw, env_var)
    if is_weak_key(key_bytes):
        logger.warning(
            "%s is structurally valid but has no entropy; "
            "do not use it outside of tests", env_var,
        )
    logger.debug("Loaded master key from %s (%d bytes)", env_var, len(key_bytes))
    return key_bytes


def is_weak_key(key: bytes) -> bool:
    """Return True for keys made of a single repeated byte (e.g. all zeros)."""
    return len(set(key)) <= 1


def generate_master_key() -> str:
    """Generate a random 32-byte master key and return it as a hex string.

    This is a utility for operators provisioning a new deployment.

    Returns:
        Hex-encoded 32-byte key string.
    """
    return secrets.token_bytes(KEY_LENGTH).hex()


class VaultConfig(BaseModel):
    """Validated vault configuration."""

    master_key: bytes = Field(repr=False)
    key_env_var: str = Field(default=ENCRYPTION_KEY_ENV)

    model_config = {
        "arbitrary_types_allowed": True,
        "frozen": True,
        "hide_input_in_errors": True,
    }

    @field_validator("master_key")
    @classmethod
    def validate_key_length(cls, v: bytes) -> bytes:
        """Ensure the master key is exactly 32 bytes."""
        if len(v) != KEY_LENGTH:
            raise ValueError(
                f"master_key must be exactly {KEY_LENGTH} bytes, got {len(v)}"
            )
        return v

    @classmethod
    def from_env(cls, env_var: str = ENCRYPTION_KEY_ENV) -> "VaultConfig":
        """Create VaultConfig by loading the master key from environment.

        Returns:
            Populated VaultConfig instance.

        Raises:
            ConfigurationError: If the key is absent or malformed.
        """
        master_key = load_master_key(env_var)
        try:
            return cls(master_key=master_key, key_env_var=env_var)
        except ValidationError as err:
            raise ConfigurationError(
                f"Invalid vault configuration: {err.error_count()} error(s)"
            ) from None
