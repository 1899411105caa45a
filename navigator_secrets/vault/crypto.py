"""
Vault Crypto Core — Authenticated encryption of secrets with AES-256-GCM.

Each secret is sealed into an envelope of three independent hex fields:
    ciphertext  same length as the UTF-8 plaintext (no padding)
    nonce       16 random bytes, fresh for every encryption
    auth_tag    16-byte GCM tag over ciphertext, bound to key and nonce

An envelope only opens under the exact master key that produced it.

Security Note:
    Never log plaintext, ciphertext or key material.
    The cipher holds no mutable state; one instance is shared process-wide.
"""
import os
import binascii
import logging
from typing import Any, Mapping, Union

import orjson
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from pydantic import BaseModel, Field, ValidationError

from ..conf import ENCRYPTION_KEY_ENV
from ..exceptions import ConfigurationError, DecryptionError, EncryptionError
from .config import KEY_LENGTH, VaultConfig, load_master_key

logger = logging.getLogger("navigator.secrets")

ALGORITHM = "aes-256-gcm"
NONCE_SIZE = 16  # 128-bit nonce
TAG_SIZE = 16  # 128-bit GCM tag


class EncryptedEnvelope(BaseModel):
    """Hex-encoded (ciphertext, nonce, auth_tag) triple.

    Envelopes are never edited in place: an update is a fresh
    encryption that replaces all three fields.
    """

    ciphertext: str
    nonce: str
    auth_tag: str = Field(alias="authTag")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    def to_record(self) -> dict[str, str]:
        """Map the envelope to the storage column names."""
        return {
            "encrypted_content": self.ciphertext,
            "iv": self.nonce,
            "auth_tag": self.auth_tag,
        }

    @classmethod
    def from_record(cls, row: Mapping[str, Any]) -> "EncryptedEnvelope":
        """Build an envelope from a stored row."""
        return cls(
            ciphertext=row["encrypted_content"],
            nonce=row["iv"],
            auth_tag=row["auth_tag"],
        )

    def to_json(self) -> bytes:
        """Serialize as ``{"ciphertext", "nonce", "authTag"}``."""
        return orjson.dumps(self.model_dump(by_alias=True))

    @classmethod
    def from_json(cls, data: Union[bytes, str]) -> "EncryptedEnvelope":
        """Parse an envelope produced by ``to_json``.

        Raises:
            DecryptionError: If the payload is not a valid envelope.
        """
        try:
            return cls.model_validate(orjson.loads(data))
        except (orjson.JSONDecodeError, ValidationError):
            raise DecryptionError(DecryptionError.MALFORMED) from None


def _unhex(value: Any) -> bytes:
    """Strictly decode one hex field of an envelope."""
    if not isinstance(value, str):
        raise DecryptionError(DecryptionError.MALFORMED)
    try:
        return binascii.unhexlify(value)
    except ValueError:
        raise DecryptionError(DecryptionError.MALFORMED) from None


class EnvelopeCipher:
    """AES-256-GCM envelope encryption under a single master key.

    Built once at process start and passed to whatever needs to
    encrypt or decrypt. The raw key is only handed to the AEAD
    primitive and is not exposed afterwards.
    """

    __slots__ = ("_aead",)

    def __init__(self, master_key: bytes):
        if not isinstance(master_key, (bytes, bytearray)):
            raise ConfigurationError("Master key must be bytes")
        if len(master_key) != KEY_LENGTH:
            raise ConfigurationError(
                f"Master key must be exactly {KEY_LENGTH} bytes, "
                f"got {len(master_key)}"
            )
        self._aead = AESGCM(bytes(master_key))

    def __repr__(self) -> str:
        return f"<EnvelopeCipher {ALGORITHM}>"

    @classmethod
    def from_config(cls, config: VaultConfig) -> "EnvelopeCipher":
        return cls(config.master_key)

    @classmethod
    def from_env(cls, env_var: str = ENCRYPTION_KEY_ENV) -> "EnvelopeCipher":
        """Load the master key from the environment and build the cipher.

        Raises:
            ConfigurationError: If the key is absent or malformed.
        """
        return cls(load_master_key(env_var))

    def encrypt(self, plaintext: str) -> EncryptedEnvelope:
        """Encrypt a string into a fresh envelope.

        No length limit is applied here; whatever is given is sealed
        without truncation, including the empty string.

        Args:
            plaintext: Text to encrypt.

        Returns:
            EncryptedEnvelope with hex-encoded fields.

        Raises:
            EncryptionError: If plaintext is not encodable as UTF-8 or the
                underlying primitive fails.
        """
        nonce = os.urandom(NONCE_SIZE)
        try:
            data = plaintext.encode("utf-8")
            sealed = self._aead.encrypt(nonce, data, None)
        except (ValueError, OverflowError, TypeError) as err:
            logger.error("Encryption failed: %s", type(err).__name__)
            raise EncryptionError() from None
        ciphertext, tag = sealed[:-TAG_SIZE], sealed[-TAG_SIZE:]
        return EncryptedEnvelope(
            ciphertext=ciphertext.hex(),
            nonce=nonce.hex(),
            auth_tag=tag.hex(),
        )

    def decrypt(self, ciphertext: str, nonce: str, auth_tag: str) -> str:
        """Verify and decrypt an envelope given as three hex strings.

        Args:
            ciphertext: Hex-encoded ciphertext.
            nonce: Hex-encoded 16-byte nonce.
            auth_tag: Hex-encoded 16-byte authentication tag.

        Returns:
            The original plaintext.

        Raises:
            DecryptionError: ``malformed envelope`` if a field is not hex or
                nonce/tag have the wrong size; ``authentication failed`` if
                the tag does not verify (tampering, corruption, wrong key).
        """
        ct_bytes = _unhex(ciphertext)
        nonce_bytes = _unhex(nonce)
        tag_bytes = _unhex(auth_tag)
        if len(nonce_bytes) != NONCE_SIZE or len(tag_bytes) != TAG_SIZE:
            raise DecryptionError(DecryptionError.MALFORMED)
        try:
            data = self._aead.decrypt(nonce_bytes, ct_bytes + tag_bytes, None)
        except InvalidTag:
            raise DecryptionError(DecryptionError.AUTHENTICATION) from None
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            raise DecryptionError(DecryptionError.MALFORMED) from None

    def decrypt_envelope(self, envelope: EncryptedEnvelope) -> str:
        """Decrypt an ``EncryptedEnvelope``."""
        return self.decrypt(envelope.ciphertext, envelope.nonce, envelope.auth_tag)
