"""
SecretStore — CRUD over encrypted secrets owned by a user.

Provides the storage glue around the envelope cipher:
- ``create_secret(user_id, content)`` — validate, encrypt and insert
- ``update_secret(user_id, secret_id, content)`` — re-encrypt and replace
- ``get_secret(user_id, secret_id)`` — fetch and decrypt one secret
- ``list_secrets(user_id)`` — fetch and decrypt all secrets, newest first
- ``delete_secret(user_id, secret_id)`` — remove a secret

Security Note:
    Never log plaintext or ciphertext values. Only log secret ids,
    operations and user ids. Every statement filters on ``user_id``.
"""
import logging
from typing import Any, Optional

from ..conf import DECRYPTION_ERROR_PLACEHOLDER, SECRETS_TABLE
from ..exceptions import DecryptionError
from .crypto import EncryptedEnvelope, EnvelopeCipher
from .models import (
    SecretRecord,
    SecretResponse,
    validate_content,
    validate_secret_id,
)

logger = logging.getLogger("navigator.secrets")

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

SECRETS_TABLE_DDL = f"""
CREATE TABLE IF NOT EXISTS {SECRETS_TABLE} (
  id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
  user_id UUID REFERENCES auth.users(id) ON DELETE CASCADE NOT NULL,
  encrypted_content TEXT NOT NULL,
  iv VARCHAR(255) NOT NULL,
  auth_tag VARCHAR(255) NOT NULL,
  created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
  updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
);
CREATE INDEX IF NOT EXISTS idx_{SECRETS_TABLE}_user_id ON {SECRETS_TABLE}(user_id);
CREATE INDEX IF NOT EXISTS idx_{SECRETS_TABLE}_created_at ON {SECRETS_TABLE}(created_at DESC);
ALTER TABLE {SECRETS_TABLE} ENABLE ROW LEVEL SECURITY;
CREATE POLICY "Users can view own secrets" ON {SECRETS_TABLE}
  FOR SELECT USING (auth.uid() = user_id);
CREATE POLICY "Users can insert own secrets" ON {SECRETS_TABLE}
  FOR INSERT WITH CHECK (auth.uid() = user_id);
CREATE POLICY "Users can update own secrets" ON {SECRETS_TABLE}
  FOR UPDATE USING (auth.uid() = user_id) WITH CHECK (auth.uid() = user_id);
CREATE POLICY "Users can delete own secrets" ON {SECRETS_TABLE}
  FOR DELETE USING (auth.uid() = user_id);
"""

_SELECT_ALL = f"""
SELECT id, user_id, encrypted_content, iv, auth_tag, created_at, updated_at
FROM {SECRETS_TABLE}
WHERE user_id = $1
ORDER BY created_at DESC
"""

_SELECT_ONE = f"""
SELECT id, user_id, encrypted_content, iv, auth_tag, created_at, updated_at
FROM {SECRETS_TABLE}
WHERE id = $1 AND user_id = $2
"""

_INSERT_SECRET = f"""
INSERT INTO {SECRETS_TABLE} (user_id, encrypted_content, iv, auth_tag)
VALUES ($1, $2, $3, $4)
RETURNING id, created_at, updated_at
"""

_UPDATE_SECRET = f"""
UPDATE {SECRETS_TABLE}
SET encrypted_content = $1, iv = $2, auth_tag = $3, updated_at = NOW()
WHERE id = $4 AND user_id = $5
RETURNING id, created_at, updated_at
"""

_DELETE_SECRET = f"""
DELETE FROM {SECRETS_TABLE}
WHERE id = $1 AND user_id = $2
RETURNING id
"""


class SecretStore:
    """Encrypted secret storage for row-owned records.

    The cipher is built once at startup and shared; the store itself
    holds no per-user state.
    """

    def __init__(self, cipher: EnvelopeCipher, db_pool: Any):
        self._cipher = cipher
        self._db = db_pool

    def _open(self, record: SecretRecord) -> SecretResponse:
        """Decrypt a record into a response. Raises DecryptionError."""
        return SecretResponse(
            id=record.id,
            content=self._cipher.decrypt_envelope(record.envelope),
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    def _seal(self, content: Any) -> tuple[str, EncryptedEnvelope]:
        content = validate_content(content)
        return content, self._cipher.encrypt(content)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def list_secrets(self, user_id: Any) -> list[SecretResponse]:
        """Return all secrets of a user, decrypted, newest first.

        A secret that fails to decrypt is returned with placeholder
        content instead of aborting the listing.
        """
        async with self._db.acquire() as conn:
            rows = await conn.fetch(_SELECT_ALL, user_id)

        secrets = []
        for row in rows:
            record = SecretRecord.from_row(row)
            try:
                secrets.append(self._open(record))
            except DecryptionError as err:
                logger.error(
                    "Error decrypting secret id=%s for user=%s: %s",
                    record.id, user_id, err.reason,
                )
                secrets.append(
                    SecretResponse(
                        id=record.id,
                        content=DECRYPTION_ERROR_PLACEHOLDER,
                        created_at=record.created_at,
                        updated_at=record.updated_at,
                    )
                )
        logger.info(
            "Retrieved %d secret(s) for user=%s", len(secrets), user_id,
        )
        return secrets

    async def get_secret(
        self, user_id: Any, secret_id: Any
    ) -> Optional[SecretResponse]:
        """Fetch and decrypt one secret.

        Returns:
            The decrypted secret, or None if it does not exist or
            belongs to another user.

        Raises:
            ValueError: If secret_id is not a UUID.
            DecryptionError: If the stored envelope does not verify.
        """
        secret_id = validate_secret_id(secret_id)
        async with self._db.acquire() as conn:
            row = await conn.fetchrow(_SELECT_ONE, secret_id, user_id)
        if row is None:
            logger.warning(
                "Secret %s not found for user=%s", secret_id, user_id,
            )
            return None
        return self._open(SecretRecord.from_row(row))

    async def create_secret(self, user_id: Any, content: Any) -> SecretResponse:
        """Validate, encrypt and store a new secret.

        Raises:
            ValueError: If content fails validation.
            EncryptionError: If encryption fails.
        """
        content, envelope = self._seal(content)
        async with self._db.acquire() as conn:
            row = await conn.fetchrow(
                _INSERT_SECRET,
                user_id, envelope.ciphertext, envelope.nonce, envelope.auth_tag,
            )
        logger.info("Secret created: id=%s user=%s", row["id"], user_id)
        return SecretResponse(
            id=row["id"],
            content=content,
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    async def update_secret(
        self, user_id: Any, secret_id: Any, content: Any
    ) -> Optional[SecretResponse]:
        """Replace the content of a secret with a freshly encrypted envelope.

        Returns:
            The updated secret, or None if it does not exist or belongs
            to another user.
        """
        secret_id = validate_secret_id(secret_id)
        content, envelope = self._seal(content)
        async with self._db.acquire() as conn:
            row = await conn.fetchrow(
                _UPDATE_SECRET,
                envelope.ciphertext, envelope.nonce, envelope.auth_tag,
                secret_id, user_id,
            )
        if row is None:
            logger.warning(
                "Secret %s not found for user=%s", secret_id, user_id,
            )
            return None
        logger.info("Secret updated: id=%s user=%s", secret_id, user_id)
        return SecretResponse(
            id=row["id"],
            content=content,
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    async def delete_secret(self, user_id: Any, secret_id: Any) -> bool:
        """Delete a secret. Returns True if a row was removed."""
        secret_id = validate_secret_id(secret_id)
        async with self._db.acquire() as conn:
            row = await conn.fetchrow(_DELETE_SECRET, secret_id, user_id)
        deleted = row is not None
        logger.info(
            "Secret delete: id=%s user=%s deleted=%s",
            secret_id, user_id, deleted,
        )
        return deleted
