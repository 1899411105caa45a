"""Shared fixtures: master keys, ciphers and an in-memory asyncpg-like pool."""
import uuid
import itertools
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone

import pytest

from navigator_secrets.conf import ENCRYPTION_KEY_ENV
from navigator_secrets.vault import secret_store
from navigator_secrets.vault.crypto import EnvelopeCipher


class FakeConnection:
    """Answers the store's SQL statements from an in-memory table."""

    def __init__(self, table: dict):
        self.table = table
        self._clock = itertools.count()

    def _now(self) -> datetime:
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        return base + timedelta(seconds=next(self._clock))

    def _owned(self, secret_id, user_id):
        row = self.table.get(str(secret_id))
        if row is not None and str(row["user_id"]) == str(user_id):
            return row
        return None

    async def fetch(self, query, user_id):
        assert query == secret_store._SELECT_ALL
        rows = [
            dict(r) for r in self.table.values()
            if str(r["user_id"]) == str(user_id)
        ]
        return sorted(rows, key=lambda r: r["created_at"], reverse=True)

    async def fetchrow(self, query, *args):
        if query == secret_store._SELECT_ONE:
            row = self._owned(*args)
            return dict(row) if row else None
        if query == secret_store._INSERT_SECRET:
            user_id, content, iv, tag = args
            now = self._now()
            row = {
                "id": uuid.uuid4(),
                "user_id": user_id,
                "encrypted_content": content,
                "iv": iv,
                "auth_tag": tag,
                "created_at": now,
                "updated_at": now,
            }
            self.table[str(row["id"])] = row
            return dict(row)
        if query == secret_store._UPDATE_SECRET:
            content, iv, tag, secret_id, user_id = args
            row = self._owned(secret_id, user_id)
            if row is None:
                return None
            row.update(
                encrypted_content=content, iv=iv, auth_tag=tag,
                updated_at=self._now(),
            )
            return dict(row)
        if query == secret_store._DELETE_SECRET:
            secret_id, user_id = args
            row = self._owned(secret_id, user_id)
            if row is None:
                return None
            del self.table[str(secret_id)]
            return {"id": row["id"]}
        raise AssertionError(f"Unexpected query: {query}")


class FakePool:
    """Minimal stand-in for an asyncpg pool."""

    def __init__(self):
        self.table: dict = {}
        self.conn = FakeConnection(self.table)

    @asynccontextmanager
    async def acquire(self):
        yield self.conn


@pytest.fixture
def key_hex():
    return "8f" * 8 + "1a2b3c4d5e6f7081" * 3


@pytest.fixture
def cipher(key_hex):
    return EnvelopeCipher(bytes.fromhex(key_hex))


@pytest.fixture
def other_cipher():
    return EnvelopeCipher(bytes(range(32)))


@pytest.fixture
def key_env(monkeypatch, key_hex):
    monkeypatch.setenv(ENCRYPTION_KEY_ENV, key_hex)
    return key_hex


@pytest.fixture
def pool():
    return FakePool()
