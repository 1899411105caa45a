"""Tests for the vault error hierarchy."""
import pytest

from navigator_secrets.exceptions import (
    ConfigurationError,
    DecryptionError,
    EncryptionError,
    VaultError,
)


@pytest.mark.parametrize("error_cls", [ConfigurationError, EncryptionError])
def test_default_message_from_docstring(error_cls):
    err = error_cls()
    assert str(err) == error_cls.__doc__
    assert isinstance(err, VaultError)


def test_explicit_message():
    assert str(ConfigurationError("ENCRYPTION_KEY is not set")) == "ENCRYPTION_KEY is not set"


def test_decryption_reason():
    err = DecryptionError(DecryptionError.MALFORMED)
    assert err.reason == "malformed envelope"
    assert str(err) == "Decryption error: malformed envelope"
    assert DecryptionError().reason == DecryptionError.AUTHENTICATION
