"""Tests for session cookie encryption."""

from cryptography.fernet import Fernet

from fitcoach.config import AppConfig
from fitcoach.utils.secure_storage import SecureSessionStorage, decrypt_session, encrypt_session


def test_session_survives_encryption():
    cipher = Fernet(Fernet.generate_key())
    session = {"uid": "u1", "email": "alex@example.com"}

    token = encrypt_session(cipher, session)

    assert "alex@example.com" not in token
    assert decrypt_session(cipher, token) == session


def test_token_from_other_key_is_discarded():
    token = encrypt_session(Fernet(Fernet.generate_key()), {"uid": "u1"})

    assert decrypt_session(Fernet(Fernet.generate_key()), token) is None


def test_garbage_token_is_discarded():
    assert decrypt_session(Fernet(Fernet.generate_key()), "not-a-token") is None


def test_storages_from_same_config_share_temporary_key():
    config = AppConfig()
    first = SecureSessionStorage(encryption_key=config.session_encryption_key())
    second = SecureSessionStorage(encryption_key=config.session_encryption_key())

    token = encrypt_session(first._get_cipher(), {"uid": "u1", "email": "alex@example.com"})

    assert decrypt_session(second._get_cipher(), token) == {"uid": "u1", "email": "alex@example.com"}


def test_configured_key_is_used_as_is():
    key = Fernet.generate_key().decode()

    assert AppConfig(cookie_encryption_key=key).session_encryption_key() == key
