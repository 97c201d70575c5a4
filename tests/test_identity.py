"""Tests for the local identity provider."""

import threading

import pytest

from fitcoach.errors import (
    EmailAlreadyInUseError,
    InvalidCredentialsError,
    InvalidEmailError,
    WeakPasswordError,
)
from fitcoach.memory.kv_store import StorageKeys
from fitcoach.utils.identity import LocalIdentityProvider


@pytest.fixture
def identity(store):
    # Low iteration count keeps the suite fast
    return LocalIdentityProvider(store, hash_iterations=1_000)


def test_subscribe_reports_current_account_immediately(identity):
    seen = []
    identity.subscribe(seen.append)

    assert seen == [None]


def test_sign_up_signs_in_and_notifies(identity):
    seen = []
    identity.subscribe(seen.append)

    account = identity.sign_up("Alex@Example.com ", "secret123")

    assert account.email == "alex@example.com"
    assert identity.current_account == account
    assert seen == [None, account]


def test_password_is_not_stored_in_clear(identity, store):
    identity.sign_up("alex@example.com", "secret123")

    record = store.get(StorageKeys.USERS)[0]
    assert "secret123" not in str(record)
    assert record["password_hash"]


def test_sign_in_with_correct_password(identity):
    created = identity.sign_up("alex@example.com", "secret123")
    identity.sign_out()

    account = identity.sign_in("ALEX@example.com", "secret123")

    assert account.uid == created.uid


def test_sign_in_with_wrong_password(identity):
    identity.sign_up("alex@example.com", "secret123")
    identity.sign_out()

    with pytest.raises(InvalidCredentialsError):
        identity.sign_in("alex@example.com", "wrong-password")
    assert identity.current_account is None


def test_sign_in_unknown_email(identity):
    with pytest.raises(InvalidCredentialsError, match="Invalid email or password"):
        identity.sign_in("nobody@example.com", "secret123")


def test_duplicate_email_rejected(identity):
    identity.sign_up("alex@example.com", "secret123")

    with pytest.raises(EmailAlreadyInUseError):
        identity.sign_up("ALEX@example.com", "another123")


def test_weak_password_rejected(identity):
    with pytest.raises(WeakPasswordError, match="at least 6 characters"):
        identity.sign_up("alex@example.com", "12345")


@pytest.mark.parametrize("email", ["", "alex", "alex@", "alex@example", "a b@example.com"])
def test_invalid_email_rejected(identity, email):
    with pytest.raises(InvalidEmailError):
        identity.sign_up(email, "secret123")


def test_sign_out_notifies_none(identity):
    seen = []
    identity.sign_up("alex@example.com", "secret123")
    identity.subscribe(seen.append)

    identity.sign_out()

    assert seen[-1] is None
    assert identity.current_account is None


def test_unsubscribe_stops_notifications(identity):
    seen = []
    unsubscribe = identity.subscribe(seen.append)
    unsubscribe()

    identity.sign_up("alex@example.com", "secret123")

    assert seen == [None]


def test_resume_known_account(identity):
    created = identity.sign_up("alex@example.com", "secret123")
    identity.sign_out()

    assert identity.resume(created.uid) == created
    assert identity.resume("unknown-uid") is None


def test_parallel_sign_ups_keep_every_account(store):
    identity = LocalIdentityProvider(store, hash_iterations=1_000)
    emails = [f"user{i}@example.com" for i in range(8)]

    threads = [threading.Thread(target=identity.sign_up, args=(e, "secret123")) for e in emails]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(user["email"] for user in store.get(StorageKeys.USERS)) == sorted(emails)
