"""Email/password identity provider with change notifications."""

import base64
import logging
import os
import re
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from pydantic import BaseModel, Field

from fitcoach.errors import (
    EmailAlreadyInUseError,
    InvalidCredentialsError,
    InvalidEmailError,
    WeakPasswordError,
)
from fitcoach.memory.kv_store import KeyValueStore, StorageKeys

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
DEFAULT_MIN_PASSWORD_LENGTH = 6
DEFAULT_HASH_ITERATIONS = 200_000

AuthListener = Callable[[Optional["Account"]], None]


class Account(BaseModel):
    """Signed-in identity; profile data lives in the profile store."""

    uid: str
    email: str
    created_at: datetime = Field(default_factory=datetime.now)


class IdentityProvider(ABC):
    """Account directory that tells subscribers who is signed in."""

    def __init__(self) -> None:
        self._listeners: List[AuthListener] = []
        self._current: Optional[Account] = None

    @property
    def current_account(self) -> Optional[Account]:
        return self._current

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """
        Register a listener for sign-in/sign-out changes.

        The listener is called right away with the current account.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)
        listener(self._current)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_current(self, account: Optional[Account]) -> None:
        self._current = account
        for listener in list(self._listeners):
            listener(account)

    @abstractmethod
    def sign_up(self, email: str, password: str) -> Account:
        """Create an account and sign it in."""

    @abstractmethod
    def sign_in(self, email: str, password: str) -> Account:
        """Sign in an existing account."""

    def sign_out(self) -> None:
        if self._current is not None:
            logger.info(f"Signed out {self._current.email}")
        self._set_current(None)


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


class LocalIdentityProvider(IdentityProvider):
    """Accounts kept in the key-value store with PBKDF2-hashed passwords."""

    def __init__(
        self,
        store: KeyValueStore,
        min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
        hash_iterations: int = DEFAULT_HASH_ITERATIONS,
    ) -> None:
        super().__init__()
        self.store = store
        self.min_password_length = min_password_length
        self.hash_iterations = hash_iterations

    def _kdf(self, salt: bytes, iterations: Optional[int] = None) -> PBKDF2HMAC:
        return PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=iterations or self.hash_iterations,
        )

    def _load_users(self) -> List[Dict[str, Any]]:
        return self.store.get(StorageKeys.USERS) or []

    @staticmethod
    def _normalize(email: str) -> str:
        return email.strip().lower()

    @staticmethod
    def _account(record: Dict[str, Any]) -> Account:
        return Account(uid=record["uid"], email=record["email"], created_at=record["created_at"])

    def _find(self, email: str) -> Optional[Dict[str, Any]]:
        email = self._normalize(email)
        for record in self._load_users():
            if record.get("email") == email:
                return record
        return None

    def sign_up(self, email: str, password: str) -> Account:
        email = self._normalize(email)
        if not EMAIL_PATTERN.match(email):
            raise InvalidEmailError()
        if len(password) < self.min_password_length:
            raise WeakPasswordError(
                f"Password should be at least {self.min_password_length} characters"
            )

        salt = os.urandom(16)
        account = Account(uid=str(uuid.uuid4()), email=email)
        record = account.model_dump(mode="json")
        record["salt"] = _b64(salt)
        record["password_hash"] = _b64(self._kdf(salt).derive(password.encode("utf-8")))
        record["iterations"] = self.hash_iterations

        with self.store.lock:
            if self._find(email) is not None:
                raise EmailAlreadyInUseError()
            users = self._load_users()
            users.append(record)
            self.store.set(StorageKeys.USERS, users)

        logger.info(f"Created account {account.uid} for {email}")
        self._set_current(account)
        return account

    def sign_in(self, email: str, password: str) -> Account:
        record = self._find(email)
        if record is None:
            logger.info("Sign-in failed: unknown email")
            raise InvalidCredentialsError()

        kdf = self._kdf(base64.b64decode(record["salt"]), record.get("iterations"))
        try:
            kdf.verify(password.encode("utf-8"), base64.b64decode(record["password_hash"]))
        except InvalidKey:
            logger.info(f"Sign-in failed: wrong password for {record['email']}")
            raise InvalidCredentialsError() from None

        account = self._account(record)
        logger.info(f"Signed in {account.email}")
        self._set_current(account)
        return account

    def resume(self, uid: str) -> Optional[Account]:
        """Sign in a known account without a password, e.g. from a session cookie."""
        for record in self._load_users():
            if record.get("uid") == uid:
                account = self._account(record)
                self._set_current(account)
                return account
        logger.warning(f"Cannot resume unknown account {uid}")
        return None
