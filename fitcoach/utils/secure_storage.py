"""Signed-in account kept in an encrypted browser cookie."""

import json
import logging
from typing import Any, Dict, Optional

import extra_streamlit_components as stx
from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)


def encrypt_session(cipher: Fernet, session: Dict[str, Any]) -> str:
    return cipher.encrypt(json.dumps(session).encode()).decode()


def decrypt_session(cipher: Fernet, token: str) -> Optional[Dict[str, Any]]:
    """Decode a cookie value; None for tampered, expired-key or garbage tokens."""
    try:
        return json.loads(cipher.decrypt(token.encode()).decode())
    except (InvalidToken, ValueError) as e:
        logger.warning(f"Discarding unreadable session cookie: {e}")
        return None


class SecureSessionStorage:
    """Handles the session cookie that keeps a user signed in across reloads."""

    def __init__(
        self,
        encryption_key: str,
        cookie_name: str = "fitcoach_session",
        expiry_days: int = 30,
    ):
        """
        Initialize secure storage.

        Args:
            encryption_key: Fernet key shared by every session of the server
            cookie_name: Name of the cookie holding the session
            expiry_days: Number of days until cookie expires
        """
        self.cookie_name = cookie_name
        self.expiry_days = expiry_days
        self._encryption_key = encryption_key
        self._cookie_manager = None
        self._cipher = None

    def _get_cookie_manager(self) -> stx.CookieManager:
        if self._cookie_manager is None:
            self._cookie_manager = stx.CookieManager()
        return self._cookie_manager

    def _get_cipher(self) -> Fernet:
        if self._cipher is None:
            key = self._encryption_key
            self._cipher = Fernet(key.encode() if isinstance(key, str) else key)
        return self._cipher

    def is_ready(self) -> bool:
        """
        Check if cookie manager is ready to use.

        Returns:
            True if ready, False otherwise
        """
        cookie_manager = self._get_cookie_manager()
        return cookie_manager is not None and hasattr(cookie_manager, "get_all")

    def save_session(self, session: Dict[str, Any]) -> bool:
        """
        Save the signed-in account to the encrypted cookie.

        Args:
            session: Account data, at least 'uid' and 'email'

        Returns:
            True if successful, False otherwise
        """
        if not self.is_ready():
            logger.warning("Cookie manager not ready, cannot save session")
            return False

        self._get_cookie_manager().set(
            self.cookie_name,
            encrypt_session(self._get_cipher(), session),
            max_age=self.expiry_days * 24 * 60 * 60,
        )
        logger.info("Session saved to encrypted cookie")
        return True

    def load_session(self) -> Optional[Dict[str, Any]]:
        """
        Load the signed-in account from the encrypted cookie.

        Returns:
            Session dictionary if found and valid, None otherwise
        """
        if not self.is_ready():
            logger.debug("Cookie manager not ready, cannot load session")
            return None

        token = self._get_cookie_manager().get(self.cookie_name)
        if not token:
            logger.debug("No session cookie found")
            return None
        return decrypt_session(self._get_cipher(), token)

    def clear_session(self) -> None:
        if not self.is_ready():
            logger.warning("Cookie manager not ready, cannot clear session")
            return

        cookie_manager = self._get_cookie_manager()
        if cookie_manager.get(self.cookie_name):
            cookie_manager.delete(self.cookie_name)
            logger.info("Session cookie cleared")
