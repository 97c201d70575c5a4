"""Per-user profile documents with merge updates."""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import ValidationError

from fitcoach.memory.kv_store import KeyValueStore, StorageKeys
from fitcoach.models.user_profile import UserProfile

logger = logging.getLogger(__name__)


def clean_profile_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """Drop unset values so a merge never blanks out stored fields."""
    return {key: value for key, value in data.items() if value is not None and value != ""}


class ProfileStore:
    """Profile documents keyed by account id."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def get_profile(self, uid: str) -> Optional[UserProfile]:
        document = self.store.get(StorageKeys.profile(uid))
        if document is None:
            return None
        return UserProfile(**document)

    def set_profile(self, uid: str, data: Dict[str, Any], merge: bool = True) -> UserProfile:
        """
        Write a profile document.

        Args:
            uid: Account id
            data: Profile fields; partial when merging
            merge: Merge into the stored document instead of replacing it

        Returns:
            The profile as stored

        Raises:
            ValidationError: Merged document has out-of-range values
        """
        updates = clean_profile_data(data)
        updates.pop("uid", None)

        with self.store.lock:
            document: Dict[str, Any] = {}
            if merge:
                document = self.store.get(StorageKeys.profile(uid)) or {}
            document.update(updates)
            document["uid"] = uid
            document["updated_at"] = datetime.now().isoformat()

            try:
                profile = UserProfile(**document)
            except ValidationError:
                logger.warning(f"Rejected profile update for {uid}: {sorted(updates)}")
                raise

            self.store.set(StorageKeys.profile(uid), profile.to_document())
        logger.info(f"Saved profile for {uid} (fields: {', '.join(sorted(updates)) or 'none'})")
        return profile

    def get_or_create(self, uid: str, email: Optional[str] = None) -> UserProfile:
        """Load a profile, creating and persisting a blank one on first sign-in."""
        with self.store.lock:
            profile = self.get_profile(uid)
            if profile is not None:
                return profile

            profile = UserProfile.blank(uid, email)
            self.store.set(StorageKeys.profile(uid), profile.to_document())
        logger.info(f"Created blank profile for {uid}")
        return profile
