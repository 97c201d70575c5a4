"""Application settings from Streamlit secrets with environment fallbacks."""

import json
import logging
import os
from typing import Any, Dict, Literal, Mapping, Optional

from cryptography.fernet import Fernet
from pydantic import BaseModel, Field, PrivateAttr, field_validator

from fitcoach.memory.gdrive_memory import GoogleDriveKeyValueStore, credentials_from_service_account
from fitcoach.memory.kv_store import JsonFileKeyValueStore, KeyValueStore, MemoryKeyValueStore

logger = logging.getLogger(__name__)

StorageBackend = Literal["memory", "file", "gdrive"]

ENV_PREFIX = "FITCOACH_"


class AppConfig(BaseModel):
    """FitCoach settings."""

    storage_backend: StorageBackend = "file"
    data_dir: str = ".fitcoach"
    gdrive_folder_name: str = "FitCoach"
    gcp_service_account: Optional[Dict[str, Any]] = None
    cookie_name: str = "fitcoach_session"
    cookie_expiry_days: int = Field(30, ge=1)
    cookie_encryption_key: Optional[str] = None
    min_password_length: int = Field(6, ge=1)
    log_level: str = "INFO"

    _fallback_cookie_key: Optional[str] = PrivateAttr(default=None)

    @field_validator("gcp_service_account", mode="before")
    @classmethod
    def _parse_service_account(cls, value: Any) -> Any:
        # FITCOACH_GCP_SERVICE_ACCOUNT holds the key file contents as a JSON string
        if isinstance(value, str):
            return json.loads(value)
        return value

    @classmethod
    def from_secrets(cls, secrets: Optional[Mapping[str, Any]] = None) -> "AppConfig":
        """
        Build settings from a secrets mapping (e.g. st.secrets).

        Keys missing from secrets are read from FITCOACH_<KEY> environment
        variables, then fall back to defaults.
        """
        if secrets is None:
            secrets = {}
        values: Dict[str, Any] = {}
        for name in cls.model_fields:
            if name in secrets:
                value = secrets[name]
                values[name] = dict(value) if isinstance(value, Mapping) else value
                continue
            env_value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if env_value:
                values[name] = env_value
        return cls(**values)

    def session_encryption_key(self) -> str:
        """
        Fernet key for the session cookie.

        Without cookie_encryption_key a temporary key is generated once and
        reused, so every browser session of this process shares it.
        """
        if self.cookie_encryption_key:
            return self.cookie_encryption_key
        if self._fallback_cookie_key is None:
            # Cookies will not survive a server restart
            logger.warning("No cookie_encryption_key configured, using temporary key")
            self._fallback_cookie_key = Fernet.generate_key().decode()
        return self._fallback_cookie_key

    def validate_settings(self) -> None:
        """Check combinations pydantic cannot express."""
        if self.storage_backend == "gdrive" and not self.gcp_service_account:
            raise ValueError("storage_backend 'gdrive' requires gcp_service_account")


def build_store(config: AppConfig) -> KeyValueStore:
    """Create the configured key-value store."""
    config.validate_settings()
    logger.info(f"Using '{config.storage_backend}' storage backend")

    if config.storage_backend == "memory":
        return MemoryKeyValueStore()
    if config.storage_backend == "gdrive":
        credentials = credentials_from_service_account(config.gcp_service_account)
        return GoogleDriveKeyValueStore(credentials, folder_name=config.gdrive_folder_name)
    return JsonFileKeyValueStore(config.data_dir)
