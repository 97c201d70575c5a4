"""Tests for settings and store construction."""

import pytest

from fitcoach.config import AppConfig, build_store
from fitcoach.memory.kv_store import JsonFileKeyValueStore, MemoryKeyValueStore


def test_defaults():
    config = AppConfig.from_secrets({})

    assert config.storage_backend == "file"
    assert config.cookie_expiry_days == 30
    assert config.min_password_length == 6


def test_values_from_secrets():
    config = AppConfig.from_secrets(
        {
            "storage_backend": "gdrive",
            "gcp_service_account": {"type": "service_account", "project_id": "demo"},
            "cookie_expiry_days": 7,
        }
    )

    assert config.storage_backend == "gdrive"
    assert config.gcp_service_account["project_id"] == "demo"
    assert config.cookie_expiry_days == 7


def test_environment_fallback(monkeypatch):
    monkeypatch.setenv("FITCOACH_STORAGE_BACKEND", "memory")
    monkeypatch.setenv("FITCOACH_COOKIE_EXPIRY_DAYS", "14")
    monkeypatch.setenv("FITCOACH_GCP_SERVICE_ACCOUNT", '{"project_id": "demo"}')

    config = AppConfig.from_secrets({"cookie_expiry_days": 3})

    assert config.storage_backend == "memory"
    assert config.cookie_expiry_days == 3
    assert config.gcp_service_account == {"project_id": "demo"}


def test_invalid_backend_rejected():
    with pytest.raises(ValueError):
        AppConfig.from_secrets({"storage_backend": "s3"})


def test_gdrive_requires_service_account():
    with pytest.raises(ValueError, match="gcp_service_account"):
        build_store(AppConfig(storage_backend="gdrive"))


def test_build_memory_store():
    assert isinstance(build_store(AppConfig(storage_backend="memory")), MemoryKeyValueStore)


def test_build_file_store(tmp_path):
    store = build_store(AppConfig(storage_backend="file", data_dir=str(tmp_path)))
    store.set("k", 1)

    assert isinstance(store, JsonFileKeyValueStore)
    assert (tmp_path / JsonFileKeyValueStore.FILENAME).exists()
