"""Tests for environment driven settings"""

import pytest

from cartsync.config import (
    DEFAULT_API_URL,
    DEFAULT_REQUEST_TIMEOUT,
    Settings,
    get_settings,
    reset_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "CARTSYNC_API_URL",
        "CARTSYNC_REQUEST_TIMEOUT",
        "CARTSYNC_READ_TIMEOUT",
        "CARTSYNC_STORAGE_BACKEND",
        "CARTSYNC_KEY_PREFIX",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


def test_defaults():
    settings = Settings.from_env()

    assert settings.api_url == DEFAULT_API_URL
    assert settings.request_timeout == DEFAULT_REQUEST_TIMEOUT
    assert settings.read_timeout == 15.0
    assert settings.storage_backend == "memory"
    assert settings.key_prefix == "freshcart"


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("CARTSYNC_API_URL", "https://shop.test/api/v1/")
    monkeypatch.setenv("CARTSYNC_REQUEST_TIMEOUT", "5")
    monkeypatch.setenv("CARTSYNC_STORAGE_BACKEND", "REDIS")
    monkeypatch.setenv("CARTSYNC_KEY_PREFIX", "shop")

    settings = Settings.from_env()

    assert settings.api_url == "https://shop.test/api/v1"
    assert settings.request_timeout == 5.0
    assert settings.storage_backend == "redis"
    assert settings.key_prefix == "shop"


@pytest.mark.parametrize("raw", ["abc", "0", "-3"])
def test_invalid_timeout_falls_back(monkeypatch, raw):
    monkeypatch.setenv("CARTSYNC_READ_TIMEOUT", raw)
    assert Settings.from_env().read_timeout == 15.0


def test_unknown_backend_falls_back_to_memory(monkeypatch):
    monkeypatch.setenv("CARTSYNC_STORAGE_BACKEND", "sqlite")
    assert Settings.from_env().storage_backend == "memory"


def test_get_settings_is_cached(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("CARTSYNC_KEY_PREFIX", "changed")

    assert get_settings() is first

    reset_settings()
    assert get_settings().key_prefix == "changed"
