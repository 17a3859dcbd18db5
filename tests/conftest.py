"""Shared fixtures for proxy tests."""

import pytest

from yaya_proxy.config import RetrySettings, Settings

FAST_RETRY = RetrySettings(
    attempts=3,
    list_delay=0,
    search_delay=0,
    search_timeout=0.5,
    time_attempts=3,
    time_delay=0,
)


@pytest.fixture(autouse=True)
def _log_dir(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_url="https://sandbox.yayawallet.com",
        api_key="test-key",
        api_secret="test-secret",
        api_path="/api/en",
        test_api_url="https://sandbox.yayawallet.com/api/en",
        use_mock=True,
        app_env="development",
        retry=FAST_RETRY,
    )
