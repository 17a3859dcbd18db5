"""
Configuration for the YaYa transactions proxy.

Settings are read once from the environment (``.env`` is loaded first) and
passed explicitly into create_app(). Missing YaYa credentials are a fatal
startup condition.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from yaya_proxy.errors import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}

REQUIRED_VARS = (
    "YAYA_API_URL",
    "YAYA_API_KEY",
    "YAYA_API_SECRET",
    "YAYA_API_PATH",
    "YAYA_TEST_API_URL",
)


@dataclass(frozen=True)
class RetrySettings:
    attempts: int = 3
    list_delay: float = 2.0
    search_delay: float = 2.0
    search_timeout: float = 30.0
    time_attempts: int = 3
    time_delay: float = 1.0


@dataclass(frozen=True)
class Settings:
    api_url: str
    api_key: str
    api_secret: str
    api_path: str
    test_api_url: str
    use_mock: bool = False
    current_account: str = "yayawalletpi"
    request_timeout: float = 30.0
    app_env: str = "development"
    client_url: str = "http://localhost:5174"
    host: str = "0.0.0.0"
    port: int = 5000
    retry: RetrySettings = field(default_factory=RetrySettings)

    @property
    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    @property
    def api_base(self) -> str:
        """Base URL plus API path prefix, e.g. https://sandbox.yayawallet.com/api/en"""
        return self.api_url.rstrip("/") + "/" + self.api_path.strip("/")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, load_env_file: bool = True) -> "Settings":
        if environ is None:
            if load_env_file:
                load_dotenv(find_dotenv(usecwd=True), override=False)
            environ = os.environ

        values = {name: (environ.get(name) or "").strip() for name in REQUIRED_VARS}
        if not values["YAYA_API_PATH"]:
            values["YAYA_API_PATH"] = "/api/en"

        missing = [name for name, value in values.items() if not value]
        if missing:
            raise ConfigurationError(
                "YaYa API configuration missing in environment variables: " + ", ".join(missing)
            )

        try:
            request_timeout = float(environ.get("YAYA_REQUEST_TIMEOUT", "30"))
            port = int(environ.get("PORT", "5000"))
        except ValueError as exc:
            raise ConfigurationError(f"Invalid numeric setting: {exc}") from exc

        return cls(
            api_url=values["YAYA_API_URL"],
            api_key=values["YAYA_API_KEY"],
            api_secret=values["YAYA_API_SECRET"],
            api_path=values["YAYA_API_PATH"],
            test_api_url=values["YAYA_TEST_API_URL"],
            use_mock=(environ.get("YAYA_USE_MOCK", "") or "").strip().lower() in _TRUE_VALUES,
            current_account=(environ.get("YAYA_CURRENT_ACCOUNT") or "yayawalletpi").strip(),
            request_timeout=request_timeout,
            app_env=(environ.get("APP_ENV") or "development").strip(),
            client_url=(environ.get("CLIENT_URL") or "http://localhost:5174").strip(),
            host=(environ.get("HOST") or "0.0.0.0").strip(),
            port=port,
        )
