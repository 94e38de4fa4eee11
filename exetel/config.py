"""Endpoint configuration for the Exetel API.

The API is bound to one login endpoint and one service namespace. They are
kept in an ``ApiConfig`` value handed to ``Authorization`` and ``Client`` so
tests and staging setups can point both at another host.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from exetel.utils.env import env_setting, load_env_file_if_present

logger = logging.getLogger(__name__)

LOGIN_URL = "https://my.exetel.com.au/api/auth/postLogin"
ORIGIN_URL = "https://my.exetel.com.au"
REFERER_URL = "https://my.exetel.com.au/login"
API_URL = "https://webservices.api.exetel.com.au/v1"


@dataclass(frozen=True)
class ApiConfig:
    login_url: str = LOGIN_URL
    origin_url: str = ORIGIN_URL
    referer_url: str = REFERER_URL
    api_url: str = API_URL

    @classmethod
    def from_env(cls, dotenv: bool = True, path: str | Path = ".env") -> ApiConfig:
        """Build a config from ``EXETEL_LOGIN_URL`` / ``EXETEL_API_URL``.

        Unset variables keep the production endpoints.
        """
        if dotenv:
            load_env_file_if_present(path)
        config = cls(
            login_url=env_setting("EXETEL_LOGIN_URL", LOGIN_URL),
            api_url=env_setting("EXETEL_API_URL", API_URL).rstrip("/"),
        )
        if config != cls():
            logger.info(f"Using endpoint overrides: login={config.login_url} api={config.api_url}")
        return config


DEFAULT_CONFIG = ApiConfig()
