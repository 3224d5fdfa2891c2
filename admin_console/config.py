"""
admin_console/config.py
-----------------------------------
Settings for talking to the training backend, read from .env + environment.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_ENV_PATH = os.path.join(BASE_DIR, ".env")


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"❌ {name} must be a number, got {raw!r}") from None


@dataclass
class ConsoleSettings:
    api_base_url: str
    api_token: Optional[str] = None
    timeout: float = 15.0
    max_retries: int = 3
    min_interval: float = 0.0
    max_wait: float = 10.0

    @classmethod
    def from_env(cls, env_path: Optional[str] = None) -> "ConsoleSettings":
        """
        Load .env (existing environment variables win) and build the settings.
        TRAINING_API_URL is required.
        """
        load_dotenv(dotenv_path=env_path or DEFAULT_ENV_PATH)

        base_url = os.getenv("TRAINING_API_URL")
        if not base_url:
            raise ValueError("❌ TRAINING_API_URL is not set!")

        return cls(
            api_base_url=base_url.rstrip("/"),
            api_token=os.getenv("TRAINING_API_TOKEN") or None,
            timeout=_env_number("TRAINING_API_TIMEOUT", 15.0, float),
            max_retries=_env_number("TRAINING_API_MAX_RETRIES", 3, int),
            min_interval=_env_number("TRAINING_API_MIN_INTERVAL", 0.0, float),
            max_wait=_env_number("TRAINING_API_MAX_WAIT", 10.0, float),
        )
