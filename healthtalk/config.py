"""
Configuration settings for the HealthTalk relay
"""
from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Load .env from the project root directory
load_dotenv(dotenv_path=PROJECT_ROOT / ".env")

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_PORT = 5000


class Settings:
    """Process-wide relay settings, read once from the environment.

    Nothing here changes after startup; request handlers only read it.
    """

    def __init__(self) -> None:
        self.gemini_api_key: Optional[str] = os.getenv("GEMINI_API_KEY") or None
        self.gemini_model: str = os.getenv("GEMINI_MODEL", DEFAULT_MODEL)
        self.gemini_base_url: str = os.getenv("GEMINI_BASE_URL", GEMINI_BASE_URL)
        self.upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT", "30"))
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = int(os.getenv("PORT") or DEFAULT_PORT)
        self.port_file: Path = Path(
            os.getenv("PORT_FILE", str(PROJECT_ROOT / ".healthtalk-port.json"))
        )
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
