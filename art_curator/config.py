"""Environment-driven configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

MET_BASE_URL = "https://collectionapi.metmuseum.org/public/collection/v1"
HARVARD_BASE_URL = "https://api.harvardartmuseums.org"

MODE_DIRECT = "direct"
MODE_PROXY = "proxy"
HARVARD_MODES = (MODE_DIRECT, MODE_PROXY)

DEFAULT_RELAY_URL = "http://localhost:8888/harvard-api"
DEFAULT_TIMEOUT = 15
DEFAULT_MAX_WORKERS = 20


@dataclass
class Settings:
    """Deployment settings shared by the adapters, relay and app."""

    harvard_mode: str = MODE_PROXY
    harvard_api_key: str = ""
    harvard_relay_url: str = DEFAULT_RELAY_URL
    request_timeout: float = DEFAULT_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS
    exhibitions_path: str = "exhibitions.json"

    def __post_init__(self) -> None:
        if self.harvard_mode not in HARVARD_MODES:
            raise ValueError(
                f"Invalid HARVARD_API_MODE: {self.harvard_mode}. "
                f"Expected one of: {', '.join(HARVARD_MODES)}"
            )
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from the environment (and a .env file if present)."""
        load_dotenv()
        return cls(
            harvard_mode=os.getenv("HARVARD_API_MODE", MODE_PROXY).strip().lower(),
            harvard_api_key=os.getenv("HARVARD_API_KEY", ""),
            harvard_relay_url=os.getenv("HARVARD_RELAY_URL", DEFAULT_RELAY_URL),
            request_timeout=float(os.getenv("CURATOR_REQUEST_TIMEOUT", DEFAULT_TIMEOUT)),
            max_workers=int(os.getenv("CURATOR_MAX_WORKERS", DEFAULT_MAX_WORKERS)),
            exhibitions_path=os.getenv("CURATOR_EXHIBITIONS_PATH", "exhibitions.json"),
        )
