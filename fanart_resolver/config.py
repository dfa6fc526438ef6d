"""Configuration objects and constants for the artwork resolver."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Optional

from .errors import ConfigurationError

DEFAULT_BASE_URL = "https://webservice.fanart.tv/v3/{section}/{identifier}?api_key={api_key}"
DEFAULT_SECTION = "music"
DEFAULT_CACHE_ROOT = Path("~/.cache/fanart-resolver")
DEFAULT_USER_AGENT = "fanart-resolver/0.1"

PROVIDER_NAME = "Fanart"
SERVICE_DIR_NAME = "fanart-music"
CATALOG_FILENAME = "fanart.json"

# The remote service is rate limited per API key.
STALENESS_THRESHOLD = timedelta(days=2)

API_KEY_ENV = "FANART_API_KEY"
PERSONAL_API_KEY_ENV = "FANART_PERSONAL_API_KEY"
CACHE_DIR_ENV = "FANART_CACHE_DIR"


@dataclass
class ResolverConfig:
    """Settings shared by the fetcher, the cache store and the outer surfaces."""

    cache_root: Path
    api_key: str
    personal_api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    section: str = DEFAULT_SECTION
    request_timeout: float = 30.0
    chunk_size: int = 64 * 1024
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(
        cls,
        cache_root: Optional[Path] = None,
        api_key: Optional[str] = None,
        personal_api_key: Optional[str] = None,
    ) -> "ResolverConfig":
        """Build a config, filling unset values from the environment."""
        api_key = api_key or os.getenv(API_KEY_ENV)
        if not api_key:
            raise ConfigurationError(
                f"No API key configured; pass one explicitly or set {API_KEY_ENV}"
            )
        if personal_api_key is None:
            personal_api_key = os.getenv(PERSONAL_API_KEY_ENV)
        if cache_root is None:
            override = os.getenv(CACHE_DIR_ENV)
            cache_root = Path(override) if override else DEFAULT_CACHE_ROOT
        return cls(
            cache_root=Path(cache_root).expanduser(),
            api_key=api_key,
            personal_api_key=personal_api_key,
        )
