from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass(frozen=True)
class ScraperConfig:
    enabled: bool = _env_flag("SCRAPER_ENABLED", "false")
    headless: bool = _env_flag("SCRAPER_HEADLESS", "true")
    search_url: str = "https://map.naver.com/p/search/{query}"
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    timeout_ms: int = 15000
    settle_ms: int = 2000
    item_timeout_seconds: float = 30.0
    delay_seconds: float = 2.0


DEFAULT_SCRAPER_CONFIG = ScraperConfig()
