from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class NaverConfig:
    client_id: str = os.getenv("NAVER_CLIENT_ID", "")
    client_secret: str = os.getenv("NAVER_CLIENT_SECRET", "")
    ncp_key_id: str = os.getenv("NCP_ACCESS_KEY_ID", "")
    ncp_key: str = os.getenv("NCP_SECRET_KEY", "")

    search_url: str = "https://openapi.naver.com/v1/search/local.json"
    direction_url: str = "https://maps.apigw.ntruss.com/map-direction/v1/driving"

    search_timeout: float = 10.0
    direction_timeout: float = 5.0
    display: int = 10
    sort: str = "comment"
    food_marker: str = "음식점"

    search_delay: float = float(os.getenv("SEARCH_DELAY_SECONDS", "0.8"))
    rate_limit_backoff: float = 2.0
    direction_delay: float = float(os.getenv("DIRECTION_DELAY_SECONDS", "0.1"))


DEFAULT_NAVER_CONFIG = NaverConfig()
