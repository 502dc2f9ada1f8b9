"""Client for the Naver local-search API."""
from __future__ import annotations

import logging
from typing import Any, Iterable

import requests

from ..geo.text import clean_text
from ..pacing import Pacer
from ..recommendations.models import PlaceSearchResult, RawPlace
from .config import DEFAULT_NAVER_CONFIG, NaverConfig

logger = logging.getLogger(__name__)

COORDINATE_SCALE = 10_000_000


class NaverAPIError(RuntimeError):
    """Raised when a Naver endpoint answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _scaled_coordinate(raw: Any) -> float:
    try:
        return float(raw) / COORDINATE_SCALE
    except (TypeError, ValueError):
        return 0.0


def _payload_items(payload: Any) -> list[dict[str, Any]]:
    """The dict entries of a search payload's ``items``; anything malformed is dropped."""
    if not isinstance(payload, dict):
        logger.warning("Unexpected search payload type: %s", type(payload).__name__)
        return []
    items = payload.get("items") or []
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


def dedupe_places(places: Iterable[RawPlace]) -> list[RawPlace]:
    """Keep the first place seen for each (name, address) pair, in order."""
    seen: set[tuple[str, str]] = set()
    unique: list[RawPlace] = []
    for place in places:
        if place.key in seen:
            continue
        seen.add(place.key)
        unique.append(place)
    return unique


class SearchClient:
    def __init__(
        self,
        config: NaverConfig = DEFAULT_NAVER_CONFIG,
        session: requests.Session | None = None,
        pacer: Pacer | None = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()
        self.pacer = pacer or Pacer(config.search_delay)

    @property
    def configured(self) -> bool:
        return bool(self.config.client_id and self.config.client_secret)

    def _get(self, params: dict[str, Any]) -> dict[str, Any]:
        headers = {
            "X-Naver-Client-Id": self.config.client_id,
            "X-Naver-Client-Secret": self.config.client_secret,
        }
        response = self.session.get(
            self.config.search_url,
            params=params,
            headers=headers,
            timeout=self.config.search_timeout,
        )
        if response.status_code >= 400:
            raise NaverAPIError(
                f"local search returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response.json()

    def _to_raw_place(self, item: dict[str, Any], keyword: str) -> RawPlace:
        road_address = clean_text(item.get("roadAddress"))
        return RawPlace(
            name=clean_text(item.get("title")),
            address=road_address or clean_text(item.get("address")),
            road_address=road_address,
            category=item.get("category") or "",
            telephone=item.get("telephone") or "",
            lat=_scaled_coordinate(item.get("mapy")),
            lng=_scaled_coordinate(item.get("mapx")),
            link=item.get("link") or "",
            description=clean_text(item.get("description")),
            matched_keyword=keyword,
        )

    def search_by_address_and_keyword(self, address: str, keyword: str) -> list[RawPlace]:
        """
        Run one ``"{address} {keyword}"`` query and return its food places.

        Any failure counts as zero results for this keyword. A 429 adds one
        fixed backoff before the next call; the query itself is not retried.
        """
        if not self.configured:
            logger.warning("Naver search credentials are not configured; skipping %r", keyword)
            return []

        self.pacer.wait()
        query = f"{address} {keyword}".strip()
        try:
            payload = self._get({
                "query": query,
                "display": self.config.display,
                "start": 1,
                "sort": self.config.sort,
            })
        except NaverAPIError as exc:
            logger.warning("Search for %r failed: %s", query, exc)
            if exc.status_code == 429:
                self.pacer.backoff(self.config.rate_limit_backoff)
            return []
        except (requests.RequestException, ValueError):
            logger.warning("Search for %r failed", query, exc_info=True)
            return []

        items = _payload_items(payload)
        places = [
            self._to_raw_place(item, keyword)
            for item in items
            if self.config.food_marker in (item.get("category") or "")
        ]
        logger.info("Search %r: %d/%d food places", query, len(places), len(items))
        return places

    def search_places(self, query: str) -> list[PlaceSearchResult]:
        """Free-text place lookup for the map search box."""
        if not query.strip() or not self.configured:
            return []

        self.pacer.wait()
        try:
            payload = self._get({
                "query": query,
                "display": self.config.display,
                "start": 1,
                "sort": "random",
            })
        except (NaverAPIError, requests.RequestException, ValueError):
            logger.warning("Place lookup for %r failed", query, exc_info=True)
            return []

        return [
            PlaceSearchResult(
                title=clean_text(item.get("title")),
                address=clean_text(item.get("address")),
                road_address=clean_text(item.get("roadAddress")),
                category=item.get("category") or "",
                lat=_scaled_coordinate(item.get("mapy")),
                lng=_scaled_coordinate(item.get("mapx")),
            )
            for item in _payload_items(payload)
        ]
