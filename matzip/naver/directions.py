"""Client for the Naver Cloud driving-directions API."""
from __future__ import annotations

import logging
from typing import Any, Iterable

import requests

from ..pacing import Pacer
from ..recommendations.models import NO_ROUTE, DistanceResult
from .config import DEFAULT_NAVER_CONFIG, NaverConfig

logger = logging.getLogger(__name__)


def _parse_summary(payload: dict[str, Any]) -> DistanceResult:
    routes = (payload.get("route") or {}).get("traoptimal") or []
    if not routes:
        return NO_ROUTE
    summary = routes[0].get("summary") or {}
    distance = int(summary.get("distance") or 0)
    duration_ms = float(summary.get("duration") or 0)
    return DistanceResult(distance=distance, duration=round(duration_ms / 1000 / 60))


class DirectionClient:
    def __init__(
        self,
        config: NaverConfig = DEFAULT_NAVER_CONFIG,
        session: requests.Session | None = None,
        pacer: Pacer | None = None,
    ) -> None:
        self.config = config
        self.session = session or requests.Session()
        self.pacer = pacer or Pacer(config.direction_delay)

    @property
    def configured(self) -> bool:
        return bool(self.config.ncp_key_id and self.config.ncp_key)

    def route(
        self,
        start_lat: float,
        start_lng: float,
        end_lat: float,
        end_lng: float,
    ) -> DistanceResult:
        """Driving distance (m) and duration (min); ``NO_ROUTE`` on any failure."""
        if not self.configured:
            return NO_ROUTE

        try:
            response = self.session.get(
                self.config.direction_url,
                params={
                    "start": f"{start_lng},{start_lat}",
                    "goal": f"{end_lng},{end_lat}",
                    "option": "traoptimal",
                },
                headers={
                    "X-NCP-APIGW-API-KEY-ID": self.config.ncp_key_id,
                    "X-NCP-APIGW-API-KEY": self.config.ncp_key,
                },
                timeout=self.config.direction_timeout,
            )
            if response.status_code >= 400:
                logger.warning("Directions returned HTTP %s", response.status_code)
                return NO_ROUTE
            return _parse_summary(response.json())
        except (requests.RequestException, ValueError, TypeError, AttributeError):
            logger.warning("Directions call failed", exc_info=True)
            return NO_ROUTE

    def batch(
        self,
        user_lat: float,
        user_lng: float,
        points: Iterable[tuple[float, float]],
    ) -> list[DistanceResult]:
        """Sequential, paced routes from the user to each point, in input order."""
        if not self.configured:
            logger.warning("Naver directions credentials are not configured")

        results: list[DistanceResult] = []
        for lat, lng in points:
            if self.configured:
                self.pacer.wait()
            results.append(self.route(user_lat, user_lng, lat, lng))
        return results
