from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Sequence

from ..geo.util import (
    extract_area_from_address,
    extract_cuisine_type,
    extract_location_parts,
    format_display_distance,
    is_valid_coordinate,
    project_coordinate,
    walking_minutes,
)
from ..insights.generator import (
    COMPARE_FAILED_MESSAGE,
    COMPARE_MIN_MESSAGE,
    InsightGenerator,
    fallback_description,
)
from ..insights.keywords import KeywordGenerator
from ..naver.directions import DirectionClient
from ..naver.search import SearchClient, dedupe_places
from ..scraper.place_facts import PlaceFactScraper
from .config import DEFAULT_PIPELINE_CONFIG, PipelineConfig
from .models import (
    EnrichedRestaurant,
    Location,
    PlaceFacts,
    PlaceSearchResult,
    RawPlace,
)

logger = logging.getLogger(__name__)

ADDRESS_ONLY_DISPLAY = "주소 기반 검색"
ESTIMATED_DISPLAY_SUFFIX = " (추정)"


@dataclass
class _Draft:
    """A restaurant while it moves through the pipeline stages."""

    name: str
    address: str
    category: str
    telephone: str
    link: str
    description: str
    lat: float
    lng: float
    keyword: str = ""
    distance: int = 0
    duration: int = 0
    menus: list[str] = field(default_factory=list)
    facts: PlaceFacts | None = None

    @classmethod
    def from_raw(cls, place: RawPlace) -> "_Draft":
        return cls(
            name=place.name,
            address=place.address,
            category=place.category,
            telephone=place.telephone,
            link=place.link,
            description=place.description,
            lat=place.lat,
            lng=place.lng,
            keyword=place.matched_keyword,
        )


def rank_by_distance(drafts: Sequence[_Draft], limit: int | None = None) -> list[_Draft]:
    """Drop unknown (zero) distances, sort nearest first, keep ``limit``."""
    known = sorted((d for d in drafts if d.distance > 0), key=lambda d: d.distance)
    return known[:limit] if limit is not None else known


def display_distance(distance: int, duration: int, with_coordinates: bool) -> str:
    if not with_coordinates or distance <= 0 or duration <= 0:
        return ADDRESS_ONLY_DISPLAY
    return (
        f"{format_display_distance(distance)} "
        f"(차량 {duration}분, 도보 약 {walking_minutes(distance)}분)"
    )


class EnrichmentPipeline:
    def __init__(
        self,
        search: SearchClient,
        directions: DirectionClient,
        keywords: KeywordGenerator,
        insights: InsightGenerator,
        scraper: PlaceFactScraper | None = None,
        config: PipelineConfig = DEFAULT_PIPELINE_CONFIG,
    ) -> None:
        self.search = search
        self.directions = directions
        self.keywords = keywords
        self.insights = insights
        self.scraper = scraper
        self.config = config

    # ── Search flow ──────────────────────────────────────────────────────

    def recommend_near(self, location: Location) -> list[EnrichedRestaurant]:
        """Ordered, enriched restaurants around ``location``; ``[]`` on any failure."""
        start_time = time.time()
        try:
            results = self._recommend_near(location)
        except Exception:
            logger.warning("Address search failed for %r", location.address, exc_info=True)
            return []
        elapsed_ms = round((time.time() - start_time) * 1000, 1)
        logger.info("Recommended %d restaurants in %.1fms", len(results), elapsed_ms)
        return results

    def _recommend_near(self, location: Location) -> list[EnrichedRestaurant]:
        address = location.address.strip()
        if not address:
            logger.info("Empty address, nothing to search")
            return []

        parts = extract_location_parts(address)
        keywords = self.keywords.for_address(address, parts)

        found: list[RawPlace] = []
        for keyword in keywords:
            found.extend(self.search.search_by_address_and_keyword(address, keyword))

        places = dedupe_places(found)
        if self.config.candidate_limit is not None:
            places = places[: self.config.candidate_limit]
        logger.info("%d unique places from %d keywords", len(places), len(keywords))
        if not places:
            return []

        drafts = [_Draft.from_raw(p) for p in places]
        with_coordinates = location.has_coordinates
        if with_coordinates:
            drafts = self._annotate_distances(drafts, location.lat, location.lng)
        else:
            drafts = drafts[: self.config.max_results]

        self._scrape_facts(drafts)
        self._backfill_insights(drafts, address)
        return self._format(drafts, with_coordinates)

    def _annotate_distances(self, drafts: list[_Draft], lat: float, lng: float) -> list[_Draft]:
        routes = self.directions.batch(lat, lng, [(d.lat, d.lng) for d in drafts])
        for draft, route in zip(drafts, routes):
            draft.distance = route.distance
            draft.duration = route.duration
        ranked = rank_by_distance(drafts, self.config.max_results)
        logger.info("%d/%d places have route data", len(ranked), len(drafts))
        return ranked

    def _scrape_facts(self, drafts: list[_Draft]) -> None:
        if self.scraper is None or not self.scraper.enabled:
            return
        targets = drafts[: self.config.scrape_limit]
        facts = self.scraper.crawl_batch([(d.name, d.address) for d in targets])
        for draft, fact in zip(targets, facts):
            draft.facts = fact

    def _backfill_insights(self, drafts: list[_Draft], address: str) -> None:
        for index, draft in enumerate(drafts):
            if index < self.config.insight_limit:
                draft.menus = self.insights.menus(draft)
                if draft.menus:
                    logger.info("%s (found by %r): %s", draft.name, draft.keyword, ", ".join(draft.menus))
            if draft.description:
                continue
            if index < self.config.blurb_limit:
                draft.description = self.insights.blurb(draft, address)
            else:
                draft.description = fallback_description(draft.category)

    def _format(self, drafts: list[_Draft], with_coordinates: bool) -> list[EnrichedRestaurant]:
        results: list[EnrichedRestaurant] = []
        for index, draft in enumerate(drafts, start=1):
            facts = draft.facts or PlaceFacts()
            results.append(EnrichedRestaurant(
                id=index,
                name=draft.name,
                address=draft.address,
                category=draft.category,
                telephone=draft.telephone,
                link=draft.link,
                description=draft.description,
                cuisine=extract_cuisine_type(draft.category),
                area=extract_area_from_address(draft.address),
                lat=draft.lat,
                lng=draft.lng,
                distance=draft.distance,
                duration=draft.duration,
                display_distance=display_distance(draft.distance, draft.duration, with_coordinates),
                representative_menus=draft.menus,
                rating=facts.rating,
                review_count=facts.review_count,
                blog_review_count=facts.blog_review_count,
                operating_hours=facts.operating_hours,
                naver_description=facts.description,
            ))
        return results

    # ── Compare / review ─────────────────────────────────────────────────

    def compare(
        self,
        restaurants: Sequence[EnrichedRestaurant],
        preference: str | None = None,
    ) -> str:
        if len(restaurants) < 2:
            return COMPARE_MIN_MESSAGE
        try:
            enriched = self._reenrich(restaurants)
            return self.insights.compare(enriched, preference)
        except Exception:
            logger.warning("Comparison failed", exc_info=True)
            return COMPARE_FAILED_MESSAGE

    def _reenrich(self, restaurants: Sequence[EnrichedRestaurant]) -> list[EnrichedRestaurant]:
        """Fill missing facts and menus for the first few selected restaurants."""
        scrape = self.scraper is not None and self.scraper.enabled
        refreshed: list[EnrichedRestaurant] = []
        for index, restaurant in enumerate(restaurants):
            if index >= self.config.compare_enrich_limit:
                refreshed.append(restaurant)
                continue

            updates: dict = {}
            if scrape and restaurant.rating is None:
                facts = self.scraper.crawl(restaurant.name, restaurant.address)
                if facts is not None:
                    updates.update(
                        rating=facts.rating,
                        review_count=facts.review_count,
                        blog_review_count=facts.blog_review_count,
                        operating_hours=facts.operating_hours,
                        naver_description=facts.description,
                    )
            if not restaurant.representative_menus:
                menus = self.insights.menus(restaurant)
                if menus:
                    updates["representative_menus"] = menus
            refreshed.append(restaurant.model_copy(update=updates) if updates else restaurant)
        return refreshed

    def review(self, name: str, location: str = "") -> str:
        return self.insights.review(name, location)

    def search_places(self, query: str) -> list[PlaceSearchResult]:
        return self.search.search_places(query)

    # ── Estimated flow (coordinates only) ────────────────────────────────

    def estimate_near(self, lat: float, lng: float) -> list[EnrichedRestaurant]:
        """
        Model-suggested restaurants around a coordinate.

        Positions are projected from the model's distance/bearing guesses, so
        every record is flagged ``position_is_estimated``.
        """
        if not is_valid_coordinate(lat, lng):
            logger.info("Coordinate out of range: %s, %s", lat, lng)
            return []

        try:
            places = self.insights.estimate_nearby(lat, lng, self.config.estimate_count)
        except Exception:
            logger.warning("Estimated search failed", exc_info=True)
            return []

        count = len(places)
        projected = []
        for index, place in enumerate(places):
            # Without a bearing, spread places evenly around the user.
            bearing = place.bearing if place.bearing is not None else index * 360 / count
            projected.append((place, project_coordinate(lat, lng, place.distance, bearing)))
        projected.sort(key=lambda item: item[0].distance)

        results: list[EnrichedRestaurant] = []
        for index, (place, (plat, plng)) in enumerate(projected, start=1):
            distance_text = format_display_distance(place.distance)
            results.append(EnrichedRestaurant(
                id=index,
                name=place.name,
                category=place.cuisine,
                cuisine=place.cuisine,
                description=place.description or f"{place.cuisine} 추천 맛집",
                area=place.area,
                lat=plat,
                lng=plng,
                distance=place.distance,
                display_distance=(
                    f"약 {distance_text}{ESTIMATED_DISPLAY_SUFFIX}" if distance_text else ADDRESS_ONLY_DISPLAY
                ),
                representative_menus=list(place.specialties),
                rating=place.rating,
                position_is_estimated=True,
            ))
        return results

    def close(self) -> None:
        if self.scraper is not None:
            self.scraper.close()


def build_pipeline(config: PipelineConfig = DEFAULT_PIPELINE_CONFIG) -> EnrichmentPipeline:
    """Wire the pipeline to the real providers using environment configuration."""
    return EnrichmentPipeline(
        search=SearchClient(),
        directions=DirectionClient(),
        keywords=KeywordGenerator(),
        insights=InsightGenerator(),
        scraper=PlaceFactScraper(),
        config=config,
    )
