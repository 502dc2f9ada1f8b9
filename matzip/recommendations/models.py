from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Transient provider records ───────────────────────────────────────────


@dataclass(frozen=True)
class RawPlace:
    """One cleaned local-search item; discarded after enrichment."""

    name: str
    address: str
    road_address: str
    category: str
    telephone: str
    lat: float
    lng: float
    link: str
    description: str
    matched_keyword: str = ""

    @property
    def key(self) -> tuple[str, str]:
        return (self.name, self.address)


@dataclass(frozen=True)
class DistanceResult:
    distance: int = 0
    duration: int = 0


NO_ROUTE = DistanceResult(0, 0)


@dataclass(frozen=True)
class PlaceFacts:
    rating: float | None = None
    review_count: int | None = None
    blog_review_count: int | None = None
    operating_hours: str | None = None
    description: str | None = None


# ── API models ───────────────────────────────────────────────────────────


class Location(BaseModel):
    model_config = _CAMEL

    address: str = Field(default="", description="Reverse-geocoded address of the map click")
    lat: float | None = None
    lng: float | None = None

    @property
    def has_coordinates(self) -> bool:
        return bool(self.lat) and bool(self.lng)


class EnrichedRestaurant(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: int = 0
    name: str
    address: str = ""
    category: str = ""
    telephone: str = ""
    link: str = ""
    description: str = ""
    cuisine: str = ""
    area: str = ""
    lat: float = 0.0
    lng: float = 0.0
    distance: int = Field(default=0, description="Metres; 0 means unknown")
    duration: int = Field(default=0, description="Minutes; 0 means unknown")
    display_distance: str = ""
    representative_menus: list[str] = Field(default_factory=list)
    rating: float | None = None
    review_count: int | None = None
    blog_review_count: int | None = None
    operating_hours: str | None = None
    naver_description: str | None = None
    position_is_estimated: bool = False


class CompareRequest(BaseModel):
    model_config = _CAMEL

    restaurants: list[EnrichedRestaurant] = Field(default_factory=list)
    user_preference: str | None = Field(default=None, max_length=500)


class CompareResponse(BaseModel):
    result: str


class ReviewRequest(BaseModel):
    name: str = ""
    location: str = ""


class ReviewResponse(BaseModel):
    review: str


class EstimateRequest(BaseModel):
    lat: float
    lng: float


class PlaceSearchResult(BaseModel):
    model_config = _CAMEL

    title: str
    address: str = ""
    road_address: str = ""
    category: str = ""
    lat: float = 0.0
    lng: float = 0.0


@dataclass(frozen=True)
class EstimatedPlace:
    """A model-suggested place with a distance but no real position."""

    name: str
    cuisine: str
    description: str
    distance: int
    bearing: float | None = None
    rating: float | None = None
    specialties: tuple[str, ...] = ()
    area: str = ""
