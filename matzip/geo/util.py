from __future__ import annotations

import math
import re

EARTH_RADIUS_M = 6_371_000
METERS_PER_DEGREE_LAT = 111_320
WALKING_METERS_PER_MINUTE = 75

FOOD_CATEGORY_PREFIX = "음식점>"

# Order matters: the first keyword found in the category wins.
CUISINE_KEYWORDS: list[str] = [
    "한식",
    "중식",
    "일식",
    "양식",
    "아시아음식",
    "치킨",
    "피자",
    "카페",
    "분식",
]

_CITY_RE = re.compile(r"(.*?[시군])")
_DISTRICT_RE = re.compile(r"([가-힣]+구)")
_DONG_RE = re.compile(r"([가-힣]+동)")
_AREA_RE = re.compile(r"(.*?[시군구])")


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in metres."""
    p1, p2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dl = math.radians(lng2 - lng1)
    a = math.sin(dphi / 2) ** 2 + math.cos(p1) * math.cos(p2) * math.sin(dl / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def project_coordinate(
    lat: float,
    lng: float,
    distance_m: float,
    bearing_deg: float,
) -> tuple[float, float]:
    """
    Move ``distance_m`` metres from (lat, lng) along ``bearing_deg``
    (0 = north, 90 = east).

    Flat-earth approximation; only meaningful for a few kilometres.
    """
    bearing = math.radians(bearing_deg)
    dlat = distance_m * math.cos(bearing) / METERS_PER_DEGREE_LAT
    cos_lat = math.cos(math.radians(lat)) or 1e-9
    dlng = distance_m * math.sin(bearing) / (METERS_PER_DEGREE_LAT * cos_lat)
    return lat + dlat, lng + dlng


def extract_cuisine_type(category: str | None) -> str:
    category = category or ""
    if category.startswith(FOOD_CATEGORY_PREFIX):
        category = category[len(FOOD_CATEGORY_PREFIX):]

    for keyword in CUISINE_KEYWORDS:
        if keyword in category:
            return keyword

    return category.split(">")[-1] or category


def extract_area_from_address(address: str | None) -> str:
    match = _AREA_RE.match(address or "")
    return match.group(1) if match else ""


def extract_location_parts(address: str | None) -> dict[str, str]:
    """Split a Korean address into ``city``, ``district`` and ``dong``."""
    address = address or ""
    city = _CITY_RE.search(address)
    district = _DISTRICT_RE.search(address)
    dong = _DONG_RE.search(address)
    return {
        "city": city.group(1) if city else "",
        "district": district.group(1) if district else "",
        "dong": dong.group(1) if dong else "",
    }


def walking_minutes(distance_m: int) -> int:
    if distance_m <= 0:
        return 0
    return round(distance_m / WALKING_METERS_PER_MINUTE)


def format_display_distance(distance_m: int) -> str:
    """``850`` -> ``"850m"``, ``1850`` -> ``"1.9km"``; ``""`` for unknown."""
    if distance_m <= 0:
        return ""
    if distance_m < 1000:
        return f"{distance_m}m"
    return f"{distance_m / 1000:.1f}km"


def is_valid_coordinate(lat: float | None, lng: float | None) -> bool:
    if lat is None or lng is None:
        return False
    return -90 <= lat <= 90 and -180 <= lng <= 180
