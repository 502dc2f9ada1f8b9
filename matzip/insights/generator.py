from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence

from ..geo.util import extract_cuisine_type, format_display_distance
from ..llm.groq_client import GroqTextGenerator, TextGenerator
from ..llm.parsing import clean_prose, extract_json_object, parse_bullet_list
from ..pacing import Pacer
from ..recommendations.models import EnrichedRestaurant, EstimatedPlace

logger = logging.getLogger(__name__)

AI_CALL_DELAY = 0.3
BLURB_MAX_CHARS = 50
REVIEW_MAX_CHARS = 150
MAX_MENUS = 3
MAX_MENU_LENGTH = 20
UNKNOWN_MARKER = "모름"

COMPARE_MIN_MESSAGE = "비교하려면 최소 2개 이상의 음식점이 필요합니다."
COMPARE_FAILED_MESSAGE = "AI 비교 결과를 생성하지 못했습니다."
REVIEW_FAILED_MESSAGE = "리뷰 생성에 실패했습니다."
NO_INFO = "정보 없음"


class PlaceLike(Protocol):
    name: str
    category: str
    address: str


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

BLURB_PROMPT = """\
음식점: {name}
카테고리: {category}
주소: {address}
주변 지역: {context}

이 음식점을 소개하는 홍보 문구를 한 문장으로 써 주세요.
50자 이내, 따옴표나 머리말 없이 문장만 답하세요."""

MENU_PROMPT = """\
음식점 정보:
- 상호명: {name}
- 카테고리: {category}
- 주소: {address}

"{name}"의 실제 대표메뉴 2~3개를 알려주세요.
"한식", "양식" 같은 분류가 아니라 구체적인 메뉴명이어야 합니다.
다음 형식으로만 답하세요:
- 메뉴명
- 메뉴명

이 가게를 모른다면 지어내지 말고 "{unknown}" 한 단어만 답하세요."""

COMPARE_PROMPT = """\
다음 {count}개 음식점을 가까운 순서대로 비교해 주세요.

{restaurants}

아래 열을 가진 마크다운 비교표를 먼저 만들어 주세요.

| 음식점 | 음식종류 | 평점/리뷰 | 접근성 | 예상가격대 | 추천상황 | 특징 |
|--------|----------|-----------|--------|------------|----------|------|

- 접근성: 거리와 소요시간 기준 (가까움/보통/멂)
- 예상가격대: 카테고리 기준 일반적인 가격대 (저렴/보통/비쌈)
- 추천상황: 혼밥, 데이트, 회식, 가족식사 등
- 특징: 각 음식점만의 장점

표 아래에 상황별 추천을 짧게 정리해 주세요.
정보가 부족해도 카테고리와 위치로 합리적으로 추정하고, "정보 없음"은 되도록 쓰지 마세요."""

PREFERENCE_PROMPT = """\

사용자 선호: "{preference}"

표 다음에 이 선호를 기준으로 음식점을 세 단계로 나눠 주세요.
### 최우선 추천
### 좋은 대안
### 차선책
각 단계에는 반드시 1곳 이상을 넣어야 합니다. 완벽히 맞는 곳이 없더라도
가장 가까운 곳을 골라 이유와 함께 배치하고, 빈 단계를 남기지 마세요."""

REVIEW_PROMPT = """\
음식점: {name}
위치: {location}

이 음식점의 리뷰를 150자 이내로 자연스럽게 써 주세요.
맛과 품질, 서비스, 분위기, 가격 대비 만족도, 추천 이유를 담아 주세요."""

ESTIMATE_PROMPT = """\
위치 좌표: 위도 {lat}, 경도 {lng}

이 좌표 주변에 실제로 있을 법한 음식점 {count}곳을 추천해 주세요.
JSON으로만 답하세요:
{{
  "restaurants": [
    {{
      "name": "음식점 이름",
      "cuisine": "음식 종류",
      "description": "특징 (30자 이내)",
      "estimatedDistance": 400,
      "distanceUnit": "m",
      "bearing": 135,
      "rating": 4.2,
      "specialties": ["대표메뉴1", "대표메뉴2"],
      "area": "지역명"
    }}
  ]
}}
distanceUnit은 1km 이상이면 "km", 미만이면 "m"입니다.
bearing은 좌표에서 본 방위각(0=북, 90=동)입니다.
다양한 음식 종류로 구성하세요."""


def fallback_description(category: str) -> str:
    return f"{extract_cuisine_type(category)} 카테고리의 추천 맛집"


def _distance_text(distance: int) -> str:
    return format_display_distance(distance) or NO_INFO


def _describe_restaurant(index: int, r: EnrichedRestaurant) -> str:
    lines = [
        f"{index}. **{r.name}**",
        f"   - 카테고리: {r.category or NO_INFO}",
        f"   - 음식종류: {r.cuisine or extract_cuisine_type(r.category)}",
        f"   - 주소: {r.address or NO_INFO}",
    ]
    if r.rating:
        lines.append(f"   - 평점: {r.rating}")
    if r.review_count or r.blog_review_count:
        lines.append(
            f"   - 리뷰: 방문자 {r.review_count or 0}개, 블로그 {r.blog_review_count or 0}개"
        )
    lines.append(f"   - 대표메뉴: {', '.join(r.representative_menus) or NO_INFO}")
    lines.append(f"   - 특징: {r.naver_description or r.description or NO_INFO}")
    if r.operating_hours:
        lines.append(f"   - 영업시간: {r.operating_hours}")
    lines.append(f"   - 거리: {_distance_text(r.distance)}")
    lines.append(f"   - 소요시간: {f'{r.duration}분' if r.duration > 0 else NO_INFO}")
    return "\n".join(lines)


def _nearest_first(restaurants: Sequence[EnrichedRestaurant]) -> list[EnrichedRestaurant]:
    # Unknown distances (0) sort after every known one.
    return sorted(restaurants, key=lambda r: (r.distance <= 0, r.distance))


def _to_meters(value: Any, unit: Any) -> int:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0
    if str(unit).lower() == "km":
        amount *= 1000
    return max(0, round(amount))


def _optional_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class InsightGenerator:
    """Model-written text for restaurants. Every method degrades instead of raising."""

    def __init__(
        self,
        generator: TextGenerator | None = None,
        pacer: Pacer | None = None,
    ) -> None:
        self.generator = generator or GroqTextGenerator()
        self.pacer = pacer or Pacer(AI_CALL_DELAY)

    def _ask(self, prompt: str, **kwargs: Any) -> str:
        self.pacer.wait()
        return self.generator.generate(prompt, **kwargs)

    def blurb(self, restaurant: PlaceLike, location_context: str = "") -> str:
        """One promotional sentence of at most 50 characters."""
        prompt = BLURB_PROMPT.format(
            name=restaurant.name,
            category=restaurant.category or NO_INFO,
            address=restaurant.address or NO_INFO,
            context=location_context or restaurant.address or NO_INFO,
        )
        try:
            text = clean_prose(self._ask(prompt, max_tokens=128), max_chars=BLURB_MAX_CHARS)
        except Exception:
            logger.warning("Blurb generation failed for %s", restaurant.name, exc_info=True)
            text = ""
        return text or fallback_description(restaurant.category)

    def menus(self, restaurant: PlaceLike) -> list[str]:
        """Two or three concrete menu names, or ``[]`` when the model does not know."""
        prompt = MENU_PROMPT.format(
            name=restaurant.name,
            category=restaurant.category or NO_INFO,
            address=restaurant.address or NO_INFO,
            unknown=UNKNOWN_MARKER,
        )
        try:
            text = self._ask(prompt, max_tokens=128, temperature=0.3)
        except Exception:
            logger.warning("Menu generation failed for %s", restaurant.name, exc_info=True)
            return []

        if UNKNOWN_MARKER in text:
            return []
        return parse_bullet_list(text, max_length=MAX_MENU_LENGTH, limit=MAX_MENUS)

    def compare(
        self,
        restaurants: Sequence[EnrichedRestaurant],
        preference: str | None = None,
    ) -> str:
        """Markdown comparison table plus situational (or tiered) picks."""
        if len(restaurants) < 2:
            return COMPARE_MIN_MESSAGE

        ordered = _nearest_first(restaurants)
        prompt = COMPARE_PROMPT.format(
            count=len(ordered),
            restaurants="\n\n".join(
                _describe_restaurant(i, r) for i, r in enumerate(ordered, start=1)
            ),
        )
        preference = (preference or "").strip()
        if preference:
            prompt += PREFERENCE_PROMPT.format(preference=preference)

        try:
            text = self._ask(prompt, max_tokens=2048, temperature=0.5).strip()
        except Exception:
            logger.warning("Restaurant comparison failed", exc_info=True)
            return COMPARE_FAILED_MESSAGE
        return text or COMPARE_FAILED_MESSAGE

    def review(self, name: str, location: str = "") -> str:
        if not name.strip():
            return REVIEW_FAILED_MESSAGE
        prompt = REVIEW_PROMPT.format(name=name, location=location or NO_INFO)
        try:
            text = clean_prose(self._ask(prompt, max_tokens=400), max_chars=REVIEW_MAX_CHARS)
        except Exception:
            logger.warning("Review generation failed for %s", name, exc_info=True)
            return REVIEW_FAILED_MESSAGE
        return text or REVIEW_FAILED_MESSAGE

    def estimate_nearby(self, lat: float, lng: float, count: int = 8) -> list[EstimatedPlace]:
        """
        Model-suggested places around a coordinate.

        The model supplies distances (and maybe bearings), never positions;
        callers must treat the result as an estimate.
        """
        prompt = ESTIMATE_PROMPT.format(lat=lat, lng=lng, count=count)
        try:
            text = self._ask(prompt, max_tokens=2048, temperature=0.7, json_mode=True)
        except Exception:
            logger.warning("Nearby estimation failed", exc_info=True)
            return []

        parsed = extract_json_object(text)
        entries = parsed.get("restaurants") if parsed else None
        if not isinstance(entries, list):
            logger.warning("Nearby estimation answer had no restaurants array")
            return []

        places: list[EstimatedPlace] = []
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("name"):
                continue
            specialties = entry.get("specialties")
            if not isinstance(specialties, list):
                specialties = []
            places.append(EstimatedPlace(
                name=str(entry["name"]).strip(),
                cuisine=str(entry.get("cuisine") or ""),
                description=str(entry.get("description") or ""),
                distance=_to_meters(entry.get("estimatedDistance"), entry.get("distanceUnit")),
                bearing=_optional_float(entry.get("bearing")),
                rating=_optional_float(entry.get("rating")),
                specialties=tuple(str(s) for s in specialties if s)[:MAX_MENUS],
                area=str(entry.get("area") or ""),
            ))
        return places
