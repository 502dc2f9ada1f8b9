from __future__ import annotations

import logging

from ..llm.groq_client import GroqTextGenerator, TextGenerator
from ..llm.parsing import parse_bullet_list

logger = logging.getLogger(__name__)

MAX_KEYWORDS = 50
MAX_KEYWORD_LENGTH = 20

DEFAULT_KEYWORDS: tuple[str, ...] = (
    "한식", "중식", "일식", "양식", "분식",
    "치킨", "피자", "햄버거", "족발", "보쌈",
    "삼겹살", "갈비", "냉면", "국밥", "찌개",
    "회", "초밥", "라멘", "우동", "파스타",
    "스테이크", "돈까스", "덮밥", "샐러드", "쌀국수",
    "타코", "케밥", "뷔페", "수제버거", "쭈꾸미",
    "닭갈비", "맛집", "식당", "음식점", "카페",
    "브런치", "디저트", "포차", "술집", "와인바",
)

KEYWORD_PROMPT = """\
주소: {address}
지역: {region}

이 지역에서 음식점을 찾을 때 쓸 검색 키워드를 만들어 주세요.
두 종류를 골고루 섞어 주세요.
1. 음식 종류 (예: 한식, 국밥, 초밥, 파스타, 쌀국수, 닭갈비)
2. 업체 유형 (예: 맛집, 식당, 카페, 베이커리, 포차, 와인바)

지역 특색을 반영해 30~50개를 제안하세요.
설명 없이 한 줄에 하나씩, 다음 형식으로만 답하세요:
- 키워드"""


class KeywordGenerator:
    """Ask the model for search keywords tailored to an address."""

    def __init__(
        self,
        generator: TextGenerator | None = None,
        max_keywords: int = MAX_KEYWORDS,
    ) -> None:
        self.generator = generator or GroqTextGenerator()
        self.max_keywords = max_keywords

    def _fallback(self) -> list[str]:
        return list(DEFAULT_KEYWORDS[: self.max_keywords])

    def for_address(
        self,
        address: str,
        location_parts: dict[str, str] | None = None,
    ) -> list[str]:
        """
        Return up to ``max_keywords`` keywords for ``address``.

        Falls back to ``DEFAULT_KEYWORDS`` when the call fails or the answer
        holds no usable bullet lines.
        """
        parts = location_parts or {}
        region = " ".join(
            p for p in (parts.get("city"), parts.get("district"), parts.get("dong")) if p
        )
        prompt = KEYWORD_PROMPT.format(address=address, region=region or address)

        try:
            text = self.generator.generate(prompt, max_tokens=512, temperature=0.8)
        except Exception:
            logger.warning("Keyword generation failed, using default keywords", exc_info=True)
            return self._fallback()

        keywords = parse_bullet_list(
            text, max_length=MAX_KEYWORD_LENGTH, limit=self.max_keywords,
        )
        if not keywords:
            logger.warning("Keyword answer had no bullet lines, using default keywords")
            return self._fallback()

        logger.info("Generated %d keywords for %s", len(keywords), address)
        return keywords
