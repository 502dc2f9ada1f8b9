from matzip.insights.keywords import DEFAULT_KEYWORDS, KeywordGenerator
from matzip.llm.config import LLMConfig
from matzip.llm.groq_client import GroqTextGenerator


class FakeGenerator:
    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def generate(self, prompt, **kwargs):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.reply


PARTS = {"city": "서울특별시", "district": "강남구", "dong": "역삼동"}


def test_parses_bullet_keywords():
    fake = FakeGenerator("추천 키워드입니다.\n- 국밥\n- 한우 오마카세\n• 브런치카페\n참고하세요.")

    keywords = KeywordGenerator(fake).for_address("서울특별시 강남구 역삼동", PARTS)

    assert keywords == ["국밥", "한우 오마카세", "브런치카페"]


def test_prompt_includes_address_and_region():
    fake = FakeGenerator("- 국밥")

    KeywordGenerator(fake).for_address("서울특별시 강남구 역삼동 123", PARTS)

    assert "서울특별시 강남구 역삼동 123" in fake.prompts[0]
    assert "서울특별시 강남구 역삼동" in fake.prompts[0]


def test_drops_overly_long_lines():
    fake = FakeGenerator("- 국밥\n- 역삼동은 오피스 상권이라 점심 특선이 강한 식당이 많습니다")

    assert KeywordGenerator(fake).for_address("역삼동") == ["국밥"]


def test_caps_keyword_count():
    fake = FakeGenerator("\n".join(f"- 키워드{i}" for i in range(80)))

    keywords = KeywordGenerator(fake, max_keywords=50).for_address("역삼동")

    assert len(keywords) == 50


def test_ai_error_falls_back_to_default_list():
    fake = FakeGenerator(error=RuntimeError("quota exceeded"))

    keywords = KeywordGenerator(fake).for_address("서울 강남구 역삼동", PARTS)

    assert keywords == list(DEFAULT_KEYWORDS)
    assert len(keywords) == 40


def test_unparsable_answer_falls_back_to_default_list():
    fake = FakeGenerator("죄송하지만 해당 요청은 처리할 수 없습니다.")

    assert KeywordGenerator(fake).for_address("역삼동") == list(DEFAULT_KEYWORDS)


def test_disabled_llm_falls_back_to_default_list():
    generator = GroqTextGenerator(LLMConfig(api_key="", enabled=False))

    assert KeywordGenerator(generator).for_address("역삼동") == list(DEFAULT_KEYWORDS)


def test_default_list_is_unique_and_starts_with_major_cuisines():
    assert len(set(DEFAULT_KEYWORDS)) == len(DEFAULT_KEYWORDS)
    assert DEFAULT_KEYWORDS[:4] == ("한식", "중식", "일식", "양식")
