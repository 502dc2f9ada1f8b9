from __future__ import annotations

import logging
from typing import Protocol

from groq import Groq

from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a friendly Korean food guide. "
    "Answer in Korean and follow the requested output format exactly."
)


class LLMUnavailableError(RuntimeError):
    """Raised when generation is disabled or no API key is configured."""


class TextGenerator(Protocol):
    def generate(
        self,
        prompt: str,
        *,
        max_tokens: int | None = None,
        temperature: float = 0.7,
        json_mode: bool = False,
    ) -> str: ...


class GroqTextGenerator:
    """
    Free-text prompt in, free-text answer out.

    Errors propagate; callers decide on their own fallback content.
    """

    def __init__(self, config: LLMConfig = DEFAULT_LLM_CONFIG) -> None:
        self.config = config

    @property
    def available(self) -> bool:
        return self.config.enabled and bool(self.config.api_key)

    def generate(
        self,
        prompt: str,
        *,
        max_tokens: int | None = None,
        temperature: float = 0.7,
        json_mode: bool = False,
    ) -> str:
        if not self.available:
            raise LLMUnavailableError("Groq generation is disabled or has no API key")

        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        client = Groq(api_key=self.config.api_key, timeout=self.config.timeout)
        response = client.chat.completions.create(
            model=self.config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=max_tokens or self.config.max_tokens,
            temperature=temperature,
            **kwargs,
        )
        content = (response.choices[0].message.content or "").strip()
        logger.debug("Groq returned %d chars", len(content))
        return content
