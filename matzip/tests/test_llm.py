from unittest.mock import MagicMock, patch

import pytest

from matzip.llm.config import LLMConfig
from matzip.llm.groq_client import GroqTextGenerator, LLMUnavailableError

ENABLED_CONFIG = LLMConfig(api_key="test-key", enabled=True)
DISABLED_CONFIG = LLMConfig(api_key="test-key", enabled=False)
NO_KEY_CONFIG = LLMConfig(api_key="", enabled=True)


def _mock_groq_response(content):
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


@patch("matzip.llm.groq_client.Groq")
def test_generate_returns_stripped_content(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response("  - 한식\n- 중식 \n")

    text = GroqTextGenerator(ENABLED_CONFIG).generate("키워드를 알려주세요")

    assert text == "- 한식\n- 중식"
    mock_groq_cls.assert_called_once_with(api_key="test-key", timeout=ENABLED_CONFIG.timeout)


@patch("matzip.llm.groq_client.Groq")
def test_generate_sends_prompt_as_user_message(mock_groq_cls):
    create = mock_groq_cls.return_value.chat.completions.create
    create.return_value = _mock_groq_response("ok")

    GroqTextGenerator(ENABLED_CONFIG).generate("hello", max_tokens=64, temperature=0.1)

    kwargs = create.call_args.kwargs
    assert kwargs["messages"][-1] == {"role": "user", "content": "hello"}
    assert kwargs["max_tokens"] == 64
    assert kwargs["temperature"] == 0.1
    assert "response_format" not in kwargs


@patch("matzip.llm.groq_client.Groq")
def test_generate_json_mode(mock_groq_cls):
    create = mock_groq_cls.return_value.chat.completions.create
    create.return_value = _mock_groq_response("{}")

    GroqTextGenerator(ENABLED_CONFIG).generate("json please", json_mode=True)

    assert create.call_args.kwargs["response_format"] == {"type": "json_object"}


@patch("matzip.llm.groq_client.Groq")
def test_generate_none_content_is_empty(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.return_value = _mock_groq_response(None)

    assert GroqTextGenerator(ENABLED_CONFIG).generate("x") == ""


@patch("matzip.llm.groq_client.Groq")
def test_generate_propagates_api_error(mock_groq_cls):
    mock_groq_cls.return_value.chat.completions.create.side_effect = Exception("API timeout")

    with pytest.raises(Exception, match="API timeout"):
        GroqTextGenerator(ENABLED_CONFIG).generate("x")


@patch("matzip.llm.groq_client.Groq")
def test_generate_disabled(mock_groq_cls):
    with pytest.raises(LLMUnavailableError):
        GroqTextGenerator(DISABLED_CONFIG).generate("x")
    with pytest.raises(LLMUnavailableError):
        GroqTextGenerator(NO_KEY_CONFIG).generate("x")
    mock_groq_cls.assert_not_called()
