from types import SimpleNamespace

import pytest

from mistakebook.ai import errors as e
from mistakebook.ai.base import ProviderConfig
from mistakebook.ai.openai_client import OpenAIAnalyzer
from mistakebook.ai.templates import PromptTemplates
from mistakebook.ai.types import Subject

REPLY = (
    "<question_text>1+1=?</question_text>"
    "<answer_text>2</answer_text>"
    "<analysis>一加一等于二</analysis>"
    "<subject>数学</subject>"
    "<knowledge_points>有理数的运算</knowledge_points>"
    "<requires_image>false</requires_image>"
)


def _client(content=REPLY, *, response=None, error=None):
    calls = []

    def create(**kwargs):
        calls.append(kwargs)
        if error is not None:
            raise error
        if response is not None:
            return response
        message = SimpleNamespace(content=content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    client = SimpleNamespace(
        chat=SimpleNamespace(completions=SimpleNamespace(create=create))
    )
    return client, calls


def _analyzer(client, **cfg):
    config = ProviderConfig(provider="openai", model="gpt-test", api_key="k", **cfg)
    return OpenAIAnalyzer(config, client=client)


def test_missing_api_key_is_auth_error():
    client, _ = _client()
    with pytest.raises(e.LLMAuthError):
        OpenAIAnalyzer(ProviderConfig(provider="openai", model="m", api_key=""), client=client)


def test_default_model_when_blank():
    client, _ = _client()
    analyzer = OpenAIAnalyzer(
        ProviderConfig(provider="openai", model="", api_key="k"), client=client
    )
    assert analyzer.model == "gpt-4o"


def test_analyze_image_sends_prompt_and_data_url():
    client, calls = _client()
    result = _analyzer(client).analyze_image("QUJD", "image/png", "zh", 8, "数学")

    assert result.question_text == "1+1=?"
    assert result.subject is Subject.MATH
    assert result.knowledge_points == ["有理数的运算"]

    (call,) = calls
    assert call["model"] == "gpt-test"
    assert call["max_tokens"] == 4096
    system, user = call["messages"]
    assert system["role"] == "system"
    assert "数学标签" in system["content"]
    assert user["content"][0]["image_url"]["url"] == "data:image/png;base64,QUJD"


def test_analyze_image_uses_custom_template_and_hints():
    client, calls = _client()
    analyzer = _analyzer(
        client,
        provider_hints="HINT",
        templates=PromptTemplates(analyze="custom {{provider_hints}}"),
    )
    analyzer.analyze_image("QUJD")
    assert calls[0]["messages"][0]["content"] == "custom HINT"


def test_generate_similar_question():
    client, calls = _client()
    result = _analyzer(client).generate_similar_question(
        "1+1=?", ["加法", "整数"], "en", "hard"
    )

    assert result.answer_text == "2"
    system, user = calls[0]["messages"]
    assert "DIFFICULTY LEVEL: HARD" in system["content"]
    assert user["content"] == 'Original Question: "1+1=?"\nKnowledge Points: 加法, 整数'


def test_generate_similar_question_bad_difficulty_is_caller_error():
    client, calls = _client()
    with pytest.raises(ValueError):
        _analyzer(client).generate_similar_question("q", [], "zh", "impossible")
    assert calls == []


def test_reanswer_question_text_only():
    client, calls = _client("<answer_text>2</answer_text><analysis>因为</analysis>")
    result = _analyzer(client).reanswer_question("1+1=?", "zh", "数学")

    assert result.answer_text == "2"
    assert result.analysis == "因为"
    assert result.knowledge_points == []
    system, user = calls[0]["messages"]
    assert "本题学科：数学" in system["content"]
    assert isinstance(user["content"], str)


def test_reanswer_question_with_image():
    client, calls = _client("<answer_text>2</answer_text>")
    _analyzer(client).reanswer_question("q", image_base64="QUJD")
    content = calls[0]["messages"][1]["content"]
    assert content[1]["image_url"]["url"] == "data:image/jpeg;base64,QUJD"

    client, calls = _client("<answer_text>2</answer_text>")
    _analyzer(client).reanswer_question("q", image_base64="data:image/png;base64,QUJD")
    content = calls[0]["messages"][1]["content"]
    assert content[1]["image_url"]["url"] == "data:image/png;base64,QUJD"


def test_no_choices_is_response_error():
    client, _ = _client(response=SimpleNamespace(choices=[]))
    with pytest.raises(e.LLMResponseError):
        _analyzer(client).analyze_image("QUJD")


def test_empty_content_is_response_error():
    client, _ = _client(content=None)
    with pytest.raises(e.LLMResponseError):
        _analyzer(client).generate_similar_question("q", [])

    client, _ = _client(content="  \n")
    with pytest.raises(e.LLMResponseError):
        _analyzer(client).reanswer_question("q")


def test_missing_fields_reach_caller_unchanged():
    client, _ = _client("<answer_text>2</answer_text>")
    with pytest.raises(e.MissingFieldsError) as exc:
        _analyzer(client).analyze_image("QUJD")
    assert exc.value.missing == ["question_text", "analysis"]


@pytest.mark.parametrize(
    "message,expected",
    [
        ("Connection error.", e.LLMConnectionError),
        ("Error code: 401 - invalid api key", e.LLMAuthError),
        ("could not parse body", e.LLMResponseError),
        ("something odd", e.LLMUnknownError),
    ],
)
def test_sdk_errors_are_classified(message, expected):
    original = RuntimeError(message)
    client, _ = _client(error=original)
    with pytest.raises(expected) as exc:
        _analyzer(client).analyze_image("QUJD")
    assert exc.value.__cause__ is original
