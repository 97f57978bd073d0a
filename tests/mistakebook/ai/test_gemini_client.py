import base64
from types import SimpleNamespace

import pytest

from mistakebook.ai import errors as e
from mistakebook.ai.base import ProviderConfig
from mistakebook.ai.gemini_client import GeminiAnalyzer
from mistakebook.ai.templates import PromptTemplates
from mistakebook.ai.types import Subject

IMAGE_BYTES = b"\x89PNG\r\n\x1a\nfake"
IMAGE_B64 = base64.b64encode(IMAGE_BYTES).decode("ascii")

REPLY = (
    "<question_text>A block floats.</question_text>"
    "<answer_text>Buoyancy equals weight.</answer_text>"
    "<analysis>由浮沉条件可知。</analysis>"
    "<subject>物理</subject>"
    "<knowledge_points>浮力，压强</knowledge_points>"
    "<requires_image>True</requires_image>"
)


def _model(text=REPLY, *, error=None):
    calls = []

    def generate_content(parts):
        calls.append(parts)
        if error is not None:
            raise error
        return SimpleNamespace(text=text)

    return SimpleNamespace(generate_content=generate_content), calls


def _analyzer(model, **cfg):
    config = ProviderConfig(provider="gemini", model="gemini-test", api_key="k", **cfg)
    return GeminiAnalyzer(config, model=model)


def test_missing_api_key_is_auth_error():
    model, _ = _model()
    with pytest.raises(e.LLMAuthError):
        GeminiAnalyzer(ProviderConfig(provider="gemini", model="m", api_key=""), model=model)


def test_default_model_when_blank():
    model, _ = _model()
    analyzer = GeminiAnalyzer(
        ProviderConfig(provider="gemini", model="", api_key="k"), model=model
    )
    assert analyzer.model == "gemini-1.5-flash"


def test_analyze_image_sends_prompt_and_inline_image():
    model, calls = _model()
    result = _analyzer(model).analyze_image(IMAGE_B64, "image/png", "zh", None, "物理")

    assert result.subject is Subject.PHYSICS
    assert result.knowledge_points == ["浮力", "压强"]
    assert result.requires_image is True

    (parts,) = calls
    prompt, image = parts
    assert "物理标签 (Physics Tags)" in prompt
    assert image == {"mime_type": "image/png", "data": IMAGE_BYTES}


def test_analyze_image_bad_base64_is_validation_error():
    model, calls = _model()
    with pytest.raises(e.LLMValidationError):
        _analyzer(model).analyze_image("not base64!!")
    assert calls == []


def test_generate_similar_question_text_only():
    model, calls = _model()
    analyzer = _analyzer(model, templates=PromptTemplates(similar="S {{difficulty_level}}"))
    result = analyzer.generate_similar_question("q", ["浮力"], "zh", "easy")

    assert result.question_text == "A block floats."
    assert calls == [["S EASY"]]


def test_reanswer_question_strips_data_url_prefix():
    model, calls = _model("<analysis>only</analysis>")
    result = _analyzer(model).reanswer_question(
        "q", "zh", None, f"data:image/png;base64,{IMAGE_B64}"
    )

    assert result.answer_text == ""
    assert result.analysis == "only"
    prompt, image = calls[0]
    assert "请根据题目内容判断学科" in prompt
    assert image == {"mime_type": "image/jpeg", "data": IMAGE_BYTES}


def test_reanswer_question_without_image():
    model, calls = _model("<answer_text>x</answer_text>")
    _analyzer(model).reanswer_question("q")
    assert len(calls[0]) == 1


def test_empty_text_is_response_error():
    model, _ = _model(text="")
    with pytest.raises(e.LLMResponseError):
        _analyzer(model).generate_similar_question("q", [])


def test_missing_fields_reach_caller_unchanged():
    model, _ = _model("<question_text>q</question_text>")
    with pytest.raises(e.MissingFieldsError) as exc:
        _analyzer(model).generate_similar_question("q", [])
    assert exc.value.missing == ["answer_text", "analysis"]


@pytest.mark.parametrize(
    "message,expected",
    [
        ("TypeError: fetch failed", e.LLMConnectionError),
        ("API key not valid. Please pass a valid API key.", e.LLMAuthError),
        ("invalid json in payload", e.LLMResponseError),
        ("429 Resource has been exhausted", e.LLMUnknownError),
    ],
)
def test_sdk_errors_are_classified(message, expected):
    original = RuntimeError(message)
    model, _ = _model(error=original)
    with pytest.raises(expected) as exc:
        _analyzer(model).reanswer_question("q")
    assert exc.value.__cause__ is original


def test_blocked_reply_is_response_error():
    from google.generativeai import protos
    from google.generativeai.types import GenerateContentResponse

    blocked = GenerateContentResponse.from_response(
        protos.GenerateContentResponse(
            candidates=[
                protos.Candidate(finish_reason=protos.Candidate.FinishReason.SAFETY)
            ]
        )
    )
    model = SimpleNamespace(generate_content=lambda parts: blocked)

    with pytest.raises(e.LLMResponseError) as exc:
        _analyzer(model).generate_similar_question("q", [])
    assert isinstance(exc.value.__cause__, ValueError)


# =====================================================
# SDK wiring
# =====================================================


class _ServiceClient:
    def __init__(self, client_options=None, **kwargs):
        self.client_options = client_options


def test_each_analyzer_gets_its_own_service_client(monkeypatch):
    import google.generativeai as genai

    monkeypatch.setattr(
        "google.ai.generativelanguage.GenerativeServiceClient", _ServiceClient
    )

    def fail_configure(**kwargs):
        raise AssertionError("global genai.configure must not be used")

    monkeypatch.setattr(genai, "configure", fail_configure)

    a = GeminiAnalyzer(ProviderConfig(provider="gemini", model="m", api_key="KEY_A"))
    b = GeminiAnalyzer(
        ProviderConfig(
            provider="gemini",
            model="m",
            api_key="KEY_B",
            base_url="proxy.example:443",
        )
    )

    assert a._model._client is not b._model._client
    assert a._model._client.client_options == {"api_key": "KEY_A"}
    assert b._model._client.client_options == {
        "api_key": "KEY_B",
        "api_endpoint": "proxy.example:443",
    }
    assert a._model.model_name == "models/m"
