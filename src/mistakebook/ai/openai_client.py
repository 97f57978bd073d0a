from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from mistakebook import logger as logger_mod

from ._media import to_data_url
from .base import ProviderConfig
from .errors import LLMAuthError, LLMError, LLMResponseError, raise_classified
from .parsing import parse_question_response, parse_reanswer_response
from .prompts import (
    PromptOptions,
    build_analyze_prompt,
    build_reanswer_prompt,
    build_similar_question_prompt,
)
from .types import Difficulty, Grade, Language, ParsedQuestion, ReanswerResult

log = logger_mod.get_logger()

DEFAULT_MODEL = "gpt-4o"
SOURCE = "OpenAI"


class OpenAIAnalyzer:
    """Question analysis backed by the OpenAI chat completions API.

    ``config.base_url`` lets this talk to any OpenAI-compatible gateway. The
    prompt goes in the system message; images travel as data URLs in the user
    message.
    """

    def __init__(self, config: ProviderConfig, client: Any = None):
        self._cfg = config
        self._model = config.model or DEFAULT_MODEL
        if not config.api_key:
            raise LLMAuthError("OPENAI_API_KEY is required for the OpenAI provider")

        if client is None:
            try:
                from openai import OpenAI  # type: ignore
            except Exception as e:  # noqa: BLE001
                raise LLMError(
                    "openai SDK not installed. Add dependency 'openai'."
                ) from e
            client = OpenAI(api_key=config.api_key, base_url=config.base_url or None)

        self._client = client

    @property
    def model(self) -> str:
        return self._model

    def _options(self, custom_template: Optional[str]) -> PromptOptions:
        return PromptOptions(
            provider_hints=self._cfg.provider_hints,
            custom_template=custom_template,
        )

    def _complete(self, messages: List[Dict[str, Any]]) -> str:
        response = self._client.chat.completions.create(
            model=self._model,
            messages=messages,
            max_tokens=self._cfg.max_tokens,
        )
        log.debug(f"[{SOURCE}] 📦 Full API response: {response}")

        choices = getattr(response, "choices", None) if response else None
        if not choices:
            log.error(f"[{SOURCE}] ❌ Invalid API response - no choices")
            raise LLMResponseError("API returned empty or invalid response")

        text = choices[0].message.content or ""
        log.debug(f"[{SOURCE}] 🤖 AI raw response:\n{text}")
        if not text.strip():
            raise LLMResponseError("Empty response from AI")
        return text

    def analyze_image(
        self,
        image_base64: str,
        mime_type: str = "image/jpeg",
        language: Language = "zh",
        grade: Optional[Grade] = None,
        subject: Optional[str] = None,
    ) -> ParsedQuestion:
        prompt = build_analyze_prompt(
            language, grade, subject, self._options(self._cfg.templates.analyze)
        )
        log.info(
            f"[{SOURCE}] 🔍 Image analysis request: model={self._model} "
            f"mime={mime_type} size={len(image_base64)} language={language} "
            f"grade={grade or 'all'} subject={subject or 'auto'}"
        )
        log.debug(f"[{SOURCE}] 📝 Full system prompt:\n{prompt}")

        messages = [
            {"role": "system", "content": prompt},
            {
                "role": "user",
                "content": [
                    {
                        "type": "image_url",
                        "image_url": {"url": to_data_url(image_base64, mime_type)},
                    }
                ],
            },
        ]

        try:
            result = parse_question_response(self._complete(messages), source=SOURCE)
        except Exception as e:
            log.error(f"[{SOURCE}] ❌ Error during AI analysis: {e!r}")
            raise_classified(e)

        log.info(f"[{SOURCE}] ✅ Parsed result: {_dump(result.to_dict())}")
        return result

    def generate_similar_question(
        self,
        original_question: str,
        knowledge_points: Sequence[str],
        language: Language = "zh",
        difficulty: Difficulty = "medium",
    ) -> ParsedQuestion:
        prompt = build_similar_question_prompt(
            language,
            original_question,
            knowledge_points,
            difficulty,
            self._options(self._cfg.templates.similar),
        )
        user_prompt = (
            f'Original Question: "{original_question}"\n'
            f"Knowledge Points: {', '.join(knowledge_points)}"
        )
        log.info(
            f"[{SOURCE}] 🎯 Similar question request: model={self._model} "
            f"difficulty={difficulty} language={language} "
            f"knowledge_points={list(knowledge_points)}"
        )
        log.debug(f"[{SOURCE}] 📝 Full system prompt:\n{prompt}")

        messages = [
            {"role": "system", "content": prompt},
            {"role": "user", "content": user_prompt},
        ]

        try:
            result = parse_question_response(self._complete(messages), source=SOURCE)
        except Exception as e:
            log.error(f"[{SOURCE}] ❌ Error during question generation: {e!r}")
            raise_classified(e)

        log.info(f"[{SOURCE}] ✅ Parsed result: {_dump(result.to_dict())}")
        return result

    def reanswer_question(
        self,
        question_text: str,
        language: Language = "zh",
        subject: Optional[str] = None,
        image_base64: Optional[str] = None,
    ) -> ReanswerResult:
        prompt = build_reanswer_prompt(
            language, question_text, subject, self._options(self._cfg.templates.reanswer)
        )
        log.info(
            f"[{SOURCE}] 🔄 Reanswer request: model={self._model} "
            f"question_length={len(question_text)} subject={subject or 'auto'} "
            f"has_image={bool(image_base64)}"
        )
        log.debug(f"[{SOURCE}] 📝 Full system prompt:\n{prompt}")

        user_content: Any = "请根据上述题目提供答案和解析。"
        if image_base64:
            user_content = [
                {"type": "text", "text": "请结合图片和题目描述提供答案和解析。"},
                {"type": "image_url", "image_url": {"url": to_data_url(image_base64)}},
            ]

        messages = [
            {"role": "system", "content": prompt},
            {"role": "user", "content": user_content},
        ]

        try:
            result = parse_reanswer_response(self._complete(messages), source=SOURCE)
        except Exception as e:
            log.error(f"[{SOURCE}] ❌ Error during reanswer: {e!r}")
            raise_classified(e)

        log.info(f"[{SOURCE}] ✅ Reanswer result: {_dump(result.to_dict())}")
        return result


def _dump(data: Dict[str, Any]) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2)
