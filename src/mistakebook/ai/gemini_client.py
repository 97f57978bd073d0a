from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from mistakebook import logger as logger_mod

from ._media import decode_image
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

DEFAULT_MODEL = "gemini-1.5-flash"
SOURCE = "Gemini"


class GeminiAnalyzer:
    """Question analysis backed by Google Gemini (google-generativeai SDK).

    The prompt and any image are sent together as parts of a single user turn.
    """

    def __init__(self, config: ProviderConfig, model: Any = None):
        self._cfg = config
        self._model_name = config.model or DEFAULT_MODEL
        if not config.api_key:
            raise LLMAuthError("GOOGLE_API_KEY is required for the Gemini provider")

        if model is None:
            try:
                import google.generativeai as genai  # type: ignore
                from google.ai import generativelanguage as glm  # type: ignore
            except Exception as e:  # noqa: BLE001
                raise LLMError(
                    "google-generativeai SDK not installed. Add dependency 'google-generativeai'."
                ) from e

            model = genai.GenerativeModel(
                model_name=self._model_name,
                generation_config={"max_output_tokens": config.max_tokens},
            )
            # genai.configure() is process-global; each analyzer keeps its own
            # key and endpoint. GenerativeModel has no public client argument.
            model._client = glm.GenerativeServiceClient(
                client_options=_client_options(config)
            )

        self._model = model

    @property
    def model(self) -> str:
        return self._model_name

    def _options(self, custom_template: Optional[str]) -> PromptOptions:
        return PromptOptions(
            provider_hints=self._cfg.provider_hints,
            custom_template=custom_template,
        )

    def _generate(self, parts: List[Any]) -> str:
        response = self._model.generate_content(parts)
        try:
            text = response.text or ""
        except ValueError as e:
            # blocked replies and candidates without parts
            log.error(f"[{SOURCE}] ❌ No usable text in response: {e}")
            raise LLMResponseError("Empty response from AI") from e
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
            f"[{SOURCE}] 🔍 Image analysis request: model={self._model_name} "
            f"mime={mime_type} size={len(image_base64)} language={language} "
            f"grade={grade or 'all'} subject={subject or 'auto'}"
        )
        log.debug(f"[{SOURCE}] 📝 Full prompt:\n{prompt}")

        try:
            parts = [prompt, {"mime_type": mime_type, "data": decode_image(image_base64)}]
            result = parse_question_response(self._generate(parts), source=SOURCE)
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
        log.info(
            f"[{SOURCE}] 🎯 Similar question request: model={self._model_name} "
            f"difficulty={difficulty} language={language} "
            f"knowledge_points={list(knowledge_points)}"
        )
        log.debug(f"[{SOURCE}] 📝 Full prompt:\n{prompt}")

        try:
            result = parse_question_response(self._generate([prompt]), source=SOURCE)
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
            f"[{SOURCE}] 🔄 Reanswer request: model={self._model_name} "
            f"question_length={len(question_text)} subject={subject or 'auto'} "
            f"has_image={bool(image_base64)}"
        )
        log.debug(f"[{SOURCE}] 📝 Full prompt:\n{prompt}")

        try:
            parts: List[Any] = [prompt]
            if image_base64:
                parts.append({"mime_type": "image/jpeg", "data": decode_image(image_base64)})
            result = parse_reanswer_response(self._generate(parts), source=SOURCE)
        except Exception as e:
            log.error(f"[{SOURCE}] ❌ Error during reanswer: {e!r}")
            raise_classified(e)

        log.info(f"[{SOURCE}] ✅ Reanswer result: {_dump(result.to_dict())}")
        return result


def _client_options(config: ProviderConfig) -> Dict[str, Any]:
    options: Dict[str, Any] = {"api_key": config.api_key}
    if config.base_url:
        options["api_endpoint"] = config.base_url
    return options


def _dump(data: Dict[str, Any]) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2)
