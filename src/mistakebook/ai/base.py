from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence

from mistakebook import config

from .templates import PromptTemplates
from .types import Difficulty, Grade, Language, ParsedQuestion, ReanswerResult


@dataclass(frozen=True)
class ProviderConfig:
    provider: str
    model: str
    api_key: str
    base_url: Optional[str] = None
    max_tokens: int = config.DEFAULT_MAX_TOKENS
    provider_hints: str = ""
    templates: PromptTemplates = field(default_factory=PromptTemplates)


class QuestionAnalyzer(Protocol):
    """What every provider adapter offers. Adapters match it structurally."""

    def analyze_image(
        self,
        image_base64: str,
        mime_type: str = "image/jpeg",
        language: Language = "zh",
        grade: Optional[Grade] = None,
        subject: Optional[str] = None,
    ) -> ParsedQuestion:
        raise NotImplementedError

    def generate_similar_question(
        self,
        original_question: str,
        knowledge_points: Sequence[str],
        language: Language = "zh",
        difficulty: Difficulty = "medium",
    ) -> ParsedQuestion:
        raise NotImplementedError

    def reanswer_question(
        self,
        question_text: str,
        language: Language = "zh",
        subject: Optional[str] = None,
        image_base64: Optional[str] = None,
    ) -> ReanswerResult:
        raise NotImplementedError
