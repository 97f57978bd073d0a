"""AI tutoring content for exam questions (OpenAI / Gemini).

Design goals:
- Keep provider-specific SDKs isolated behind one QuestionAnalyzer surface.
- Ask models for plain-text fields wrapped in <tag>...</tag> delimiters.
- Parse replies into typed records; only the required fields are a hard gate,
  schema checks past that point are advisory.
"""

from .errors import (
    LLMAuthError,
    LLMConnectionError,
    LLMError,
    LLMResponseError,
    LLMUnknownError,
    LLMValidationError,
    MissingFieldsError,
)
from .factory import build_analyzer, build_analyzer_from_env
from .parsing import parse_question_response, parse_reanswer_response
from .prompts import (
    PromptOptions,
    build_analyze_prompt,
    build_reanswer_prompt,
    build_similar_question_prompt,
)
from .templates import PromptTemplates, render
from .types import ParsedQuestion, ReanswerResult, Subject

__all__ = [
    "LLMAuthError",
    "LLMConnectionError",
    "LLMError",
    "LLMResponseError",
    "LLMUnknownError",
    "LLMValidationError",
    "MissingFieldsError",
    "ParsedQuestion",
    "PromptOptions",
    "PromptTemplates",
    "ReanswerResult",
    "Subject",
    "build_analyze_prompt",
    "build_analyzer",
    "build_analyzer_from_env",
    "build_reanswer_prompt",
    "build_similar_question_prompt",
    "parse_question_response",
    "parse_reanswer_response",
    "render",
]
