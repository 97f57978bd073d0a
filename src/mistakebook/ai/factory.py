from __future__ import annotations

from typing import Optional

from mistakebook import config

from .base import ProviderConfig, QuestionAnalyzer
from .errors import LLMError
from .gemini_client import GeminiAnalyzer
from .openai_client import OpenAIAnalyzer
from .templates import PromptTemplates


def build_analyzer(
    *,
    provider: str,
    model: Optional[str] = None,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    templates: Optional[PromptTemplates] = None,
    provider_hints: str = "",
) -> QuestionAnalyzer:
    """Factory for provider adapters.

    Providers:
    - openai (also any OpenAI-compatible gateway via base_url)
    - gemini

    Missing api keys fall back to OPENAI_API_KEY / GOOGLE_API_KEY.
    """

    templates = templates or PromptTemplates()
    p = provider.lower().strip()
    if p == "openai":
        return OpenAIAnalyzer(
            ProviderConfig(
                provider="openai",
                model=model or "",
                api_key=api_key or config.OPENAI_API_KEY,
                base_url=base_url,
                provider_hints=provider_hints,
                templates=templates,
            )
        )
    if p == "gemini":
        return GeminiAnalyzer(
            ProviderConfig(
                provider="gemini",
                model=model or "",
                api_key=api_key or config.GOOGLE_API_KEY,
                base_url=base_url,
                provider_hints=provider_hints,
                templates=templates,
            )
        )

    raise LLMError(f"Unknown AI provider: {provider}")


def build_analyzer_from_env() -> QuestionAnalyzer:
    """Build the adapter selected by AI_PROVIDER, using the matching settings."""

    templates = PromptTemplates.from_env()
    p = config.AI_PROVIDER.lower().strip()
    if p == "openai":
        return build_analyzer(
            provider="openai",
            model=config.OPENAI_MODEL,
            base_url=config.OPENAI_BASE_URL or None,
            templates=templates,
        )
    return build_analyzer(
        provider=p,
        model=config.GEMINI_MODEL,
        base_url=config.GEMINI_BASE_URL or None,
        templates=templates,
    )
