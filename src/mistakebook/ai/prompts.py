from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .knowledge_tags import (
    PREVIEW_TAGS,
    SUBJECT_TAGS,
    get_math_tags_for_grade,
    quote_tags,
)
from .templates import (
    DEFAULT_ANALYZE_TEMPLATE,
    DEFAULT_REANSWER_TEMPLATE,
    DEFAULT_SIMILAR_TEMPLATE,
    render,
)
from .types import DIFFICULTY_LEVELS, Difficulty, Grade, Language, Subject


@dataclass(frozen=True)
class PromptOptions:
    """Per-call prompt customisation.

    - provider_hints: appended verbatim where the template has ``{{provider_hints}}``
    - custom_template: replaces the default template entirely
    """

    provider_hints: str = ""
    custom_template: Optional[str] = None


_SUBJECT_LABELS = {
    Subject.PHYSICS: "物理标签 (Physics Tags)",
    Subject.CHEMISTRY: "化学标签 (Chemistry Tags)",
    Subject.BIOLOGY: "生物标签 (Biology Tags)",
    Subject.ENGLISH: "英语标签 (English Tags)",
    Subject.CHINESE: "语文标签 (Chinese Tags)",
    Subject.HISTORY: "历史标签 (History Tags)",
    Subject.GEOGRAPHY: "地理标签 (Geography Tags)",
    Subject.POLITICS: "政治标签 (Politics Tags)",
}

DIFFICULTY_INSTRUCTIONS = {
    "easy": "Make the new question EASIER than the original. Use simpler numbers and more direct concepts.",
    "medium": "Keep the difficulty SIMILAR to the original question.",
    "hard": "Make the new question HARDER than the original. Combine multiple concepts or use more complex numbers.",
    "harder": "Make the new question MUCH HARDER (Challenge Level). Require deeper understanding and multi-step reasoning.",
}


def _resolve_subject(subject: Optional[str]) -> Optional[Subject]:
    if subject is None:
        return None
    try:
        return Subject(subject)
    except ValueError:
        return None


def _pick_template(options: Optional[PromptOptions], default: str) -> str:
    if options is not None and options.custom_template:
        return options.custom_template
    return default


def _hints(options: Optional[PromptOptions]) -> str:
    return options.provider_hints if options is not None else ""


def analyze_language_instruction(language: Language) -> str:
    if language == "zh":
        return (
            "IMPORTANT: The 'analysis' field MUST always be written in Simplified Chinese, "
            "whatever language the question is in. For 'questionText' and 'answerText', "
            "use the SAME LANGUAGE AS THE ORIGINAL QUESTION: a Chinese question stays in "
            "Chinese, an English question stays in English."
        )
    return "Please ensure all text fields are in English."


def similar_language_instruction(language: Language) -> str:
    if language == "zh":
        return (
            "IMPORTANT: Follow the language of the 'Original Question'. If it is in English, "
            "the new 'questionText' and 'answerText' MUST be in English while the 'analysis' "
            "MUST be in Simplified Chinese. If it is in Chinese, everything MUST be in "
            "Simplified Chinese."
        )
    return "Please ensure the generated question and all text fields are in English."


def reanswer_language_instruction(language: Language) -> str:
    if language == "zh":
        return "IMPORTANT: 解析必须使用简体中文。如果题目是英文，答案保持英文，但解析用中文。"
    return "Please ensure all text fields are in English."


def build_tags_section(grade: Optional[Grade], subject: Optional[str]) -> str:
    """Knowledge tag listing for the analyze prompt.

    A known subject gets its own catalogue only; an unknown one gets a preview
    of math, physics, chemistry and English tags so the model can choose.
    """
    resolved = _resolve_subject(subject)
    math_tags = quote_tags(get_math_tags_for_grade(grade))

    if resolved is Subject.MATH:
        return (
            "**数学标签 (Math Tags):**\n"
            "使用人教版课程大纲中的**精确标签名称**，可选标签如下：\n"
            f"{math_tags}\n\n"
            "**重要提示**：\n"
            "- 必须从上述列表中选择精确匹配的标签\n"
            "- 每题最多 5 个标签"
        )

    if resolved in SUBJECT_TAGS:
        return f"**{_SUBJECT_LABELS[resolved]}:**\n{quote_tags(list(SUBJECT_TAGS[resolved]))}"

    sections: List[str] = [f"**数学标签 (Math Tags):**\n{math_tags}"]
    for preview_subject, tags in PREVIEW_TAGS.items():
        sections.append(f"**{_SUBJECT_LABELS[preview_subject]}:**\n{quote_tags(list(tags))}")
    return "\n\n".join(sections)


def build_analyze_prompt(
    language: Language = "zh",
    grade: Optional[Grade] = None,
    subject: Optional[str] = None,
    options: Optional[PromptOptions] = None,
) -> str:
    template = _pick_template(options, DEFAULT_ANALYZE_TEMPLATE)
    return render(
        template,
        {
            "language_instruction": analyze_language_instruction(language),
            "knowledge_points_list": build_tags_section(grade, subject),
            "provider_hints": _hints(options),
        },
    ).strip()


def escape_question(text: str) -> str:
    """Escape quotes and newlines so the text fits inside ``"..."`` in a template."""
    return text.replace('"', '\\"').replace("\n", "\\n")


def build_similar_question_prompt(
    language: Language,
    original_question: str,
    knowledge_points: Sequence[str],
    difficulty: Difficulty = "medium",
    options: Optional[PromptOptions] = None,
) -> str:
    if difficulty not in DIFFICULTY_LEVELS:
        raise ValueError(
            f"Unsupported difficulty: {difficulty!r} (expected one of {DIFFICULTY_LEVELS})"
        )

    template = _pick_template(options, DEFAULT_SIMILAR_TEMPLATE)
    return render(
        template,
        {
            "difficulty_level": difficulty.upper(),
            "difficulty_instruction": DIFFICULTY_INSTRUCTIONS[difficulty],
            "language_instruction": similar_language_instruction(language),
            "original_question": escape_question(original_question),
            "knowledge_points": ", ".join(knowledge_points),
            "provider_hints": _hints(options),
        },
    ).strip()


def build_reanswer_prompt(
    language: Language,
    question_text: str,
    subject: Optional[str] = None,
    options: Optional[PromptOptions] = None,
) -> str:
    # The caller already owns the question text, so the subject is only a hint.
    subject_hint = f"本题学科：{subject}" if subject else "请根据题目内容判断学科。"

    template = _pick_template(options, DEFAULT_REANSWER_TEMPLATE)
    return render(
        template,
        {
            "language_instruction": reanswer_language_instruction(language),
            "question_text": question_text,
            "subject_hint": subject_hint,
            "provider_hints": _hints(options),
        },
    ).strip()
