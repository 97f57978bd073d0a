"""Turn a raw model reply into a ParsedQuestion / ReanswerResult.

The reply is expected to carry plain-text fields between ``<tag>...</tag>``
delimiters (see the templates in :mod:`mistakebook.ai.templates`).
"""

from __future__ import annotations

import re
from typing import List, Optional

from mistakebook import logger as logger_mod

from .errors import MissingFieldsError
from .extract import extract_tag
from .schema import validate_parsed_question
from .types import SUBJECT_NAMES, ParsedQuestion, ReanswerResult, Subject

log = logger_mod.get_logger()

QUESTION_TAGS = (
    "question_text",
    "answer_text",
    "analysis",
    "subject",
    "knowledge_points",
    "requires_image",
)
REQUIRED_TAGS = ("question_text", "answer_text", "analysis")
REANSWER_TAGS = ("answer_text", "analysis", "knowledge_points")

_KNOWLEDGE_POINT_SEPARATORS = re.compile(r"[,，\n]")


def normalize_subject(raw: Optional[str]) -> Subject:
    if raw is not None and raw in SUBJECT_NAMES:
        return Subject(raw)
    return Subject.OTHER


def split_knowledge_points(raw: Optional[str]) -> List[str]:
    """Split on ASCII/full-width commas or newlines, dropping empty pieces."""
    if not raw:
        return []
    pieces = (p.strip() for p in _KNOWLEDGE_POINT_SEPARATORS.split(raw))
    return [p for p in pieces if p]


def parse_requires_image(raw: Optional[str]) -> bool:
    return raw is not None and raw.strip().lower() == "true"


def parse_question_response(text: str, source: str = "ai") -> ParsedQuestion:
    """Parse an analyze/similar reply.

    Raises MissingFieldsError when question_text, answer_text or analysis is
    absent or empty. Schema problems past that point are only logged: the
    best-effort record is returned either way.
    """

    log.debug(f"[{source}] Parsing AI response, length: {len(text)}")

    fields = {tag: extract_tag(text, tag) for tag in QUESTION_TAGS}

    missing = [tag for tag in REQUIRED_TAGS if not fields[tag]]
    if missing:
        log.error(f"[{source}] ❌ Missing required tags: {', '.join(missing)}")
        log.debug(f"[{source}] Raw text sample: {text[:500]}")
        raise MissingFieldsError(missing)

    result = ParsedQuestion(
        question_text=fields["question_text"],
        answer_text=fields["answer_text"],
        analysis=fields["analysis"],
        subject=normalize_subject(fields["subject"]),
        knowledge_points=split_knowledge_points(fields["knowledge_points"]),
        requires_image=parse_requires_image(fields["requires_image"]),
    )

    outcome = validate_parsed_question(result.to_dict())
    if outcome.ok:
        log.debug(f"[{source}] ✅ Validated successfully via tags")
    else:
        log.warning(
            f"[{source}] ⚠️ Schema validation warning: {'; '.join(outcome.warnings)}"
        )
    return result


def parse_reanswer_response(text: str, source: str = "ai") -> ReanswerResult:
    """Parse a reanswer reply. Missing tags come back as empty values."""

    fields = {tag: extract_tag(text, tag) for tag in REANSWER_TAGS}

    log.debug(f"[{source}] ✅ Reanswer parsed")
    return ReanswerResult(
        answer_text=fields["answer_text"] or "",
        analysis=fields["analysis"] or "",
        knowledge_points=split_knowledge_points(fields["knowledge_points"]),
    )
