from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from jsonschema import Draft202012Validator

from .types import SUBJECT_NAMES

MAX_KNOWLEDGE_POINTS = 5

PARSED_QUESTION_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": [
        "questionText",
        "answerText",
        "analysis",
        "subject",
        "knowledgePoints",
        "requiresImage",
    ],
    "properties": {
        "questionText": {"type": "string", "minLength": 1},
        "answerText": {"type": "string", "minLength": 1},
        "analysis": {"type": "string", "minLength": 1},
        "subject": {"type": "string", "enum": list(SUBJECT_NAMES)},
        "knowledgePoints": {
            "type": "array",
            "items": {"type": "string", "minLength": 1},
            "maxItems": MAX_KNOWLEDGE_POINTS,
        },
        "requiresImage": {"type": "boolean"},
    },
}

_validator = Draft202012Validator(PARSED_QUESTION_SCHEMA)


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of the advisory schema check.

    ``data`` is always the record that was checked, valid or not.
    """

    ok: bool
    data: Dict[str, Any]
    warnings: List[str] = field(default_factory=list)


def validate_parsed_question(data: Dict[str, Any]) -> ValidationOutcome:
    """Check ``data`` against PARSED_QUESTION_SCHEMA without raising."""

    warnings = [
        f"{e.json_path}: {e.message}"
        for e in sorted(_validator.iter_errors(data), key=lambda e: e.json_path)
    ]
    return ValidationOutcome(ok=not warnings, data=data, warnings=warnings)
