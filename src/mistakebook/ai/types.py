from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal

Language = Literal["zh", "en"]
Grade = Literal[7, 8, 9, 10, 11, 12]
Difficulty = Literal["easy", "medium", "hard", "harder"]

DIFFICULTY_LEVELS: tuple[str, ...] = ("easy", "medium", "hard", "harder")


class Subject(str, Enum):
    """The closed set of subjects a question can be filed under."""

    MATH = "数学"
    PHYSICS = "物理"
    CHEMISTRY = "化学"
    BIOLOGY = "生物"
    ENGLISH = "英语"
    CHINESE = "语文"
    HISTORY = "历史"
    GEOGRAPHY = "地理"
    POLITICS = "政治"
    OTHER = "其他"

    def __str__(self) -> str:
        return self.value


SUBJECT_NAMES: tuple[str, ...] = tuple(s.value for s in Subject)


@dataclass(frozen=True)
class ParsedQuestion:
    """Structured tutoring content recovered from one model reply."""

    question_text: str
    answer_text: str
    analysis: str
    subject: Subject = Subject.OTHER
    knowledge_points: List[str] = field(default_factory=list)
    requires_image: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "questionText": self.question_text,
            "answerText": self.answer_text,
            "analysis": self.analysis,
            "subject": Subject(self.subject).value,
            "knowledgePoints": list(self.knowledge_points),
            "requiresImage": self.requires_image,
        }


@dataclass(frozen=True)
class ReanswerResult:
    """Answer/analysis regenerated for a question text the caller already has."""

    answer_text: str = ""
    analysis: str = ""
    knowledge_points: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "answerText": self.answer_text,
            "analysis": self.analysis,
            "knowledgePoints": list(self.knowledge_points),
        }
