"""Swipe question catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from models import Question


@dataclass(frozen=True)
class QuestionTemplate:
    text: str
    left_choice: str
    right_choice: str
    skip_choice: str
    left_tags: Tuple[str, ...] = field(default_factory=tuple)
    right_tags: Tuple[str, ...] = field(default_factory=tuple)


STARTER_QUESTIONS: Tuple[QuestionTemplate, ...] = (
    QuestionTemplate("A proper meal or a snack today?", "Meal", "Snack", "Either", ("meal",), ("snack",)),
    QuestionTemplate("Light or rich flavours?", "Light", "Rich", "Either", ("light",), ("heavy",)),
    QuestionTemplate("Preferred price range?", "Budget", "Upscale", "No preference", ("budget",), ("high",)),
)

DYNAMIC_QUESTION_TEMPLATES: Tuple[QuestionTemplate, ...] = (
    QuestionTemplate("Which cuisine sounds good?", "Japanese", "Chinese", "Either", ("japanese",), ("chinese",)),
    QuestionTemplate("Portion size or texture?", "Portion", "Texture", "Either", ("heavy",), ("light",)),
    QuestionTemplate("Somewhere close or worth a trip?", "Close", "Further", "Either", ("near",), ("far",)),
    QuestionTemplate("What kind of atmosphere?", "Casual", "Date night", "Either", ("casual",), ("date",)),
    QuestionTemplate("Dessert or a drink?", "Dessert", "Drink", "Either", ("sweet",), ("cafe",)),
    QuestionTemplate("Eating with a group or on your own?", "Group", "Solo", "Either", ("gathering",), ("solo",)),
    QuestionTemplate("Quiet or lively?", "Quiet", "Lively", "Either", ("quiet",), ("lively",)),
)

# flat-tag demo catalog
QUESTIONS: Tuple[Question, ...] = (
    Question(1, "Rice or noodles today?", "Rice", "Noodles", "Neither", ["rice"], ["noodle"]),
    Question(2, "A proper meal or a snack?", "Meal", "Snack", "Neither", ["meal"], ["snack"]),
    Question(3, "Light or rich flavours?", "Light", "Rich", "Neither", ["light"], ["heavy"]),
    Question(4, "Somewhere close or further away?", "Close", "Further", "Neither", ["near"], ["far"]),
)

QUESTION_LENGTH_COUNTS = {"short": 3, "standard": 5, "long": 7}
HIGH_CONFIDENCE = 0.8


def with_ids(templates: Iterable[QuestionTemplate], start: int = 1) -> List[Question]:
    return [
        Question(
            id=idx,
            text=t.text,
            left_choice=t.left_choice,
            right_choice=t.right_choice,
            skip_choice=t.skip_choice,
            left_tags=list(t.left_tags),
            right_tags=list(t.right_tags),
        )
        for idx, t in enumerate(templates, start=start)
    ]


def question_length_to_dynamic_count(question_length: str) -> int:
    return QUESTION_LENGTH_COUNTS.get(question_length, QUESTION_LENGTH_COUNTS["standard"])


def build_starter_questions() -> List[Question]:
    return with_ids(STARTER_QUESTIONS)


def build_dynamic_questions(confidence: float, question_length: Optional[str] = None) -> List[Question]:
    """Pick follow-up questions; confident profiles need fewer of them.

    An explicit ``question_length`` setting overrides the confidence rule.
    Ids continue after the starter questions.
    """
    if question_length:
        count = question_length_to_dynamic_count(question_length)
    else:
        count = 3 if confidence >= HIGH_CONFIDENCE else 5
    base = DYNAMIC_QUESTION_TEMPLATES[:count]
    return with_ids(base, start=len(STARTER_QUESTIONS) + 1)
