"""Category Scorer: weighted questionnaire answers -> normalized 1..5 score."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence
import logging

from .catalog import BIAS, CAPACITY, MAX_OPTION_VALUE, Question
from .errors import DegenerateCatalog, MissingAnswer

_log = logging.getLogger(__name__)

AnswerSet = Mapping[str, Optional[int]]


@dataclass(frozen=True)
class CategoryScore:
    """
    Score for one question category.

    raw_score:        sum of answer x weight
    max_possible:     sum of 5 x weight (every answer at the top option)
    normalized_score: raw_score / max_possible x 5, rounded to 2 decimals
    """
    raw_score: float
    max_possible: float
    normalized_score: float
    category: str = ""

    @property
    def interpretation(self) -> str:
        s = self.normalized_score
        if self.category == BIAS:
            # higher = stronger bias
            if s <= 2.0:
                return "low"
            elif s <= 3.5:
                return "moderate"
            return "high"
        if s <= 2.0:
            return "very_low"
        elif s <= 3.0:
            return "low_to_moderate"
        elif s <= 4.0:
            return "moderate_to_good" if self.category == CAPACITY else "moderate_to_high"
        return "high"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "raw_score": self.raw_score,
            "max_possible": self.max_possible,
            "normalized_score": self.normalized_score,
            "interpretation": self.interpretation,
        }


def require_answers(questions: Sequence[Question], answers: AnswerSet) -> None:
    """Raise MissingAnswer for the first question (in catalog order) without an answer."""
    for q in questions:
        if answers.get(q.id) is None:
            raise MissingAnswer(q.id)


def score_category(questions: Sequence[Question], answers: AnswerSet) -> CategoryScore:
    """
    Reduce one category's answers to a CategoryScore.

    Weighting lets specific questions (e.g. emergency-fund adequacy) dominate
    a category without distorting its 1-5 scale. Answer values are taken as
    given; the catalog is the source of truth for valid option values.

    Raises:
        MissingAnswer: a question in `questions` has no entry in `answers`
        DegenerateCatalog: the total weight is zero
    """
    require_answers(questions, answers)
    category = questions[0].category if questions else ""

    raw = 0.0
    max_possible = 0.0
    for q in questions:
        raw += float(answers[q.id]) * float(q.weight)
        max_possible += float(MAX_OPTION_VALUE) * float(q.weight)

    if max_possible <= 0:
        raise DegenerateCatalog(category or "unknown")

    normalized = round(raw / max_possible * MAX_OPTION_VALUE, 2)
    _log.debug(f"{category} score: raw={raw:g} max={max_possible:g} normalized={normalized:.2f}")
    return CategoryScore(
        raw_score=raw,
        max_possible=max_possible,
        normalized_score=normalized,
        category=category,
    )


__all__ = ["AnswerSet", "CategoryScore", "require_answers", "score_category"]
