from __future__ import annotations
from typing import Dict

import pytest

from riskprofile.catalog import AnswerOption, Question, QuestionCatalog, load_catalog

FIVE_OPTIONS = tuple(AnswerOption(value=v, label=str(v)) for v in range(1, 6))


def make_questions(category: str, n: int = 10, weights=None, bias_tags=None):
    weights = weights or [1] * n
    out = []
    for i in range(n):
        tag = None
        if bias_tags:
            tag = bias_tags[i % len(bias_tags)]
        out.append(Question(id=f"{category}_{i + 1}", category=category, options=FIVE_OPTIONS,
                            weight=weights[i], bias_tag=tag))
    return tuple(out)


@pytest.fixture(scope="session")
def catalog() -> QuestionCatalog:
    """The catalog shipped in config/questions.yaml."""
    return load_catalog()


@pytest.fixture
def simple_catalog() -> QuestionCatalog:
    """10 equally weighted questions per category."""
    return QuestionCatalog(
        version="test",
        capacity=make_questions("capacity"),
        willingness=make_questions("willingness"),
        bias=make_questions("bias", bias_tags=["loss_aversion", "herding", "overconfidence"]),
    )


@pytest.fixture
def answers_for():
    """answers_for(catalog, capacity=3, willingness=3, bias=1) -> uniform answer set."""
    def _build(cat: QuestionCatalog, capacity: int = 3, willingness: int = 3, bias: int = 1) -> Dict[str, int]:
        answers = {q.id: capacity for q in cat.capacity}
        answers.update({q.id: willingness for q in cat.willingness})
        answers.update({q.id: bias for q in cat.bias})
        return answers
    return _build
