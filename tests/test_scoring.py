"""
Tests for the category scorer.

Validates that:
1. Weighted sums and normalization match hand-computed values
2. Missing answers and zero-weight catalogs are rejected
3. Interpretation labels follow the score thresholds
"""

import pytest

from riskprofile.catalog import AnswerOption, Question
from riskprofile.errors import DegenerateCatalog, MissingAnswer
from riskprofile.scoring import CategoryScore, score_category

from conftest import make_questions


def test_uniform_answers_normalize_to_answer_value():
    qs = make_questions("capacity")
    for v in range(1, 6):
        score = score_category(qs, {q.id: v for q in qs})
        assert score.normalized_score == pytest.approx(float(v))
        assert score.max_possible == pytest.approx(50.0)
        assert score.raw_score == pytest.approx(10.0 * v)


def test_weights_dominate_without_changing_scale():
    qs = make_questions("capacity", n=2, weights=[3, 1])
    score = score_category(qs, {"capacity_1": 5, "capacity_2": 1})
    # raw = 5*3 + 1*1 = 16, max = 5*4 = 20 -> 16/20*5 = 4.0
    assert score.raw_score == pytest.approx(16.0)
    assert score.max_possible == pytest.approx(20.0)
    assert score.normalized_score == pytest.approx(4.0)


def test_normalized_score_rounded_to_two_decimals():
    qs = make_questions("willingness", n=3)
    score = score_category(qs, {"willingness_1": 1, "willingness_2": 1, "willingness_3": 2})
    # 4/15*5 = 1.3333...
    assert score.normalized_score == 1.33


def test_missing_answer_names_question():
    qs = make_questions("capacity")
    answers = {q.id: 3 for q in qs}
    del answers["capacity_7"]
    with pytest.raises(MissingAnswer) as exc:
        score_category(qs, answers)
    assert exc.value.question_id == "capacity_7"
    assert "capacity_7" in str(exc.value)


def test_none_value_counts_as_missing():
    qs = make_questions("capacity", n=2)
    with pytest.raises(MissingAnswer):
        score_category(qs, {"capacity_1": 3, "capacity_2": None})


def test_zero_total_weight_is_degenerate():
    qs = make_questions("capacity", n=3, weights=[0, 0, 0])
    with pytest.raises(DegenerateCatalog) as exc:
        score_category(qs, {q.id: 3 for q in qs})
    assert exc.value.category == "capacity"


def test_out_of_range_value_is_not_rejected():
    opts = (AnswerOption(1, "a"), AnswerOption(5, "b"))
    qs = (Question(id="x", category="capacity", options=opts),)
    score = score_category(qs, {"x": 7})
    assert score.normalized_score == pytest.approx(7.0)


@pytest.mark.parametrize("value,expected", [
    (1.5, "very_low"),
    (2.0, "very_low"),
    (2.5, "low_to_moderate"),
    (3.5, "moderate_to_good"),
    (4.0, "moderate_to_good"),
    (4.5, "high"),
])
def test_interpretation_capacity(value, expected):
    assert CategoryScore(value, 5.0, value, category="capacity").interpretation == expected


@pytest.mark.parametrize("value,expected", [
    (2.5, "low_to_moderate"),
    (3.5, "moderate_to_high"),
    (4.01, "high"),
])
def test_interpretation_willingness(value, expected):
    assert CategoryScore(value, 5.0, value, category="willingness").interpretation == expected


@pytest.mark.parametrize("value,expected", [
    (1.0, "low"),
    (3.0, "moderate"),
    (3.5, "moderate"),
    (4.0, "high"),
])
def test_interpretation_bias(value, expected):
    assert CategoryScore(value, 5.0, value, category="bias").interpretation == expected
