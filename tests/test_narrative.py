"""Tests for narrative characteristics and recommended products."""

import pytest

from riskprofile.classifier import RiskCategory, ScoringPolicy
from riskprofile.narrative import (
    BIAS_WARNINGS,
    CATEGORY_SUMMARIES,
    RECOMMENDED_PRODUCTS,
    bias_sentence,
    bias_tag_values,
    flagged_bias_tags,
    narrate,
)
from riskprofile.scoring import CategoryScore

from conftest import make_questions


def _s(value, category):
    return CategoryScore(value, 5.0, value, category=category)


BIAS_QS = make_questions("bias", n=4, bias_tags=["loss_aversion", "herding", "loss_aversion", "anchoring"])


def _bias_answers(*values):
    return list(zip(BIAS_QS, values))


def test_category_sentence_only_when_scores_close():
    n = narrate(RiskCategory.MODERATE, _s(3.0, "capacity"), _s(3.5, "willingness"),
                _s(1.0, "bias"), _bias_answers(1, 1, 1, 1))
    assert n.characteristics == (CATEGORY_SUMMARIES[RiskCategory.MODERATE],)
    assert n.recommended_products == RECOMMENDED_PRODUCTS[RiskCategory.MODERATE]


def test_gap_sentence_when_willingness_far_ahead():
    n = narrate(RiskCategory.CONSERVATIVE, _s(1.0, "capacity"), _s(5.0, "willingness"),
                _s(1.0, "bias"), _bias_answers(1, 1, 1, 1))
    assert len(n.characteristics) == 2
    assert "capped by capacity" in n.characteristics[1]


def test_gap_sentence_when_capacity_far_ahead():
    n = narrate(RiskCategory.MODERATE_CONSERVATIVE, _s(4.5, "capacity"), _s(2.0, "willingness"),
                _s(1.0, "bias"), _bias_answers(1, 1, 1, 1))
    assert "comfort level" in n.characteristics[1]


def test_gap_of_exactly_threshold_adds_nothing():
    n = narrate(RiskCategory.MODERATE, _s(3.0, "capacity"), _s(4.0, "willingness"),
                _s(1.0, "bias"), _bias_answers(1, 1, 1, 1))
    assert len(n.characteristics) == 1


def test_bias_sentences_deduplicated_by_tag_in_catalog_order():
    n = narrate(RiskCategory.MODERATE, _s(3.0, "capacity"), _s(3.0, "willingness"),
                _s(4.0, "bias"), _bias_answers(4, 5, 5, 3))
    assert n.characteristics[1:] == (BIAS_WARNINGS["loss_aversion"], BIAS_WARNINGS["herding"])


def test_flag_threshold_from_policy():
    answers = _bias_answers(3, 3, 1, 3)
    assert flagged_bias_tags(answers) == []
    assert flagged_bias_tags(answers, threshold=3) == ["loss_aversion", "herding", "anchoring"]
    n = narrate(RiskCategory.MODERATE, _s(3.0, "capacity"), _s(3.0, "willingness"),
                _s(2.0, "bias"), answers, ScoringPolicy(bias_flag_threshold=3))
    assert len(n.characteristics) == 4


def test_bias_tag_values_take_max_per_tag():
    assert bias_tag_values(_bias_answers(4, 2, 5, 1)) == {"loss_aversion": 5, "herding": 2, "anchoring": 1}


def test_unknown_bias_tag_gets_generic_sentence():
    assert bias_sentence("gamblers_fallacy").startswith("Gamblers fallacy:")


@pytest.mark.parametrize("category", list(RiskCategory))
def test_products_independent_of_bias(category):
    calm = narrate(category, _s(3.0, "capacity"), _s(3.0, "willingness"), _s(1.0, "bias"),
                   _bias_answers(1, 1, 1, 1))
    biased = narrate(category, _s(3.0, "capacity"), _s(3.0, "willingness"), _s(5.0, "bias"),
                     _bias_answers(5, 5, 5, 5))
    assert calm.recommended_products == biased.recommended_products
    assert len(calm.recommended_products) > 0


def test_anchor_products_present():
    assert "Money market funds" in RECOMMENDED_PRODUCTS[RiskCategory.CONSERVATIVE]
    assert "Sector ETFs" in RECOMMENDED_PRODUCTS[RiskCategory.AGGRESSIVE]
