"""
Tests for the profile classifier.

Validates that:
1. Willingness is capped at capacity + slack (conservative ceiling)
2. Band edges are inclusive on the lower side
3. classify is monotonic in both inputs
4. ScoringPolicy rejects malformed band floors
"""

import pytest

from riskprofile.classifier import (
    CAPACITY_SLACK,
    RiskCategory,
    ScoringPolicy,
    band_range,
    category_for_score,
    classify,
    combine_scores,
)
from riskprofile.scoring import CategoryScore


def _score(value: float, category: str = "capacity") -> CategoryScore:
    return CategoryScore(raw_score=value, max_possible=5.0, normalized_score=value, category=category)


def test_slack_constant_is_half_point():
    assert CAPACITY_SLACK == 0.5


@pytest.mark.parametrize("capacity,willingness,expected", [
    (3.0, 3.0, 3.0),
    (1.0, 5.0, 1.5),
    (5.0, 5.0, 5.0),
    (2.0, 2.4, 2.4),   # within slack: willingness wins
    (2.0, 2.5, 2.5),
    (2.0, 4.0, 2.5),   # beyond slack: capped
    (4.0, 2.0, 2.0),   # capacity ahead: willingness wins
    (3.17, 4.9, 3.67),
])
def test_combine_scores(capacity, willingness, expected):
    assert combine_scores(capacity, willingness) == pytest.approx(expected)


def test_final_score_clamped_to_scale():
    assert combine_scores(0.2, 0.4) == 1.0
    assert combine_scores(6.0, 7.0) == 5.0


@pytest.mark.parametrize("score,expected", [
    (1.0, RiskCategory.CONSERVATIVE),
    (1.79, RiskCategory.CONSERVATIVE),
    (1.8, RiskCategory.MODERATE_CONSERVATIVE),
    (2.59, RiskCategory.MODERATE_CONSERVATIVE),
    (2.6, RiskCategory.MODERATE),
    (3.0, RiskCategory.MODERATE),
    (3.4, RiskCategory.MODERATE_AGGRESSIVE),
    (4.19, RiskCategory.MODERATE_AGGRESSIVE),
    (4.2, RiskCategory.AGGRESSIVE),
    (5.0, RiskCategory.AGGRESSIVE),
])
def test_band_edges(score, expected):
    assert category_for_score(score) == expected


def test_classify_ceiling_ignores_high_willingness():
    result = classify(_score(1.0), _score(5.0, "willingness"))
    assert result.final_score == pytest.approx(1.5)
    assert result.category == RiskCategory.CONSERVATIVE


def test_classify_is_monotonic_on_grid():
    grid = [round(1.0 + 0.1 * i, 2) for i in range(41)]
    for c in grid:
        prev = None
        for w in grid:
            res = classify(_score(c), _score(w, "willingness"))
            assert res.final_score <= c + CAPACITY_SLACK + 1e-9
            assert 1.0 <= res.final_score <= 5.0
            if prev is not None:
                assert res.final_score >= prev.final_score
                assert res.category >= prev.category
            prev = res
    for w in grid:
        prev = None
        for c in grid:
            res = classify(_score(c), _score(w, "willingness"))
            if prev is not None:
                assert res.final_score >= prev.final_score
                assert res.category >= prev.category
            prev = res


def test_category_ordering_and_labels():
    assert RiskCategory.CONSERVATIVE < RiskCategory.MODERATE < RiskCategory.AGGRESSIVE
    assert RiskCategory.MODERATE_CONSERVATIVE.slug == "moderate_conservative"
    assert RiskCategory.MODERATE_AGGRESSIVE.label == "Moderate Aggressive"
    assert RiskCategory.from_slug("moderate") is RiskCategory.MODERATE
    with pytest.raises(ValueError):
        RiskCategory.from_slug("balanced")


def test_band_range():
    assert band_range(RiskCategory.CONSERVATIVE) == (1.0, 1.8)
    assert band_range(RiskCategory.AGGRESSIVE) == (4.2, 5.0)


def test_policy_changes_ceiling():
    tight = ScoringPolicy(capacity_slack=0.0)
    res = classify(_score(3.0), _score(5.0, "willingness"), tight)
    assert res.final_score == pytest.approx(3.0)
    assert res.category == RiskCategory.MODERATE


def test_policy_rejects_bad_band_floors():
    with pytest.raises(ValueError):
        ScoringPolicy(band_floors=(1.8, 2.6, 2.6, 4.2))
    with pytest.raises(ValueError):
        ScoringPolicy(band_floors=(1.8, 2.6, 3.4))
    with pytest.raises(ValueError):
        ScoringPolicy(capacity_slack=-0.1)


def test_policy_from_config():
    cfg = {"scoring": {"capacity_slack": 0.25, "band_floors": [2, 2.5, 3, 4], "gap_threshold": 1.5}}
    policy = ScoringPolicy.from_config(cfg)
    assert policy.capacity_slack == 0.25
    assert policy.band_floors == (2.0, 2.5, 3.0, 4.0)
    assert policy.gap_threshold == 1.5
    assert policy.bias_flag_threshold == 4
