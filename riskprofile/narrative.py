"""
Narrative Generator - human-readable characteristics and product tags.

characteristics, in order:
  1. one fixed sentence for the category (time horizon, volatility tolerance)
  2. one sentence when capacity and willingness differ by more than the gap
     threshold (1.0 on the 1-5 scale)
  3. one sentence per pronounced bias (answer >= 4), keyed by the question's
     bias tag, deduplicated by tag in catalog order

recommended_products is a fixed list per category and ignores bias.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .catalog import Question
from .classifier import DEFAULT_POLICY, RiskCategory, ScoringPolicy
from .scoring import CategoryScore

CATEGORY_SUMMARIES: Dict[RiskCategory, str] = {
    RiskCategory.CONSERVATIVE: (
        "Capital preservation comes first: suited to short horizons and very "
        "low tolerance for portfolio swings."
    ),
    RiskCategory.MODERATE_CONSERVATIVE: (
        "Safety with modest growth: suited to short-to-medium horizons and "
        "small, temporary fluctuations."
    ),
    RiskCategory.MODERATE: (
        "Balanced risk and return: suited to medium-term horizons and "
        "ordinary market volatility."
    ),
    RiskCategory.MODERATE_AGGRESSIVE: (
        "Growth is the priority: suited to long horizons and significant "
        "market fluctuations along the way."
    ),
    RiskCategory.AGGRESSIVE: (
        "Maximum long-term growth: suited to horizons of 10+ years and "
        "large portfolio swings."
    ),
}

RECOMMENDED_PRODUCTS: Dict[RiskCategory, Tuple[str, ...]] = {
    RiskCategory.CONSERVATIVE: (
        "Money market funds",
        "Short-duration bond funds",
        "Treasury bonds",
        "High-yield savings accounts",
    ),
    RiskCategory.MODERATE_CONSERVATIVE: (
        "Conservative allocation funds",
        "Short-term bond funds",
        "Dividend-focused ETFs",
        "Municipal bonds",
    ),
    RiskCategory.MODERATE: (
        "Balanced funds",
        "Target-date funds",
        "Broad-market index funds",
        "Diversified ETF portfolio",
    ),
    RiskCategory.MODERATE_AGGRESSIVE: (
        "Growth-oriented allocation funds",
        "Large-cap growth ETFs",
        "International equity funds",
        "Real estate investment trusts (REITs)",
    ),
    RiskCategory.AGGRESSIVE: (
        "Growth equity funds",
        "Sector ETFs",
        "Small-cap growth funds",
        "Emerging market funds",
    ),
}

BIAS_WARNINGS: Dict[str, str] = {
    "overconfidence": (
        "Overconfidence: you may overrate your ability to pick winners; "
        "favour diversification over concentrated bets."
    ),
    "loss_aversion": (
        "Loss aversion: losses weigh heavily on you, which can lead to selling "
        "at the bottom; a written plan helps you stay invested."
    ),
    "herding": (
        "Herding: you tend to follow the crowd; check whether an idea fits "
        "your own goals before acting on it."
    ),
    "disposition_effect": (
        "Disposition effect: you may sell winners too early and hold losers "
        "too long; review positions on fundamentals, not purchase price."
    ),
    "hindsight_bias": (
        "Hindsight bias: past outcomes can look more predictable than they "
        "were; keep a decision journal to judge your process fairly."
    ),
    "recency_bias": (
        "Recency bias: recent market moves may weigh too much in your "
        "decisions; anchor on long-term averages instead."
    ),
    "anchoring": (
        "Anchoring: a reference price can stick in your mind; reassess each "
        "holding on today's information."
    ),
    "confirmation_bias": (
        "Confirmation bias: you may seek out views that agree with you; "
        "look actively for the case against an investment."
    ),
}


@dataclass(frozen=True)
class Narrative:
    characteristics: Tuple[str, ...]
    recommended_products: Tuple[str, ...]


def gap_sentence(capacity: float, willingness: float, threshold: float) -> Optional[str]:
    gap = round(willingness - capacity, 2)
    if abs(gap) <= threshold:
        return None
    if gap > 0:
        return (
            f"Your willingness to take risk ({willingness:.2f}) is well ahead of your "
            f"financial capacity ({capacity:.2f}); the recommendation is capped by capacity."
        )
    return (
        f"Your financial capacity ({capacity:.2f}) exceeds your comfort with risk "
        f"({willingness:.2f}); the recommendation follows your comfort level."
    )


def bias_sentence(tag: str) -> str:
    if tag in BIAS_WARNINGS:
        return BIAS_WARNINGS[tag]
    return f"{tag.replace('_', ' ').capitalize()}: this tendency may affect your investment decisions."


def bias_tag_values(bias_answers: Sequence[Tuple[Question, int]]) -> Dict[str, int]:
    """Strongest answer value per bias tag, in first-occurrence order."""
    values: Dict[str, int] = {}
    for question, value in bias_answers:
        tag = question.bias_tag
        if tag:
            values[tag] = max(value, values.get(tag, value))
    return values


def flagged_bias_tags(
    bias_answers: Sequence[Tuple[Question, int]],
    threshold: int = DEFAULT_POLICY.bias_flag_threshold,
) -> List[str]:
    """Bias tags with a pronounced answer, first occurrence wins."""
    tags: List[str] = []
    for question, value in bias_answers:
        tag = question.bias_tag
        if tag and value >= threshold and tag not in tags:
            tags.append(tag)
    return tags


def narrate(
    category: RiskCategory,
    capacity: CategoryScore,
    willingness: CategoryScore,
    bias: CategoryScore,
    bias_answers: Sequence[Tuple[Question, int]],
    policy: Optional[ScoringPolicy] = None,
) -> Narrative:
    """
    Build the narrative for one profile.

    `bias` is accepted so the signature carries all three category scores;
    warnings are driven by the individual bias answers, not the aggregate.
    """
    policy = policy or DEFAULT_POLICY
    category = RiskCategory(category)

    characteristics = [CATEGORY_SUMMARIES[category]]
    gap = gap_sentence(capacity.normalized_score, willingness.normalized_score, policy.gap_threshold)
    if gap:
        characteristics.append(gap)
    for tag in flagged_bias_tags(bias_answers, policy.bias_flag_threshold):
        characteristics.append(bias_sentence(tag))

    return Narrative(
        characteristics=tuple(characteristics),
        recommended_products=RECOMMENDED_PRODUCTS[category],
    )


__all__ = [
    "CATEGORY_SUMMARIES",
    "RECOMMENDED_PRODUCTS",
    "BIAS_WARNINGS",
    "Narrative",
    "gap_sentence",
    "bias_sentence",
    "bias_tag_values",
    "flagged_bias_tags",
    "narrate",
]
