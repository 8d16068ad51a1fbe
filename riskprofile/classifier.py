"""
Profile Classifier - combine capacity and willingness into one risk category.

Combination rule (conservative ceiling):

    final_score = min(willingness, capacity + CAPACITY_SLACK)

Willingness (appetite) may run ahead of capacity (financial ability to absorb
loss) by at most CAPACITY_SLACK; any larger gap is capped. The behavioral
bias score never enters final_score, it only drives narrative warnings.

final_score is mapped to five equal-width bands over [1.0, 5.0], lower edge
inclusive:

    [1.0, 1.8) Conservative
    [1.8, 2.6) Moderate Conservative
    [2.6, 3.4) Moderate
    [3.4, 4.2) Moderate Aggressive
    [4.2, 5.0] Aggressive

Both steps are monotonic: raising either input never lowers final_score and
never moves the category to a less risk-tolerant band.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple
import logging

from .scoring import CategoryScore

_log = logging.getLogger(__name__)

# Policy parameters; revisit with product, not with the scoring math.
CAPACITY_SLACK = 0.5
BAND_FLOORS: Tuple[float, ...] = (1.8, 2.6, 3.4, 4.2)
GAP_THRESHOLD = 1.0
BIAS_FLAG_THRESHOLD = 4

MIN_SCORE = 1.0
MAX_SCORE = 5.0


class RiskCategory(IntEnum):
    """Risk categories ordered by risk appetite (low -> high)."""
    CONSERVATIVE = 1
    MODERATE_CONSERVATIVE = 2
    MODERATE = 3
    MODERATE_AGGRESSIVE = 4
    AGGRESSIVE = 5

    @property
    def slug(self) -> str:
        return self.name.lower()

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()

    @classmethod
    def from_slug(cls, slug: str) -> "RiskCategory":
        try:
            return cls[str(slug).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown risk category: {slug!r}") from None


@dataclass(frozen=True)
class ScoringPolicy:
    """Tunable classification and narrative parameters."""
    capacity_slack: float = CAPACITY_SLACK
    band_floors: Tuple[float, ...] = BAND_FLOORS
    gap_threshold: float = GAP_THRESHOLD
    bias_flag_threshold: int = BIAS_FLAG_THRESHOLD

    def __post_init__(self):
        floors = tuple(float(b) for b in self.band_floors)
        if len(floors) != len(RiskCategory) - 1:
            raise ValueError(f"band_floors needs {len(RiskCategory) - 1} entries, got {len(floors)}")
        if any(lo >= hi for lo, hi in zip(floors, floors[1:])):
            raise ValueError(f"band_floors must be strictly ascending: {floors}")
        if self.capacity_slack < 0:
            raise ValueError("capacity_slack must be non-negative")
        object.__setattr__(self, "band_floors", floors)

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "ScoringPolicy":
        """Build from the 'scoring' section of config.yaml (or the whole config)."""
        s = cfg.get("scoring", cfg)
        return cls(
            capacity_slack=float(s.get("capacity_slack", CAPACITY_SLACK)),
            band_floors=tuple(s.get("band_floors", BAND_FLOORS)),
            gap_threshold=float(s.get("gap_threshold", GAP_THRESHOLD)),
            bias_flag_threshold=int(s.get("bias_flag_threshold", BIAS_FLAG_THRESHOLD)),
        )


DEFAULT_POLICY = ScoringPolicy()


@dataclass(frozen=True)
class Classification:
    final_score: float
    category: RiskCategory


def combine_scores(capacity: float, willingness: float, slack: float = CAPACITY_SLACK) -> float:
    """Conservative-ceiling combination, rounded to 2 decimals and clamped to [1, 5]."""
    final = min(float(willingness), float(capacity) + float(slack))
    final = max(MIN_SCORE, min(MAX_SCORE, final))
    return round(final, 2)


def category_for_score(score: float, band_floors: Sequence[float] = BAND_FLOORS) -> RiskCategory:
    """Map a 1-5 score to its band; each floor is inclusive."""
    category = RiskCategory.CONSERVATIVE
    for cat, floor in zip(list(RiskCategory)[1:], band_floors):
        if score >= floor:
            category = cat
        else:
            break
    return category


def band_range(category: RiskCategory, band_floors: Sequence[float] = BAND_FLOORS) -> Tuple[float, float]:
    """(low, high) score range of a category; high is exclusive except for the top band."""
    edges = [MIN_SCORE] + [float(b) for b in band_floors] + [MAX_SCORE]
    i = int(category) - 1
    return edges[i], edges[i + 1]


def classify(
    capacity: CategoryScore,
    willingness: CategoryScore,
    policy: Optional[ScoringPolicy] = None,
) -> Classification:
    policy = policy or DEFAULT_POLICY
    final = combine_scores(capacity.normalized_score, willingness.normalized_score, policy.capacity_slack)
    category = category_for_score(final, policy.band_floors)
    if willingness.normalized_score > capacity.normalized_score + policy.capacity_slack:
        _log.debug(
            f"Willingness {willingness.normalized_score:.2f} capped by capacity "
            f"{capacity.normalized_score:.2f} + {policy.capacity_slack:g}"
        )
    return Classification(final_score=final, category=category)


def category_bands(policy: Optional[ScoringPolicy] = None) -> Dict[RiskCategory, Tuple[float, float]]:
    policy = policy or DEFAULT_POLICY
    return {c: band_range(c, policy.band_floors) for c in RiskCategory}


__all__ = [
    "CAPACITY_SLACK",
    "BAND_FLOORS",
    "GAP_THRESHOLD",
    "BIAS_FLAG_THRESHOLD",
    "RiskCategory",
    "ScoringPolicy",
    "DEFAULT_POLICY",
    "Classification",
    "combine_scores",
    "category_for_score",
    "band_range",
    "category_bands",
    "classify",
]
