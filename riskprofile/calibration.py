"""
Policy calibration helpers.

Score many answer sets at once to see how a scoring policy (capacity slack,
band floors) spreads investors across categories. Used offline by
dev/run_policy_sensitivity.py; nothing here is on the request path.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Mapping, Optional

import numpy as np
import pandas as pd

from .allocation import AllocationTable, ASSET_CLASSES
from .catalog import QuestionCatalog
from .classifier import RiskCategory, ScoringPolicy
from .profile import compute_risk_profile

PROFILE_COLUMNS = [
    "capacity",
    "willingness",
    "bias",
    "final_score",
    "category",
    *ASSET_CLASSES,
]


def random_answer_sets(catalog: QuestionCatalog, n: int, seed: int = 42) -> List[Dict[str, int]]:
    """Draw `n` complete answer sets, each value picked from the question's own options."""
    rng = np.random.default_rng(seed)
    questions = catalog.all_questions()
    sets = []
    for _ in range(int(n)):
        sets.append({q.id: int(rng.choice(q.option_values)) for q in questions})
    return sets


def profile_frame(
    catalog: QuestionCatalog,
    answer_sets: Iterable[Mapping[str, int]],
    policy: Optional[ScoringPolicy] = None,
    allocations: Optional[AllocationTable] = None,
) -> pd.DataFrame:
    """One row per answer set: three normalized scores, final score, category slug, allocation."""
    rows = []
    for answers in answer_sets:
        res = compute_risk_profile(catalog, answers, policy=policy, allocations=allocations)
        row = {
            "capacity": res.capacity_score.normalized_score,
            "willingness": res.willingness_score.normalized_score,
            "bias": res.bias_score.normalized_score,
            "final_score": res.final_score,
            "category": res.category.slug,
        }
        row.update(res.asset_allocation.to_dict())
        rows.append(row)
    return pd.DataFrame(rows, columns=PROFILE_COLUMNS)


def category_distribution(frame: pd.DataFrame) -> pd.Series:
    """Share of rows per category in risk order; categories with no rows get 0.0."""
    order = [c.slug for c in RiskCategory]
    if frame.empty:
        return pd.Series(0.0, index=order, name="share")
    counts = frame["category"].value_counts().reindex(order, fill_value=0)
    share = counts / counts.sum()
    share.name = "share"
    return share.astype(float)


__all__ = ["PROFILE_COLUMNS", "random_answer_sets", "profile_frame", "category_distribution"]
