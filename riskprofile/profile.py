from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, Union
import logging

from .allocation import (
    AllocationTable,
    AssetAllocation,
    allocate,
    get_default_allocation_table,
    validate_allocation_table,
)
from .catalog import BIAS, CAPACITY, CATEGORIES, WILLINGNESS, QuestionCatalog, get_default_catalog
from .classifier import DEFAULT_POLICY, RiskCategory, ScoringPolicy, classify
from .errors import DegenerateCatalog
from .narrative import bias_tag_values, flagged_bias_tags, narrate
from .scoring import AnswerSet, CategoryScore, require_answers, score_category

__all__ = [
    "RiskProfileResult",
    "compute_risk_profile",
    "reload_defaults",
]

_log = logging.getLogger(__name__)


# ============================================================================
# RiskProfileResult – the engine's only output
# ============================================================================

@dataclass(frozen=True)
class RiskProfileResult:
    """
    Immutable risk profile for one completed questionnaire.

    Fields:
      - capacity_score, willingness_score, bias_score (CategoryScore)
      - final_score in [1.0, 5.0] (bias excluded)
      - category, asset_allocation
      - characteristics, recommended_products (ordered, rendered verbatim)
      - flagged_biases: bias tags behind the bias warnings
      - bias_details: (tag, strongest answer value) per bias tag, catalog order
      - catalog_version: callers key stored results by this and invalidate
        them when the catalog version changes
    """
    capacity_score: CategoryScore
    willingness_score: CategoryScore
    bias_score: CategoryScore
    final_score: float
    category: RiskCategory
    asset_allocation: AssetAllocation
    characteristics: Tuple[str, ...]
    recommended_products: Tuple[str, ...]
    flagged_biases: Tuple[str, ...] = ()
    bias_details: Tuple[Tuple[str, int], ...] = ()
    catalog_version: str = "unversioned"

    @property
    def label(self) -> str:
        return self.category.label

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation for persistence and transport."""
        return {
            "capacity_score": self.capacity_score.to_dict(),
            "willingness_score": self.willingness_score.to_dict(),
            "bias_score": self.bias_score.to_dict(),
            "final_score": self.final_score,
            "category": self.category.slug,
            "label": self.label,
            "asset_allocation": self.asset_allocation.to_dict(),
            "characteristics": list(self.characteristics),
            "recommended_products": list(self.recommended_products),
            "flagged_biases": list(self.flagged_biases),
            "bias_details": dict(self.bias_details),
            "catalog_version": self.catalog_version,
        }


def _as_catalog(catalog: Union[QuestionCatalog, Mapping[str, Any]]) -> QuestionCatalog:
    if isinstance(catalog, QuestionCatalog):
        return catalog
    return QuestionCatalog.from_mapping(catalog)


def validate_structure(catalog: QuestionCatalog, answers: AnswerSet) -> None:
    """Fail fast before any scoring: every category non-empty, every question answered."""
    for category in CATEGORIES:
        if not catalog.questions(category):
            raise DegenerateCatalog(category, "no questions")
    for category in CATEGORIES:
        require_answers(catalog.questions(category), answers)


def compute_risk_profile(
    catalog: Union[QuestionCatalog, Mapping[str, Any], None],
    answers: AnswerSet,
    policy: Optional[ScoringPolicy] = None,
    allocations: Optional[AllocationTable] = None,
) -> RiskProfileResult:
    """
    Turn a complete answer set into a RiskProfileResult.

    Steps:
      1) validate structure (non-empty categories, all questions answered)
      2) score capacity, willingness and bias
      3) classify(capacity, willingness) -> final_score, category
      4) allocate(category)
      5) narrate(category, scores, bias answers)

    Args:
        catalog: QuestionCatalog, a {"capacity", "willingness", "bias"} mapping,
                 or None for the default catalog
        answers: question id -> chosen option value
        policy: scoring policy override (default: DEFAULT_POLICY)
        allocations: allocation table override (default: config/allocations.yaml)

    Raises:
        MissingAnswer, DegenerateCatalog
        InvalidAllocationTable: `allocations` override is incomplete or malformed
    """
    cat = _as_catalog(catalog) if catalog is not None else get_default_catalog()
    policy = policy or DEFAULT_POLICY
    answers = answers or {}

    validate_structure(cat, answers)

    capacity = score_category(cat.questions(CAPACITY), answers)
    willingness = score_category(cat.questions(WILLINGNESS), answers)
    bias = score_category(cat.questions(BIAS), answers)

    result = classify(capacity, willingness, policy)
    if allocations is not None:
        table = validate_allocation_table(allocations)
    else:
        table = get_default_allocation_table()
    allocation = allocate(result.category, table)

    bias_answers = [(q, int(answers[q.id])) for q in cat.questions(BIAS)]
    story = narrate(result.category, capacity, willingness, bias, bias_answers, policy)
    flagged = flagged_bias_tags(bias_answers, policy.bias_flag_threshold)

    _log.info(
        f"Risk profile (catalog v{cat.version}): capacity={capacity.normalized_score:.2f} "
        f"willingness={willingness.normalized_score:.2f} final={result.final_score:.2f} "
        f"-> {result.category.label}"
    )

    return RiskProfileResult(
        capacity_score=capacity,
        willingness_score=willingness,
        bias_score=bias,
        final_score=result.final_score,
        category=result.category,
        asset_allocation=allocation,
        characteristics=story.characteristics,
        recommended_products=story.recommended_products,
        flagged_biases=tuple(flagged),
        bias_details=tuple(bias_tag_values(bias_answers).items()),
        catalog_version=cat.version,
    )


def reload_defaults() -> None:
    """Drop cached default catalog and allocation table; the next call reloads both."""
    get_default_catalog.cache_clear()
    get_default_allocation_table.cache_clear()
