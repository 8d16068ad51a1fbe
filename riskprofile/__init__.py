from importlib.metadata import version, PackageNotFoundError

from .allocation import AssetAllocation, allocate, load_allocation_table
from .catalog import Question, QuestionCatalog, get_default_catalog, load_catalog
from .classifier import RiskCategory, ScoringPolicy, classify
from .errors import (
    CatalogError,
    ConfigError,
    DegenerateCatalog,
    InvalidAllocationTable,
    MissingAnswer,
    RiskProfileError,
)
from .profile import RiskProfileResult, compute_risk_profile, reload_defaults
from .scoring import CategoryScore, score_category

try:
    __version__ = version("riskprofile")
except PackageNotFoundError:
    __version__ = "0.0.1"

__all__ = [
    "compute_risk_profile",
    "reload_defaults",
    "RiskProfileResult",
    "CategoryScore",
    "RiskCategory",
    "AssetAllocation",
    "ScoringPolicy",
    "Question",
    "QuestionCatalog",
    "load_catalog",
    "get_default_catalog",
    "load_allocation_table",
    "score_category",
    "classify",
    "allocate",
    "RiskProfileError",
    "MissingAnswer",
    "DegenerateCatalog",
    "InvalidAllocationTable",
    "CatalogError",
    "ConfigError",
]
