"""Error taxonomy for the risk-profiling engine.

All errors are local validation failures. Retrying with the same input
reproduces the same error, so callers should never retry them.

- MissingAnswer: an answer set omits a catalog question. Surface to the
  end user as "please complete all questions".
- DegenerateCatalog / InvalidAllocationTable / CatalogError / ConfigError:
  deployment configuration defects. Treat as fatal at startup, not per request.
"""
from __future__ import annotations
from typing import Optional


class RiskProfileError(ValueError):
    """Base class for every error raised by the engine."""


class MissingAnswer(RiskProfileError):
    def __init__(self, question_id: str):
        self.question_id = str(question_id)
        super().__init__(f"Missing answer for {self.question_id}")


class DegenerateCatalog(RiskProfileError):
    """A category's total weight is zero (or the category has no questions)."""

    def __init__(self, category: str, detail: str = "total weight is zero"):
        self.category = str(category)
        super().__init__(f"Degenerate {self.category} catalog: {detail}")


class InvalidAllocationTable(RiskProfileError):
    def __init__(self, category: Optional[str], detail: str):
        self.category = category
        where = f" row '{category}'" if category else ""
        super().__init__(f"Invalid allocation table{where}: {detail}")


class CatalogError(RiskProfileError):
    """Question catalog file is structurally malformed."""


class ConfigError(RiskProfileError):
    """config.yaml cannot be parsed."""


__all__ = [
    "RiskProfileError",
    "MissingAnswer",
    "DegenerateCatalog",
    "InvalidAllocationTable",
    "CatalogError",
    "ConfigError",
]
