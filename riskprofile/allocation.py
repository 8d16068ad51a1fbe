"""
Allocation Mapper - risk category -> target asset allocation.

The table, not a formula, is authoritative: config/allocations.yaml can be
revised by policy without touching the scoring math. Every row is validated
to sum to exactly 100 when the table is loaded, never per call.
"""

from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional
import logging

import yaml

from .classifier import RiskCategory
from .errors import InvalidAllocationTable
from .utils import find_config_file, load_config

_log = logging.getLogger(__name__)

ASSET_CLASSES = ("stocks", "bonds", "alternatives", "cash")


@dataclass(frozen=True)
class AssetAllocation:
    """Target split in integer percentages; the four always sum to 100."""
    stocks: int
    bonds: int
    alternatives: int
    cash: int

    @property
    def total(self) -> int:
        return self.stocks + self.bonds + self.alternatives + self.cash

    def to_dict(self) -> Dict[str, int]:
        return {k: getattr(self, k) for k in ASSET_CLASSES}


AllocationTable = Mapping[RiskCategory, AssetAllocation]

# Design values (stocks / bonds / alternatives / cash)
DEFAULT_ALLOCATIONS: Dict[str, Dict[str, int]] = {
    "conservative":          {"stocks": 20, "bonds": 60, "alternatives": 0, "cash": 20},
    "moderate_conservative": {"stocks": 40, "bonds": 50, "alternatives": 0, "cash": 10},
    "moderate":              {"stocks": 60, "bonds": 35, "alternatives": 5, "cash": 0},
    "moderate_aggressive":   {"stocks": 75, "bonds": 20, "alternatives": 5, "cash": 0},
    "aggressive":            {"stocks": 90, "bonds": 5,  "alternatives": 5, "cash": 0},
}


def _parse_row(slug: str, row: Any) -> AssetAllocation:
    if not isinstance(row, Mapping):
        raise InvalidAllocationTable(slug, "row must be a mapping of asset class -> percent")
    extra = set(row) - set(ASSET_CLASSES)
    if extra:
        raise InvalidAllocationTable(slug, f"unknown asset classes {sorted(extra)}")
    values = {}
    for k in ASSET_CLASSES:
        v = row.get(k, 0)
        if isinstance(v, bool) or not isinstance(v, int):
            raise InvalidAllocationTable(slug, f"{k} must be an integer percentage, got {v!r}")
        if v < 0:
            raise InvalidAllocationTable(slug, f"{k} is negative ({v})")
        values[k] = v
    alloc = AssetAllocation(**values)
    if alloc.total != 100:
        raise InvalidAllocationTable(slug, f"sums to {alloc.total}, expected 100")
    return alloc


def build_allocation_table(rows: Mapping[str, Any]) -> AllocationTable:
    """
    Validate raw {category_slug: {stocks, bonds, alternatives, cash}} rows.

    Returns a read-only mapping; the table is shared by every call.

    Raises:
        InvalidAllocationTable: unknown or missing category, bad value, or a
            row that does not sum to 100
    """
    if not isinstance(rows, Mapping):
        raise InvalidAllocationTable(None, "expected a mapping of category -> row")
    table: Dict[RiskCategory, AssetAllocation] = {}
    for slug, row in rows.items():
        try:
            category = RiskCategory.from_slug(slug)
        except ValueError:
            raise InvalidAllocationTable(str(slug), "unknown risk category") from None
        table[category] = _parse_row(category.slug, row)
    missing = [c.slug for c in RiskCategory if c not in table]
    if missing:
        raise InvalidAllocationTable(None, f"missing rows for {missing}")
    return MappingProxyType(table)


def validate_allocation_table(table: Mapping[Any, Any]) -> AllocationTable:
    """
    Check a caller-supplied {RiskCategory: AssetAllocation} table row by row.

    Keys may be RiskCategory members or slugs. Returns a read-only copy.
    """
    if not isinstance(table, Mapping):
        raise InvalidAllocationTable(None, "expected a mapping of category -> allocation")
    checked: Dict[RiskCategory, AssetAllocation] = {}
    for key, alloc in table.items():
        try:
            category = RiskCategory(key) if isinstance(key, int) else RiskCategory.from_slug(key)
        except ValueError:
            raise InvalidAllocationTable(str(key), "unknown risk category") from None
        if not isinstance(alloc, AssetAllocation):
            raise InvalidAllocationTable(category.slug, f"expected AssetAllocation, got {type(alloc).__name__}")
        checked[category] = _parse_row(category.slug, alloc.to_dict())
    missing = [c.slug for c in RiskCategory if c not in checked]
    if missing:
        raise InvalidAllocationTable(None, f"missing rows for {missing}")
    return MappingProxyType(checked)


def get_allocations_path() -> Path:
    name = load_config()["catalog"]["allocations_file"]
    p = find_config_file(name)
    if p is None:
        raise FileNotFoundError(f"{name} not found in any config directory")
    return p


def load_allocation_table(path: str | Path | None = None) -> AllocationTable:
    """
    Load and validate the allocation table from YAML (expects an 'allocations' key).

    Raises:
        FileNotFoundError: table file missing
        InvalidAllocationTable: invalid YAML or an invalid table
    """
    table_path = Path(path) if path else get_allocations_path()
    try:
        with open(table_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise InvalidAllocationTable(None, f"{table_path}: invalid YAML") from e
    if not isinstance(data, Mapping) or "allocations" not in data:
        raise InvalidAllocationTable(None, f"{table_path} missing 'allocations' key")
    table = build_allocation_table(data["allocations"])
    _log.info(f"Loaded allocation table from {table_path}")
    return table


@lru_cache(maxsize=1)
def get_default_allocation_table() -> AllocationTable:
    """config/allocations.yaml if present, else the built-in design table."""
    try:
        path = get_allocations_path()
    except FileNotFoundError:
        _log.warning("allocations.yaml not found; using built-in allocation table")
        return BUILTIN_TABLE
    return load_allocation_table(path)


def allocate(category: RiskCategory, table: Optional[AllocationTable] = None) -> AssetAllocation:
    """Pure lookup of the target allocation for `category`."""
    table = table if table is not None else get_default_allocation_table()
    return table[RiskCategory(category)]


# Validated at import so a bad edit fails at startup.
BUILTIN_TABLE: AllocationTable = build_allocation_table(DEFAULT_ALLOCATIONS)


__all__ = [
    "ASSET_CLASSES",
    "AssetAllocation",
    "AllocationTable",
    "DEFAULT_ALLOCATIONS",
    "BUILTIN_TABLE",
    "build_allocation_table",
    "validate_allocation_table",
    "load_allocation_table",
    "get_default_allocation_table",
    "get_allocations_path",
    "allocate",
]
