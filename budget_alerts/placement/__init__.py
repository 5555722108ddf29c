"""
Budget placement planning module.

Determines where budget deployment units attach in the OU hierarchy so that
every budgeted OU is covered exactly once.
"""

from .errors import (
    BudgetPlanningError,
    CycleError,
    InvalidAmountError,
    StructuralError,
    UndefinedEntryError,
    UnknownOuError,
)
from .planner import plan, select_budget_attachments
from .regions import RegionStatus, UniformRegionClassifier, budgets_equal, compute_uniform_regions
from .resolver import compute_effective_budgets
from .tree import build_ou_tree
from .validation import validate_budget_config

__all__ = [
    "BudgetPlanningError",
    "CycleError",
    "InvalidAmountError",
    "RegionStatus",
    "StructuralError",
    "UndefinedEntryError",
    "UniformRegionClassifier",
    "UnknownOuError",
    "budgets_equal",
    "build_ou_tree",
    "compute_effective_budgets",
    "compute_uniform_regions",
    "plan",
    "select_budget_attachments",
    "validate_budget_config",
]
