"""
Effective budget resolution.

Every OU ends up with exactly one EffectiveBudget: its own override, an
explicit "disabled" marker, or whatever its parent resolves to. The root
falls back to the config default.
"""

import logging
from typing import Dict, List, Set

from ..config import BudgetConfig
from ..constants import DISABLED_CURRENCY
from ..types import (
    BudgetSetting,
    DisabledBudget,
    EffectiveBudget,
    ExplicitBudget,
    InheritBudget,
    OuTree,
)
from .errors import CycleError, StructuralError
from .validation import validate_budget_config

logger = logging.getLogger(__name__)

DISABLED_BUDGET = EffectiveBudget(amount=None, currency=DISABLED_CURRENCY, thresholds=())


def budget_setting_for(ou_id: str, config: BudgetConfig) -> BudgetSetting:
    """Return the tagged setting for ``ou_id``; OUs without an entry inherit."""
    entry = config.organizational_units.get(ou_id)
    if entry is None:
        return InheritBudget()
    return entry.to_setting(config.default)


def default_effective_budget(config: BudgetConfig) -> EffectiveBudget:
    default = config.default
    return EffectiveBudget(
        amount=default.amount,
        currency=default.currency,
        thresholds=tuple(default.thresholds),
    )


def _resolve(
    ou_id: str,
    tree: OuTree,
    config: BudgetConfig,
    resolved: Dict[str, EffectiveBudget]
) -> EffectiveBudget:
    """
    Resolve one OU by walking up its ancestor chain.

    The walk stops at the first OU that is already memoised or that can be
    resolved without its parent. Every OU passed on the way inherits that
    value, so each OU is visited once across all calls sharing ``resolved``.
    """
    pending: List[str] = []
    in_progress: Set[str] = set()
    current = ou_id

    while current not in resolved:
        if current in in_progress:
            raise CycleError(f"Cycle detected while resolving budget for OU {current}")

        node = tree.by_id.get(current)
        if node is None:
            raise StructuralError(f"Unknown OU id: {current}")

        setting = budget_setting_for(current, config)
        if isinstance(setting, ExplicitBudget):
            resolved[current] = EffectiveBudget(
                amount=setting.amount,
                currency=setting.currency,
                thresholds=setting.thresholds,
            )
            break

        if isinstance(setting, DisabledBudget):
            logger.debug(f"Budget disabled at OU {current}")
            resolved[current] = DISABLED_BUDGET
            break

        if node.parent_id is None:
            resolved[current] = default_effective_budget(config)
            break

        in_progress.add(current)
        pending.append(current)
        current = node.parent_id

    inherited = resolved[current]
    for pending_id in pending:
        resolved[pending_id] = inherited

    return resolved[ou_id]


def compute_effective_budgets(tree: OuTree, config: BudgetConfig) -> Dict[str, EffectiveBudget]:
    """
    Compute the effective budget of every OU in the tree.

    Args:
        tree: OU tree from build_ou_tree()
        config: Defaulted budget configuration

    Returns:
        Mapping of OU id to EffectiveBudget, in tree order

    Raises:
        UnknownOuError, UndefinedEntryError, InvalidAmountError: From config validation
        StructuralError: If an OU names a parent that is not in the tree
        CycleError: If an ancestor chain loops
    """
    validate_budget_config(config, tree.by_id.keys())

    resolved: Dict[str, EffectiveBudget] = {}
    for ou_id in tree.by_id:
        _resolve(ou_id, tree, config, resolved)

    return {ou_id: resolved[ou_id] for ou_id in tree.by_id}
