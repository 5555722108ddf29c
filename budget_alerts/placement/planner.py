"""
Budget attachment planning.

Chooses the OUs at which budget deployment units are attached: the topmost
OU of every maximal uniform region whose budget is active. Attachments never
overlap and every budgeted region is covered exactly once.
"""

import logging
from typing import Iterable, List, Mapping, Set, Tuple

from ..config import BudgetConfig
from ..types import Attachment, EffectiveBudget, OuNode, OuTree
from .regions import compute_uniform_regions
from .resolver import compute_effective_budgets
from .tree import build_ou_tree

logger = logging.getLogger(__name__)


def select_budget_attachments(
    tree: OuTree,
    budgets: Mapping[str, EffectiveBudget],
    uniform_regions: Set[str]
) -> List[Attachment]:
    """
    Walk the tree top-down and emit one attachment per budgeted region.

    A region root with no selected ancestor ends the descent: it either gets
    an attachment (amount > 0) or, when disabled, needs none because its
    whole subtree shares that state.

    Args:
        tree: OU tree from build_ou_tree()
        budgets: Effective budget per OU
        uniform_regions: Roots of maximal uniform regions

    Returns:
        Attachments in pre-order, children in input order
    """
    attachments: List[Attachment] = []
    stack: List[Tuple[str, bool]] = [(tree.root_id, False)]

    while stack:
        ou_id, ancestor_selected = stack.pop()
        starts_region = ou_id in uniform_regions

        if starts_region and not ancestor_selected:
            budget = budgets[ou_id]
            if budget.is_active and budget.amount is not None:
                attachments.append(Attachment(
                    ou_id=ou_id,
                    amount=budget.amount,
                    currency=budget.currency,
                    thresholds=budget.thresholds,
                ))
            else:
                logger.debug(f"No budget attachment for OU {ou_id}: region has no active budget")
            continue

        selected = ancestor_selected or starts_region
        for child_id in reversed(tree.children_of(ou_id)):
            stack.append((child_id, selected))

    return attachments


def plan(ous: Iterable[OuNode], config: BudgetConfig) -> List[Attachment]:
    """
    Compute budget attachments for an organization.

    Builds the OU tree, resolves effective budgets, finds maximal uniform
    regions and selects their roots.

    Args:
        ous: Flat OU list with exactly one root
        config: Defaulted budget configuration

    Returns:
        Non-overlapping budget attachments

    Raises:
        BudgetPlanningError: Any structural or configuration error; no partial result is returned
    """
    tree = build_ou_tree(ous)
    budgets = compute_effective_budgets(tree, config)
    regions = compute_uniform_regions(tree, budgets)
    attachments = select_budget_attachments(tree, budgets, regions)

    logger.info(
        f"Planned {len(attachments)} budget attachments for {len(tree.by_id)} OUs "
        f"({len(regions)} uniform regions)"
    )
    return attachments
