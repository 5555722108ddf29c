"""
Tests for budget_alerts.placement.planner module.

Covers typical organizations plus the coverage, isolation and idempotence
properties of the attachment set.
"""

from typing import Any, Dict, List, Optional, Set, Tuple

import pytest

from budget_alerts.config import BudgetConfig
from budget_alerts.constants import DEFAULT_THRESHOLDS
from budget_alerts.placement import (
    CycleError,
    InvalidAmountError,
    StructuralError,
    build_ou_tree,
    compute_effective_budgets,
    compute_uniform_regions,
    plan,
    select_budget_attachments,
)
from budget_alerts.types import Attachment, EffectiveBudget, OuNode, OuTree


def make_ous(edges: List[Tuple[str, Optional[str]]]) -> List[OuNode]:
    return [OuNode(ou_id, parent_id) for ou_id, parent_id in edges]


def make_config(
    default: Optional[Dict[str, Any]] = None,
    ous: Optional[Dict[str, Any]] = None
) -> BudgetConfig:
    return BudgetConfig.model_validate({"default": default, "organizationalUnits": ous or {}})


def ancestors_or_self(tree: OuTree, ou_id: str) -> List[str]:
    chain = []
    current: Optional[str] = ou_id
    while current is not None:
        chain.append(current)
        current = tree.by_id[current].parent_id
    return chain


# root -> prod(50) -> {team-a, team-b(disabled) -> {x}}
# root -> dev -> {d1, d2(20)}
# root -> sandbox(disabled)
ORG_EDGES: List[Tuple[str, Optional[str]]] = [
    ("root", None),
    ("prod", "root"),
    ("team-a", "prod"),
    ("team-b", "prod"),
    ("x", "team-b"),
    ("dev", "root"),
    ("d1", "dev"),
    ("d2", "dev"),
    ("sandbox", "root"),
]
ORG_OVERRIDES: Dict[str, Any] = {
    "prod": {"amount": 50},
    "team-b": {"amount": None},
    "d2": {"amount": 20},
    "sandbox": {"amount": None},
}
USD_10 = {"amount": 10, "currency": "USD"}


class TestPlanOrganizations:
    """Overrides, disables and splits on small organizations."""

    def test_override_on_intermediate_ou(self) -> None:
        """Test an override on an intermediate OU attaches there only."""
        ous = make_ous([("root", None), ("prod", "root"), ("teamA", "prod"), ("teamB", "prod")])
        config = make_config(USD_10, {"prod": {"amount": 50, "currency": "USD"}})

        assert plan(ous, config) == [Attachment("prod", 50, "USD", DEFAULT_THRESHOLDS)]

    def test_equal_explicit_and_inherited_values_split_by_sibling(self) -> None:
        """Test equal siblings get separate attachments under a mixed parent."""
        ous = make_ous([("root", None), ("env", "root"), ("dev", "env"), ("prod", "env")])
        config = make_config(USD_10, {
            "dev": {"amount": 10, "currency": "USD"},
            "prod": {"amount": 50, "currency": "USD"},
        })

        assert plan(ous, config) == [
            Attachment("dev", 10, "USD", DEFAULT_THRESHOLDS),
            Attachment("prod", 50, "USD", DEFAULT_THRESHOLDS),
        ]

    def test_override_on_one_leaf(self) -> None:
        """Test an override on one leaf splits its parent."""
        ous = make_ous([("root", None), ("apps", "root"), ("payroll", "apps"), ("accounting", "apps")])
        config = make_config(USD_10, {"payroll": {"amount": 20, "currency": "USD"}})

        assert plan(ous, config) == [
            Attachment("payroll", 20, "USD", DEFAULT_THRESHOLDS),
            Attachment("accounting", 10, "USD", DEFAULT_THRESHOLDS),
        ]

    def test_disabled_child_avoids_parent_attachment(self) -> None:
        """Test a disabled child moves the attachment to its enabled sibling."""
        ous = make_ous([("r", None), ("ou-a", "r"), ("ou-b", "ou-a"), ("ou-c", "ou-a")])
        config = make_config(None, {
            "ou-a": {"amount": 100, "currency": "EUR"},
            "ou-b": {"amount": None},
        })

        assert plan(ous, config) == [Attachment("ou-c", 100, "EUR", DEFAULT_THRESHOLDS)]

    def test_no_default_no_overrides(self) -> None:
        """Test nothing is attached without any budget."""
        ous = make_ous([("r", None), ("ou-a", "r"), ("ou-b", "ou-a")])

        assert plan(ous, make_config()) == []

    def test_same_amount_different_thresholds(self) -> None:
        """Test differing thresholds split otherwise equal budgets."""
        ous = make_ous([("ou-a", None), ("ou-b", "ou-a"), ("ou-c", "ou-a")])
        config = make_config(None, {
            "ou-a": {"amount": 100, "currency": "EUR", "thresholds": [50, 90]},
            "ou-b": {"amount": 100, "currency": "EUR"},
        })

        assert plan(ous, config) == [
            Attachment("ou-b", 100, "EUR", DEFAULT_THRESHOLDS),
            Attachment("ou-c", 100, "EUR", (50, 90)),
        ]

    def test_uniform_org_attaches_at_root(self) -> None:
        """Test a uniform organization is attached at the root."""
        ous = make_ous([("root", None), ("a", "root"), ("b", "a")])

        assert plan(ous, make_config(USD_10)) == [Attachment("root", 10, "USD", DEFAULT_THRESHOLDS)]

    def test_zero_default_amount_attaches_nothing(self) -> None:
        """Test a zero default amount attaches nothing."""
        ous = make_ous([("root", None), ("a", "root")])

        assert plan(ous, make_config({"amount": 0, "currency": "USD"})) == []

    def test_mixed_org(self) -> None:
        """Test overrides and disables combined in one organization."""
        attachments = plan(make_ous(ORG_EDGES), make_config(USD_10, ORG_OVERRIDES))

        assert attachments == [
            Attachment("team-a", 50, "USD", DEFAULT_THRESHOLDS),
            Attachment("d1", 10, "USD", DEFAULT_THRESHOLDS),
            Attachment("d2", 20, "USD", DEFAULT_THRESHOLDS),
        ]


class TestPlanProperties:
    """Structural guarantees of the attachment set."""

    def test_coverage_without_overlap(self) -> None:
        """Test every budgeted OU is covered exactly once."""
        tree = build_ou_tree(make_ous(ORG_EDGES))
        config = make_config(USD_10, ORG_OVERRIDES)
        budgets = compute_effective_budgets(tree, config)
        regions = compute_uniform_regions(tree, budgets)
        attached: Set[str] = {a.ou_id for a in plan(make_ous(ORG_EDGES), config)}

        for ou_id in tree.by_id:
            chain = ancestors_or_self(tree, ou_id)
            covering = [c for c in chain if c in attached]
            assert len(covering) <= 1
            in_region = any(c in regions for c in chain)
            if in_region and budgets[ou_id].is_active:
                assert len(covering) == 1
            if not budgets[ou_id].is_active:
                assert covering == []

    def test_attachment_budget_matches_every_covered_ou(self) -> None:
        """Test each covered OU receives its own effective budget."""
        tree = build_ou_tree(make_ous(ORG_EDGES))
        config = make_config(USD_10, ORG_OVERRIDES)
        budgets = compute_effective_budgets(tree, config)
        by_ou = {a.ou_id: a for a in plan(make_ous(ORG_EDGES), config)}

        for ou_id in tree.by_id:
            for ancestor in ancestors_or_self(tree, ou_id):
                if ancestor in by_ou:
                    attachment = by_ou[ancestor]
                    assert budgets[ou_id] == EffectiveBudget(
                        attachment.amount, attachment.currency, attachment.thresholds
                    )

    def test_disabled_sibling_isolation(self) -> None:
        """Test disabling one sibling leaves the others covered."""
        ous = make_ous(ORG_EDGES)
        enabled = dict(ORG_OVERRIDES)
        del enabled["team-b"]

        with_disable = plan(ous, make_config(USD_10, ORG_OVERRIDES))
        without_disable = plan(ous, make_config(USD_10, enabled))

        dev_subtree = {"dev", "d1", "d2"}
        assert [a for a in with_disable if a.ou_id in dev_subtree] == \
            [a for a in without_disable if a.ou_id in dev_subtree]
        assert Attachment("prod", 50, "USD", DEFAULT_THRESHOLDS) in without_disable

    def test_idempotent(self) -> None:
        ous = make_ous(ORG_EDGES)
        config = make_config(USD_10, ORG_OVERRIDES)

        assert plan(ous, config) == plan(ous, config)

    def test_attachment_set_independent_of_sibling_order(self) -> None:
        """Test sibling order does not change the attachment set."""
        config = make_config(USD_10, ORG_OVERRIDES)

        forward = plan(make_ous(ORG_EDGES), config)
        backward = plan(make_ous(list(reversed(ORG_EDGES))), config)

        assert set(forward) == set(backward)


class TestPlanDuplicateIds:
    """Repeated OU ids resolve to their last occurrence."""

    def test_repeated_ou_is_attached_once(self) -> None:
        """Test an OU listed twice under the same parent gets one attachment."""
        ous = make_ous([("r", None), ("x", "r"), ("x", "r"), ("y", "r")])

        attachments = plan(ous, make_config(USD_10, {"x": {"amount": 20}}))

        assert [a.ou_id for a in attachments].count("x") == 1
        assert [(a.ou_id, a.amount) for a in attachments] == [("x", 20), ("y", 10)]

    def test_moved_child_does_not_mix_old_parent(self) -> None:
        """Test a child re-listed under another parent leaves its old parent uniform."""
        ous = make_ous([("r", None), ("p", "r"), ("q", "r"), ("x", "p"), ("x", "q")])

        attachments = plan(ous, make_config(USD_10, {"p": {"amount": 50}}))

        assert [(a.ou_id, a.amount) for a in attachments] == [("p", 50), ("q", 10)]


class TestPlanErrors:
    """Failures propagate and no partial result is produced."""

    def test_forest_raises(self) -> None:
        """Test more than one root raises StructuralError."""
        with pytest.raises(StructuralError):
            plan(make_ous([("a", None), ("b", None)]), make_config(USD_10))

    def test_negative_amount_raises(self) -> None:
        """Test a negative amount raises InvalidAmountError."""
        ous = make_ous([("root", None), ("a", "root")])

        with pytest.raises(InvalidAmountError):
            plan(ous, make_config(USD_10, {"a": {"amount": -5}}))

    def test_cycle_detached_from_root_raises(self) -> None:
        """Test a cycle detached from the root raises CycleError."""
        ous = make_ous([("root", None), ("a", "b"), ("b", "a")])

        with pytest.raises(CycleError):
            plan(ous, make_config(USD_10))


class TestSelectBudgetAttachments:
    """Test select_budget_attachments directly."""

    def test_nested_region_under_selected_ancestor_is_skipped(self) -> None:
        """Test a region below a selected ancestor is not attached again."""
        tree = build_ou_tree(make_ous([("r", None), ("a", "r")]))
        budget = EffectiveBudget(10, "USD", DEFAULT_THRESHOLDS)

        attachments = select_budget_attachments(tree, {"r": budget, "a": budget}, {"r", "a"})

        assert [a.ou_id for a in attachments] == ["r"]

    def test_disabled_region_stops_descent(self) -> None:
        """Test a disabled region stops descent."""
        tree = build_ou_tree(make_ous([("r", None), ("a", "r")]))
        budgets = {"r": EffectiveBudget(None, "NONE"), "a": EffectiveBudget(5, "USD")}

        assert select_budget_attachments(tree, budgets, {"r", "a"}) == []

    def test_descends_through_mixed_nodes(self) -> None:
        """Test selection descends through mixed OUs."""
        tree = build_ou_tree(make_ous([("r", None), ("a", "r"), ("b", "a")]))
        budgets = {
            "r": EffectiveBudget(1, "USD"),
            "a": EffectiveBudget(1, "USD"),
            "b": EffectiveBudget(2, "USD"),
        }

        attachments = select_budget_attachments(tree, budgets, {"b"})

        assert attachments == [Attachment("b", 2, "USD", ())]
