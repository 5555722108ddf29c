"""
Shared data types and models for budget-alerts.

This module contains the data classes used by the planner and its
collaborators, kept in one place to avoid circular imports.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union


Thresholds = Tuple[float, ...]
"""Ordered notification percentages, e.g. (75.0, 100.0)."""


@dataclass(frozen=True)
class OuNode:
    """One organizational unit as seen by the planner."""
    id: str
    parent_id: Optional[str]


@dataclass(frozen=True)
class OuTree:
    """
    Indexed, read-only view of the OU hierarchy.

    Built once per planning run by build_ou_tree(); the single-root
    invariant is enforced there.
    """
    by_id: Dict[str, OuNode]
    children: Dict[str, List[str]]
    roots: List[str]

    @property
    def root_id(self) -> str:
        return self.roots[0]

    def children_of(self, ou_id: str) -> List[str]:
        return self.children.get(ou_id, [])


@dataclass(frozen=True)
class InheritBudget:
    """No override: the OU takes its parent's effective budget."""


@dataclass(frozen=True)
class DisabledBudget:
    """Explicit disable: no budget applies from this OU down."""


@dataclass(frozen=True)
class ExplicitBudget:
    """Explicit override with every field already defaulted."""
    amount: float
    currency: str
    thresholds: Thresholds


BudgetSetting = Union[InheritBudget, ExplicitBudget, DisabledBudget]
"""Tri-state budget setting of a single OU."""


@dataclass(frozen=True)
class EffectiveBudget:
    """
    Budget that actually applies to an OU after inheritance.

    amount is None when no budget applies (disabled, or no default amount).
    """
    amount: Optional[float]
    currency: str
    thresholds: Thresholds = ()

    @property
    def is_active(self) -> bool:
        return self.amount is not None and self.amount > 0


@dataclass(frozen=True)
class Attachment:
    """A single OU at which one budget deployment unit is placed."""
    ou_id: str
    amount: float
    currency: str
    thresholds: Thresholds


@dataclass(frozen=True)
class OrgRoot:
    """AWS Organizations root."""
    id: str
    name: str


@dataclass(frozen=True)
class DiscoveredOu:
    """Organizational unit as returned by org discovery."""
    id: str
    name: str
    parent_id: str


@dataclass
class OrgStructure:
    """Organization root plus every OU below it, parents before children."""
    root: OrgRoot
    ous: List[DiscoveredOu] = field(default_factory=list)

    def planner_nodes(self) -> List[OuNode]:
        """
        Return the hierarchy as planner input.

        The organization root is added as the single node without a parent
        so that OUs directly below it have somewhere to inherit from.
        """
        nodes = [OuNode(id=self.root.id, parent_id=None)]
        nodes.extend(OuNode(id=ou.id, parent_id=ou.parent_id) for ou in self.ous)
        return nodes

    def find_ou(self, ou_id: str) -> Optional[DiscoveredOu]:
        for ou in self.ous:
            if ou.id == ou_id:
                return ou
        return None

    def name_of(self, ou_id: str) -> Optional[str]:
        if ou_id == self.root.id:
            return self.root.name
        ou = self.find_ou(ou_id)
        return ou.name if ou else None
