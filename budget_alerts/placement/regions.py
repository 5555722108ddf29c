"""
Uniform-region classification.

Finds the subtrees in which every OU carries an equal value and marks the
topmost OU of each such subtree. The classifier is generic over the
compared value; budgets are compared with budgets_equal().
"""

import logging
import operator
from dataclasses import dataclass
from typing import Callable, Dict, Generic, List, Mapping, Set, Tuple, TypeVar

from ..enums import RegionState
from ..types import EffectiveBudget, OuTree
from .errors import CycleError, StructuralError

logger = logging.getLogger(__name__)

T = TypeVar('T')


def budgets_equal(left: EffectiveBudget, right: EffectiveBudget) -> bool:
    """
    Compare two effective budgets field by field.

    Thresholds are compared in order. A budget without an amount never
    equals one with an amount.
    """
    if (left.amount is None) != (right.amount is None):
        return False
    return (
        left.amount == right.amount
        and left.currency == right.currency
        and tuple(left.thresholds) == tuple(right.thresholds)
    )


@dataclass(frozen=True)
class RegionStatus(Generic[T]):
    """Classification of one OU together with the OU's own value."""
    state: RegionState
    value: T

    @property
    def is_uniform(self) -> bool:
        return self.state is RegionState.UNIFORM


class UniformRegionClassifier(Generic[T]):
    """
    Classifies every OU subtree as uniform or mixed.

    A subtree is uniform when it is a leaf, or when every child subtree is
    uniform with a value equal to the OU's own value. Results are memoised
    per instance; create one classifier per planning run.
    """

    def __init__(
        self,
        tree: OuTree,
        values: Mapping[str, T],
        equals: Callable[[T, T], bool] = operator.eq
    ):
        """
        Initialize the classifier.

        Args:
            tree: OU tree from build_ou_tree()
            values: Per-OU value to compare, e.g. effective budgets
            equals: Equality predicate for two values
        """
        self.tree = tree
        self.values = values
        self.equals = equals
        self._statuses: Dict[str, RegionStatus[T]] = {}
        self._in_progress: Set[str] = set()

    def status(self, ou_id: str) -> RegionStatus[T]:
        """
        Return the classification of ``ou_id``, computing its subtree if needed.

        Raises:
            CycleError: If the subtree below ``ou_id`` reaches an OU that is still in progress
            StructuralError: If an OU in the subtree has no value
        """
        if ou_id not in self._statuses:
            self._compute(ou_id)
        return self._statuses[ou_id]

    def statuses(self) -> Dict[str, RegionStatus[T]]:
        """Classify every OU in the tree."""
        return {ou_id: self.status(ou_id) for ou_id in self.tree.by_id}

    def is_maximal(self, ou_id: str) -> bool:
        """
        Check whether ``ou_id`` is the topmost OU of a uniform region.

        True when the OU is uniform and its parent is absent, mixed, or
        uniform with a different value. A uniform child of an equal uniform
        parent belongs to the parent's region.
        """
        own = self.status(ou_id)
        if not own.is_uniform:
            return False

        parent_id = self.tree.by_id[ou_id].parent_id
        if parent_id is None or parent_id not in self.tree.by_id:
            return True

        parent = self.status(parent_id)
        if not parent.is_uniform:
            return True
        return not self.equals(parent.value, own.value)

    def maximal_regions(self) -> Set[str]:
        """Return the ids of every OU that roots a maximal uniform region."""
        return {ou_id for ou_id in self.tree.by_id if self.is_maximal(ou_id)}

    def _value_of(self, ou_id: str) -> T:
        if ou_id not in self.values:
            raise StructuralError(f"No value for OU {ou_id}")
        return self.values[ou_id]

    def _compute(self, start_id: str) -> None:
        """Post-order walk of the subtree below ``start_id`` using an explicit stack."""
        stack: List[Tuple[str, bool]] = [(start_id, False)]

        while stack:
            ou_id, children_done = stack.pop()
            if ou_id in self._statuses:
                continue

            if children_done:
                self._statuses[ou_id] = self._classify(ou_id)
                self._in_progress.discard(ou_id)
                continue

            if ou_id in self._in_progress:
                raise CycleError(f"Cycle detected in OU tree at {ou_id}")
            self._in_progress.add(ou_id)
            stack.append((ou_id, True))

            for child_id in reversed(self.tree.children_of(ou_id)):
                if child_id in self._statuses:
                    continue
                if child_id in self._in_progress:
                    raise CycleError(f"Cycle detected in OU tree at {child_id}")
                stack.append((child_id, False))

    def _classify(self, ou_id: str) -> RegionStatus[T]:
        value = self._value_of(ou_id)
        for child_id in self.tree.children_of(ou_id):
            child = self._statuses[child_id]
            if not child.is_uniform or not self.equals(child.value, value):
                return RegionStatus(RegionState.MIXED, value)
        return RegionStatus(RegionState.UNIFORM, value)


def compute_uniform_regions(tree: OuTree, budgets: Mapping[str, EffectiveBudget]) -> Set[str]:
    """
    Find the roots of all maximal uniform budget regions.

    Args:
        tree: OU tree from build_ou_tree()
        budgets: Effective budget per OU

    Returns:
        Set of OU ids, each the topmost OU of a region sharing one budget
    """
    classifier: UniformRegionClassifier[EffectiveBudget] = UniformRegionClassifier(
        tree, budgets, budgets_equal
    )
    regions = classifier.maximal_regions()
    logger.debug(f"Found {len(regions)} maximal uniform budget regions")
    return regions
