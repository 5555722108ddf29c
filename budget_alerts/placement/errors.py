"""
Errors raised by the budget planner.

All of them are fatal for a planning run: nothing is retried and no partial
attachment list is returned.
"""


class BudgetPlanningError(Exception):
    """Base class for every planner failure."""


class StructuralError(BudgetPlanningError):
    """The OU list does not form a single-rooted tree."""


class UnknownOuError(BudgetPlanningError):
    """The budget config references an OU that is not in the tree."""


class UndefinedEntryError(BudgetPlanningError):
    """A budget config key exists but has no value."""


class InvalidAmountError(BudgetPlanningError):
    """A budget amount is negative."""


class CycleError(BudgetPlanningError):
    """A node was reached again while its own result was still being computed."""
