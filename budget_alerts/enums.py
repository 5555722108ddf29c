"""
Enumerations for budget-alerts.

This module contains the enum types used throughout the application
to replace magic strings.
"""

from enum import Enum


class RegionState(str, Enum):
    """Classification of an OU subtree by its effective budgets."""
    UNIFORM = "uniform"
    MIXED = "mixed"


class RequestType(str, Enum):
    """CloudFormation custom resource request types."""
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"
