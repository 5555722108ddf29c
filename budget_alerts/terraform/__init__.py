"""
Terraform Generation Module

Turns planned budget attachments into Terraform module calls, one file per
attachment.

Modules:
- generate_budgets: Generates the per-OU budget module files
- models: HCL building blocks
"""

from .generate_budgets import generate_budget_terraform
from ..utils import make_safe_variable_name

__all__ = [
    "generate_budget_terraform",
    "make_safe_variable_name",
]
