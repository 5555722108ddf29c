"""
Constants module for budget defaults and deployment naming.

This module contains values shared by the planner, the configuration loader
and the Terraform generator.
"""

from typing import Tuple

# Notification percentages used when neither the OU entry nor the default sets any
DEFAULT_THRESHOLDS: Tuple[float, ...] = (75.0, 100.0)

DEFAULT_CURRENCY = "USD"

# Currency marker carried by an explicitly disabled OU
DISABLED_CURRENCY = "NONE"

# Default block written by --init when no budget config exists yet
INITIAL_DEFAULT_AMOUNT = 100

# Centralized defaults for files and directories
DEFAULT_BUDGET_CONFIG_PATH = "budget-config.yaml"
DEFAULT_TERRAFORM_DIR = "test_environment/budgets"

# Terraform module consumed by every generated budget file
BUDGET_MODULE_SOURCE = "../modules/budget_alerts"

# IAM role assumed in the management account for org discovery
ORG_READER_ROLE_NAME = "OrgAndAccountInfoReader"
ORG_READER_SESSION_NAME = "BudgetAlertsOrgReaderSession"
