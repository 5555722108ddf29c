import argparse
import yaml
from typing import Any, Dict, List, Optional
from .config import BudgetAlertsConfig


def load_yaml_config(path: str) -> Dict[str, Any]:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file

    Returns:
        Dictionary containing the loaded configuration, or empty dict if file not found
    """
    try:
        with open(path, 'r') as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"Config file '{path}' not found. Continuing without it.")
        return {}


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments for the budget-alerts tool.

    Args:
        argv: Arguments to parse (defaults to sys.argv)

    Returns:
        Parsed command line arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="budget-alerts",
        description="budget-alerts - plan OU budget attachments and generate budget Terraform"
    )

    parser.add_argument(
        '--config',
        required=True,
        type=str,
        help='Path to config YAML'
    )

    # Paths (override YAML if provided)
    parser.add_argument(
        '--budget-config',
        dest='budget_config_path',
        type=str,
        help='Budget config YAML with default and per-OU budgets (default budget-config.yaml)'
    )
    parser.add_argument(
        '--terraform-dir',
        dest='terraform_dir',
        type=str,
        help='Directory to output budget Terraform (default test_environment/budgets)'
    )

    # AWS
    parser.add_argument(
        '--management-account-id',
        dest='management_account_id',
        type=str,
        help='AWS Organization management account ID'
    )
    parser.add_argument(
        '--region',
        dest='region',
        type=str,
        help='AWS region for the session'
    )

    parser.add_argument(
        '--init',
        dest='init',
        action='store_true',
        help='Create or refresh the budget config from the live OU structure and exit'
    )

    return parser.parse_args(argv)


def merge_configs(yaml_config: Dict[str, Any], cli_args: argparse.Namespace) -> BudgetAlertsConfig:
    """
    Merge YAML configuration with CLI arguments and validate the result.

    Args:
        yaml_config: Configuration loaded from YAML file
        cli_args: Parsed command line arguments

    Returns:
        Validated BudgetAlertsConfig object

    Raises:
        ValueError: If configuration validation fails
        TypeError: If configuration has type errors
    """
    # Start with YAML
    merged = yaml_config.copy()

    # Apply CLI overrides (only if CLI provided them)
    cli_dict = {
        k: v for k, v in vars(cli_args).items()
        if k in BudgetAlertsConfig.model_fields and v is not None
    }
    merged.update(cli_dict)

    return BudgetAlertsConfig(**merged)
