from typing import Dict, List, Optional
import argparse
import logging

from boto3.session import Session
from botocore.exceptions import ClientError

from .budget_config import init_budget_config, load_budget_config
from .config import BudgetAlertsConfig, BudgetConfig
from .usage import load_yaml_config, parse_cli_args, merge_configs
from .aws.organization import discover_org_structure
from .aws.sessions import get_management_account_session
from .placement import BudgetPlanningError, plan, validate_budget_config
from .terraform.generate_budgets import generate_budget_terraform
from .types import Attachment, OrgStructure
from .output import OutputHandler

logger = logging.getLogger(__name__)


def setup_configuration(cli_args: argparse.Namespace, yaml_config: Dict) -> BudgetAlertsConfig:
    """
    Merge and validate configuration from YAML and CLI arguments.

    Args:
        cli_args: Parsed command line arguments
        yaml_config: Configuration loaded from YAML file

    Returns:
        Validated BudgetAlertsConfig object

    Raises:
        SystemExit: If configuration validation fails
    """
    try:
        final_config = merge_configs(yaml_config, cli_args)
    except (ValueError, TypeError) as e:
        OutputHandler.error("Configuration Error", e)
        exit(1)

    OutputHandler.success("Final Config", final_config.model_dump())

    return final_config


def setup_organization_context(
    final_config: BudgetAlertsConfig,
    base_session: Optional[Session] = None
) -> OrgStructure:
    """
    Discover the organization structure with management account access.

    Raises:
        RuntimeError: If no organization root is found
        ClientError: If role assumption or AWS API calls fail
    """
    mgmt_session = get_management_account_session(final_config, base_session)
    return discover_org_structure(mgmt_session)


def plan_budget_attachments(budget_config: BudgetConfig, org: OrgStructure) -> List[Attachment]:
    """
    Validate the budget config against the organization and plan attachments.

    Raises:
        BudgetPlanningError: If the config or the OU structure is invalid
    """
    nodes = org.planner_nodes()
    validate_budget_config(budget_config, [node.id for node in nodes])
    return plan(nodes, budget_config)


def handle_budget_workflow(final_config: BudgetAlertsConfig, org: OrgStructure) -> None:
    """
    Load the budget config, plan attachments and generate Terraform files.

    Args:
        final_config: Validated budget-alerts configuration
        org: Discovered organization structure
    """
    budget_config = load_budget_config(final_config.budget_config_path)
    attachments = plan_budget_attachments(budget_config, org)

    OutputHandler.attachments_planned(attachments, org.name_of)

    written = generate_budget_terraform(
        attachments,
        org,
        final_config.terraform_dir,
        budget_config.default.aggregation_sns_topic_arn,
    )
    OutputHandler.success(f"Generated {len(written)} budget Terraform files in {final_config.terraform_dir}")


def handle_init_workflow(final_config: BudgetAlertsConfig, org: OrgStructure) -> None:
    """Create or refresh the budget config file from the live OU structure."""
    config = init_budget_config(final_config.budget_config_path, org)
    OutputHandler.success(
        f"Written budget config to {final_config.budget_config_path}",
        f"{len(config.organizational_units)} OU entries"
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for budget-alerts."""
    logging.basicConfig(level=logging.INFO)

    cli_args = parse_cli_args(argv)
    yaml_config = load_yaml_config(cli_args.config)

    final_config = setup_configuration(cli_args, yaml_config)

    try:
        org = setup_organization_context(final_config)

        if cli_args.init:
            handle_init_workflow(final_config, org)
            return

        handle_budget_workflow(final_config, org)

    except BudgetPlanningError as e:
        OutputHandler.error("Budget Planning Error", e)
        logger.error(f"Budget planning failed: {e}", exc_info=True)
        exit(1)
    except FileNotFoundError as e:
        OutputHandler.error("Missing Budget Config", e)
        logger.error(f"Budget config not found: {e}", exc_info=True)
        exit(1)
    except ValueError as e:
        OutputHandler.error("Configuration Error", e)
        logger.error(f"Invalid configuration: {e}", exc_info=True)
        exit(1)
    except RuntimeError as e:
        OutputHandler.error("Runtime Error", e)
        logger.error(f"Runtime error during budget generation: {e}", exc_info=True)
        exit(1)
    except ClientError as e:
        error_code = e.response['Error']['Code']
        OutputHandler.error(f"AWS API Error ({error_code})", e)
        logger.error(f"AWS API error: {e}", exc_info=True)
        exit(1)


if __name__ == "__main__":
    main()
