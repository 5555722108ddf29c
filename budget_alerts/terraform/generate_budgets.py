"""
Budget Terraform Generation Module

Generates one Terraform module call per planned budget attachment. Each
module deploys the budget, its notifications and the optional aggregation
topic wiring to every account below the target OU.
"""

import logging
from pathlib import Path
from typing import List, Optional, Set

from ..constants import BUDGET_MODULE_SOURCE, DEFAULT_TERRAFORM_DIR
from ..types import Attachment, OrgStructure
from ..utils import make_safe_variable_name
from .models import TerraformComment, TerraformElement, TerraformModule, TerraformParameter

# Set up logging
logger = logging.getLogger(__name__)


def _write_budget_file(filepath: Path, content: str, attachment: Attachment) -> None:
    with open(filepath, 'w') as f:
        f.write(content)
    logger.info(f"Wrote budget for {attachment.ou_id} to {filepath}")


def _attachment_name(attachment: Attachment, org: OrgStructure, used_names: Set[str]) -> str:
    """
    Pick a unique Terraform-safe name for the attachment's OU.

    Raises:
        RuntimeError: If the OU is not part of the organization structure
    """
    if attachment.ou_id == org.root.id:
        name = "root"
    else:
        ou_name = org.name_of(attachment.ou_id)
        if ou_name is None:
            raise RuntimeError(f"OU {attachment.ou_id} not found in organization structure")
        name = make_safe_variable_name(ou_name) or make_safe_variable_name(attachment.ou_id)

    # OU names are only unique per parent
    if name in used_names:
        name = f"{name}_{make_safe_variable_name(attachment.ou_id)}"
    used_names.add(name)
    return name


def _build_budget_terraform_module(
    module_name: str,
    attachment: Attachment,
    comment: str,
    aggregation_sns_topic_arn: Optional[str] = None
) -> str:
    """
    Build Terraform module call for one budget attachment.

    Args:
        module_name: Name of the Terraform module instance (e.g., "budget_alerts_prod")
        attachment: Planned attachment with amount, currency and thresholds
        comment: Comment line describing the target (e.g., "OU Prod")
        aggregation_sns_topic_arn: Optional central topic receiving all alerts

    Returns:
        Complete Terraform module block as a string
    """
    parameters: List[TerraformElement] = [
        TerraformParameter("target_id", attachment.ou_id),
        TerraformComment(""),
        TerraformComment("Budget"),
        TerraformParameter("amount", attachment.amount),
        TerraformParameter("currency", attachment.currency),
        TerraformComment(""),
        TerraformComment("Notifications"),
        TerraformParameter("thresholds", list(attachment.thresholds)),
    ]
    if aggregation_sns_topic_arn:
        parameters.append(TerraformParameter("aggregation_sns_topic_arn", aggregation_sns_topic_arn))

    module = TerraformModule(
        name=module_name,
        source=BUDGET_MODULE_SOURCE,
        comment=comment,
        parameters=parameters,
    )
    return module.render()


def generate_budget_terraform(
    attachments: List[Attachment],
    org: OrgStructure,
    output_dir: str = DEFAULT_TERRAFORM_DIR,
    aggregation_sns_topic_arn: Optional[str] = None
) -> List[Path]:
    """
    Generate Terraform files for budget deployment based on planned attachments.

    Args:
        attachments: Planner output
        org: Organization structure for OU name lookups
        output_dir: Directory to write Terraform files to
        aggregation_sns_topic_arn: Optional central topic passed to every module

    Returns:
        Paths of the written files, in attachment order

    Raises:
        RuntimeError: If an attachment targets an OU missing from the organization
    """
    if not attachments:
        return []

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    written: List[Path] = []
    used_names: Set[str] = set()
    for attachment in attachments:
        name = _attachment_name(attachment, org, used_names)
        if attachment.ou_id == org.root.id:
            comment = "Organization Root"
        else:
            comment = f"OU {org.name_of(attachment.ou_id)}"

        content = _build_budget_terraform_module(
            module_name=f"budget_alerts_{name}",
            attachment=attachment,
            comment=comment,
            aggregation_sns_topic_arn=aggregation_sns_topic_arn,
        )

        filepath = output_path / f"{name}_budget.tf"
        _write_budget_file(filepath, content, attachment)
        written.append(filepath)

    return written
