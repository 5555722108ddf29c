"""Custom resource handler that looks up the e-mail address of an account."""

import json
import logging
from typing import Any, Dict, Optional

import boto3
from mypy_boto3_organizations.client import OrganizationsClient

from ..enums import RequestType

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

DEFAULT_PHYSICAL_RESOURCE_ID = "DescribeAccountEmail"


def get_mail(org_client: OrganizationsClient, account_id: str) -> str:
    """
    Return the e-mail address registered for an account.

    Raises:
        RuntimeError: If the account has no e-mail address
        ClientError: If describe_account fails
    """
    response = org_client.describe_account(AccountId=account_id)
    email = response.get("Account", {}).get("Email")
    if not email:
        raise RuntimeError(f"Could not find account email for account ID: {account_id}")
    return email


def handler(
    event: Dict[str, Any],
    context: Any,
    org_client: Optional[OrganizationsClient] = None
) -> Dict[str, Any]:
    """
    Handle a CloudFormation custom resource event.

    Args:
        event: Custom resource event with ResourceProperties.AccountId
        context: Lambda context
        org_client: Organizations client (created when not given)

    Returns:
        Response with PhysicalResourceId and Data.Email

    Raises:
        ValueError: If AccountId is missing on Create/Update
    """
    logger.info(f"Event: {json.dumps(event, default=str)}")

    if event.get("RequestType") == RequestType.DELETE.value:
        return {
            "PhysicalResourceId": event.get("PhysicalResourceId") or DEFAULT_PHYSICAL_RESOURCE_ID,
            "Data": {},
        }

    account_id = (event.get("ResourceProperties") or {}).get("AccountId")
    if not account_id:
        raise ValueError("AccountId is required in the event")

    if org_client is None:
        org_client = boto3.client("organizations")

    email = get_mail(org_client, account_id)
    return {
        "PhysicalResourceId": f"{DEFAULT_PHYSICAL_RESOURCE_ID}-{account_id}",
        "Data": {"Email": email},
    }
