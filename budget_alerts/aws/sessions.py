"""AWS session management utilities."""

import logging
from typing import Optional

from boto3.session import Session
from mypy_boto3_sts.client import STSClient
from mypy_boto3_sts.type_defs import AssumeRoleResponseTypeDef, CredentialsTypeDef

from ..config import BudgetAlertsConfig
from ..constants import ORG_READER_ROLE_NAME, ORG_READER_SESSION_NAME

logger = logging.getLogger(__name__)


def assume_role(
    role_arn: str,
    session_name: str,
    base_session: Optional[Session] = None
) -> Session:
    """
    Assume an IAM role and return a session with temporary credentials.

    Args:
        role_arn: ARN of the role to assume
        session_name: Name for the role session
        base_session: Session to use for assuming role (defaults to boto3.Session())

    Returns:
        boto3 Session with assumed role credentials

    Raises:
        ClientError: If role assumption fails (AccessDenied, InvalidParameterValue, etc.)
    """
    if base_session is None:
        base_session = Session()

    sts: STSClient = base_session.client("sts")
    resp: AssumeRoleResponseTypeDef = sts.assume_role(
        RoleArn=role_arn,
        RoleSessionName=session_name
    )

    creds: CredentialsTypeDef = resp["Credentials"]
    logger.debug(f"Assumed {role_arn} as {session_name}")

    # Temporary credentials stay in the caller's region
    return Session(
        aws_access_key_id=creds["AccessKeyId"],
        aws_secret_access_key=creds["SecretAccessKey"],
        aws_session_token=creds["SessionToken"],
        region_name=base_session.region_name
    )


def get_management_account_session(
    config: BudgetAlertsConfig,
    base_session: Optional[Session] = None
) -> Session:
    """
    Return a session able to read the organization structure.

    Assumes OrgAndAccountInfoReader in the management account when one is
    configured, otherwise uses the current credentials.

    Args:
        config: budget-alerts configuration
        base_session: Session used for the role assumption and as fallback

    Returns:
        boto3 Session for AWS Organizations calls
    """
    if base_session is None:
        base_session = Session(region_name=config.region) if config.region else Session()

    if not config.management_account_id:
        logger.debug("No management_account_id provided, assuming already in management account")
        return base_session

    role_arn = f"arn:aws:iam::{config.management_account_id}:role/{ORG_READER_ROLE_NAME}"
    return assume_role(role_arn, ORG_READER_SESSION_NAME, base_session)
