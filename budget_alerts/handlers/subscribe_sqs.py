"""Custom resource handler subscribing the aggregation queue to a member account topic."""

import json
import logging
from typing import Any, Dict, Optional

import boto3
from mypy_boto3_sns.client import SNSClient

from ..enums import RequestType

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def _queue_arn(properties: Dict[str, Any], topic_name: str, account_id: str, region: str) -> str:
    queue_arn = properties.get("queueArn")
    if queue_arn:
        return str(queue_arn)
    return f"arn:aws:sqs:{region}:{account_id}:{topic_name}-queue"


def handler(
    event: Dict[str, Any],
    context: Any,
    sns_client: Optional[SNSClient] = None
) -> Dict[str, Any]:
    """
    Handle a CloudFormation custom resource event.

    Create/Update subscribe the queue to the member topic with raw message
    delivery; Delete removes the subscription recorded in ``Data``.

    Args:
        event: Custom resource event
        context: Lambda context
        sns_client: SNS client (created when not given)

    Returns:
        Response with PhysicalResourceId and Data.SubscriptionArn

    Raises:
        ValueError: If topicName, accountId or region is missing
    """
    logger.info(f"Event: {json.dumps(event, default=str)}")

    if sns_client is None:
        sns_client = boto3.client("sns")

    if event.get("RequestType") == RequestType.DELETE.value:
        subscription_arn = (event.get("Data") or {}).get("SubscriptionArn")
        if subscription_arn:
            sns_client.unsubscribe(SubscriptionArn=subscription_arn)
            logger.info(f"Unsubscribed {subscription_arn}")
        return {
            "PhysicalResourceId": event.get("PhysicalResourceId") or "TopicSubscription",
            "Data": {},
        }

    properties = event.get("ResourceProperties") or {}
    topic_name = properties.get("topicName")
    account_id = properties.get("accountId")
    region = properties.get("region")
    if not topic_name or not account_id or not region:
        raise ValueError("topicName, accountId, and region are required in the event")

    queue_arn = _queue_arn(properties, topic_name, account_id, region)
    topic_arn = f"arn:aws:sns:{region}:{account_id}:{topic_name}"

    # Cross-account SNS to SQS subscriptions stay pending without raw delivery
    result = sns_client.subscribe(
        TopicArn=topic_arn,
        Protocol="sqs",
        Endpoint=queue_arn,
        Attributes={"RawMessageDelivery": "true"},
    )
    subscription_arn = result.get("SubscriptionArn")
    logger.info(f"Subscribed {queue_arn} to {topic_arn}: {subscription_arn}")

    return {
        "PhysicalResourceId": subscription_arn or f"TopicSubscription-{account_id}-{topic_name}",
        "Data": {"SubscriptionArn": subscription_arn},
    }
