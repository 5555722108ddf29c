"""Lambda handler forwarding budget notifications to the central SNS topic."""

import json
import logging
import os
from typing import Any, Dict, List, Optional

import boto3
from mypy_boto3_sns.client import SNSClient
from mypy_boto3_sns.type_defs import MessageAttributeValueTypeDef

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

TARGET_TOPIC_ENV_VAR = "TARGET_SNS_TOPIC_ARN"


def _message_attributes(attributes: Dict[str, Any]) -> Dict[str, MessageAttributeValueTypeDef]:
    """Convert SNS event attributes ({Type, Value}) to publish attributes."""
    return {
        key: {"DataType": value.get("Type", "String"), "StringValue": value.get("Value", "")}
        for key, value in attributes.items()
    }


def forward_message(record: Dict[str, Any], target_topic_arn: str, sns_client: SNSClient) -> str:
    """
    Publish one event record to the target topic.

    SNS records carry the message under ``Sns``; SQS records (raw delivery)
    carry it as ``body``.

    Returns:
        MessageId of the forwarded message

    Raises:
        ClientError: If publishing fails
    """
    sns_message = record.get("Sns")
    if sns_message is not None:
        message_id = sns_message.get("MessageId")
        publish_args: Dict[str, Any] = {
            "TopicArn": target_topic_arn,
            "Message": sns_message.get("Message", ""),
            "MessageAttributes": _message_attributes(sns_message.get("MessageAttributes") or {}),
        }
        if sns_message.get("Subject"):
            publish_args["Subject"] = sns_message["Subject"]
    else:
        message_id = record.get("messageId")
        publish_args = {"TopicArn": target_topic_arn, "Message": record.get("body", "")}

    logger.info(f"Forwarding message with ID: {message_id}")
    try:
        response = sns_client.publish(**publish_args)
    except Exception:
        logger.error(f"Failed to forward message {message_id}", exc_info=True)
        raise

    new_message_id = response.get("MessageId", "")
    logger.info(f"Message forwarded successfully. New MessageId: {new_message_id}")
    return new_message_id


def handler(
    event: Dict[str, Any],
    context: Any,
    sns_client: Optional[SNSClient] = None
) -> List[str]:
    """
    Forward every record in an SNS or SQS event to TARGET_SNS_TOPIC_ARN.

    Raises:
        RuntimeError: If TARGET_SNS_TOPIC_ARN is not set
    """
    logger.info(f"Received event: {json.dumps(event, default=str)}")

    target_topic_arn = os.environ.get(TARGET_TOPIC_ENV_VAR)
    if not target_topic_arn:
        raise RuntimeError(f"{TARGET_TOPIC_ENV_VAR} environment variable is not set")

    if sns_client is None:
        sns_client = boto3.client("sns")

    records = event.get("Records") or []
    forwarded = [forward_message(record, target_topic_arn, sns_client) for record in records]
    logger.info(f"Successfully forwarded {len(forwarded)} message(s) to {target_topic_arn}")
    return forwarded
