"""
Amazon SNS notifications for invoice processing outcomes.

Subscribers (email, ops chat, downstream queues) receive one message per
processed document, either a success carrying a summary of the extracted
fields or an error carrying the failure message.
"""

import json
from datetime import datetime, UTC
from typing import Any, Optional
from dataclasses import dataclass, asdict

import boto3
from loguru import logger

from ...core.config import settings

SNS_SUBJECT_LIMIT = 100


@dataclass
class InvoiceProcessedEvent:
    """
    Notification payload for one processing outcome.

    ``type`` is "success" or "error"; ``data`` carries the extracted-field
    summary on success and is None otherwise.
    """

    type: str
    message: str
    fileName: str
    data: Optional[Any] = None
    environment: Optional[str] = None
    timestamp: Optional[str] = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now(UTC).isoformat()
        if self.environment is None:
            self.environment = settings.app_env

    @property
    def subject(self) -> str:
        subject = f"Invoice Processing {self.type.upper()}: {self.fileName}"
        return subject[:SNS_SUBJECT_LIMIT]

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, default=str)


class NotificationPublisher:
    """
    Publishes processing events to an SNS topic.

    Usage:
        # From settings (SNS_TOPIC_ARN)
        publisher = NotificationPublisher.from_settings()

        # Explicit client, e.g. a Mock in tests
        publisher = NotificationPublisher(sns_client=client, topic_arn=arn)

        # Disabled mode (no topic configured)
        publisher = NotificationPublisher(sns_client=None, topic_arn=None)
    """

    def __init__(self, sns_client: Optional[object] = None, topic_arn: Optional[str] = None):
        self.sns_client = sns_client
        self.topic_arn = topic_arn

    @classmethod
    def from_settings(cls) -> "NotificationPublisher":
        if not settings.sns_topic_arn:
            return cls(sns_client=None, topic_arn=None)
        client = boto3.client("sns", region_name=settings.aws_region)
        return cls(sns_client=client, topic_arn=settings.sns_topic_arn)

    @property
    def enabled(self) -> bool:
        return self.sns_client is not None and bool(self.topic_arn)

    def publish(self, event: InvoiceProcessedEvent) -> bool:
        """
        Publish ``event``; returns True if SNS accepted it.

        Failures are logged and swallowed so a notification problem never
        fails the document it reports on.
        """
        if not self.enabled:
            return False

        try:
            self.sns_client.publish(
                TopicArn=self.topic_arn,
                Subject=event.subject,
                Message=event.to_json(),
            )
        except Exception as e:
            logger.error("Error sending SNS notification", error=str(e), file_name=event.fileName)
            return False

        logger.info(f"SNS notification sent: {event.type} for {event.fileName}")
        return True

    def notify_success(self, file_name: str, message: str, data: Optional[Any] = None) -> bool:
        return self.publish(InvoiceProcessedEvent(type="success", message=message, fileName=file_name, data=data))

    def notify_error(self, file_name: str, message: str) -> bool:
        return self.publish(InvoiceProcessedEvent(type="error", message=message, fileName=file_name))

    def alert(self, subject: str, message: str) -> bool:
        """Plain-text operational alert that is not about a single document."""
        if not self.enabled:
            return False

        try:
            self.sns_client.publish(
                TopicArn=self.topic_arn,
                Subject=subject[:SNS_SUBJECT_LIMIT],
                Message=message,
            )
        except Exception as e:
            logger.error("Error sending SNS alert", error=str(e), subject=subject)
            return False
        return True
