"""
Copies recently uploaded raw invoices to a backup bucket in Glacier.

Runs are deliberately small: one listing page of the source bucket is
inspected and at most ``max_objects`` copies are made, so a scheduled run
has a bounded S3 cost.
"""

from datetime import datetime, timedelta, UTC
from typing import Optional

import boto3
from botocore.exceptions import ClientError
from loguru import logger

from ..core.config import settings
from ..core.exceptions import BackupError
from .events.notification_publisher import NotificationPublisher

BACKUP_PREFIX = "backup"
BACKUP_STORAGE_CLASS = "GLACIER"
FAILURE_SUBJECT = "Minimal Backup Failed"


def backup_key(key: str, now: datetime) -> str:
    return f"{BACKUP_PREFIX}/{now.date().isoformat()}/{key}"


class InvoiceBackup:
    """
    Usage:
        backup = InvoiceBackup()                                  # buckets from settings
        backup = InvoiceBackup(s3_client=mock, publisher=mock,    # tests
                               source_bucket="raw", backup_bucket="cold")
        copied = backup.run()
    """

    def __init__(
        self,
        s3_client: Optional[object] = None,
        publisher: Optional[NotificationPublisher] = None,
        source_bucket: Optional[str] = None,
        backup_bucket: Optional[str] = None,
        window_days: Optional[int] = None,
        max_objects: Optional[int] = None,
        list_limit: Optional[int] = None,
    ):
        self.s3_client = s3_client or boto3.client("s3", region_name=settings.backup_region)
        self.publisher = publisher or NotificationPublisher.from_settings()
        self.source_bucket = source_bucket or settings.raw_invoice_bucket
        self.backup_bucket = backup_bucket or settings.backup_bucket
        self.window_days = settings.backup_window_days if window_days is None else window_days
        self.max_objects = settings.backup_max_objects if max_objects is None else max_objects
        self.list_limit = settings.backup_list_limit if list_limit is None else list_limit

    def run(self, now: Optional[datetime] = None) -> int:
        """
        Copy objects modified within the window; returns how many were copied.

        On failure an SNS alert is sent and the error is raised again.

        Raises:
            BackupError: if a bucket is not configured or S3 rejects a call
        """
        now = now or datetime.now(UTC)
        try:
            return self._copy_recent(now)
        except Exception as e:
            logger.exception("Backup error")
            self.publisher.alert(FAILURE_SUBJECT, f"Backup failed: {e}")
            if isinstance(e, ClientError):
                raise BackupError(str(e)) from e
            raise

    def _copy_recent(self, now: datetime) -> int:
        if not self.source_bucket or not self.backup_bucket:
            raise BackupError("RAW_INVOICE_BUCKET and BACKUP_BUCKET must both be configured")

        cutoff = now - timedelta(days=self.window_days)
        listing = self.s3_client.list_objects_v2(Bucket=self.source_bucket, MaxKeys=self.list_limit)

        copied = 0
        for obj in listing.get("Contents") or []:
            if copied >= self.max_objects:
                break
            if obj["LastModified"] < cutoff:
                continue

            self.s3_client.copy_object(
                Bucket=self.backup_bucket,
                CopySource={"Bucket": self.source_bucket, "Key": obj["Key"]},
                Key=backup_key(obj["Key"], now),
                StorageClass=BACKUP_STORAGE_CLASS,
            )
            copied += 1
            logger.info(f"Backed up: {obj['Key']}")

        return copied
