"""
S3 document source: locating, validating and uploading raw invoice files.
"""

import os
import urllib.parse
from typing import Optional

import boto3
from botocore.exceptions import ClientError
from loguru import logger

from ..core.config import settings
from ..core.exceptions import (
    DocumentNotFoundError,
    FileTooLargeError,
    InvalidEventError,
    UnsupportedFormatError,
)


def parse_s3_event_record(record: dict) -> tuple[str, str]:
    """
    Pull (bucket, key) out of one S3 notification record.

    Object keys arrive URL-encoded with spaces as '+'.
    """
    try:
        s3_event = record["s3"]
        bucket = s3_event["bucket"]["name"]
        raw_key = s3_event["object"]["key"]
    except (KeyError, TypeError) as e:
        raise InvalidEventError(f"Malformed S3 event record: missing {e}") from e
    return bucket, urllib.parse.unquote_plus(raw_key)


def file_extension(key: str) -> str:
    return os.path.splitext(key)[1].lower()


class DocumentSource:
    """Validates S3 objects before they are handed to Textract."""

    def __init__(
        self,
        s3_client: Optional[object] = None,
        supported_formats: Optional[list[str]] = None,
        max_file_size: Optional[int] = None,
    ):
        self.client = s3_client or boto3.client("s3", region_name=settings.aws_region)
        self.supported_formats = supported_formats or settings.supported_extensions
        self.max_file_size = max_file_size if max_file_size is not None else settings.max_file_size

    def validate(self, bucket: str, key: str) -> int:
        """
        Check format and size of ``s3://bucket/key``.

        Returns:
            Object size in bytes

        Raises:
            UnsupportedFormatError: extension not in the supported list
            DocumentNotFoundError: object does not exist
            FileTooLargeError: object exceeds the size limit
        """
        extension = file_extension(key)
        if extension not in self.supported_formats:
            raise UnsupportedFormatError(f"Unsupported file format: {extension or '(none)'}")

        try:
            head = self.client.head_object(Bucket=bucket, Key=key)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in ("404", "NoSuchKey", "NotFound"):
                raise DocumentNotFoundError(f"File not found: {key}") from e
            raise

        size = head.get("ContentLength", 0)
        if size > self.max_file_size:
            raise FileTooLargeError(
                f"File too large: {size} bytes (max: {self.max_file_size})"
            )

        logger.info("File validation passed", key=key, file_size=size, file_extension=extension)
        return size

    def upload(self, bucket: str, key: str, body: bytes, content_type: str = "application/octet-stream") -> None:
        self.client.put_object(Bucket=bucket, Key=key, Body=body, ContentType=content_type)
        logger.info("Uploaded document", bucket=bucket, key=key, size=len(body))
