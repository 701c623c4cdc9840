"""
Amazon Textract document analysis with bounded retries.

Each attempt is raced against a timeout; failed attempts back off linearly
(``retry_delay * attempt``) and are retried sequentially. After the last
attempt the final error is raised to the caller.
"""

import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Callable, Optional

import boto3
from loguru import logger

from ..core.config import settings
from ..core.exceptions import AnalysisTimeoutError, DocumentAnalysisError


class TextractAnalyzer:
    """
    Thin wrapper around ``textract.analyze_document`` for S3-hosted documents.

    Usage:
        analyzer = TextractAnalyzer()                       # real client from settings
        analyzer = TextractAnalyzer(textract_client=Mock()) # tests
        blocks = analyzer.analyze("raw-invoices", "2024/inv-001.pdf")
    """

    def __init__(
        self,
        textract_client: Optional[object] = None,
        feature_types: Optional[list[str]] = None,
        max_retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
        timeout: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = textract_client or boto3.client("textract", region_name=settings.aws_region)
        self.feature_types = feature_types or settings.feature_types
        self.max_retries = max_retries if max_retries is not None else settings.textract_max_retries
        self.retry_delay = retry_delay if retry_delay is not None else settings.textract_retry_delay
        self.timeout = timeout if timeout is not None else settings.textract_timeout
        self._sleep = sleep

    def _call_with_timeout(self, params: dict) -> dict:
        # The worker thread cannot be cancelled; on timeout it is abandoned
        # and its eventual result discarded.
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(self.client.analyze_document, **params)
            try:
                return future.result(timeout=self.timeout)
            except FutureTimeoutError:
                raise AnalysisTimeoutError("Textract timeout") from None
        finally:
            executor.shutdown(wait=False)

    def analyze(self, bucket: str, key: str) -> list[dict]:
        """
        Run AnalyzeDocument on ``s3://bucket/key`` and return its blocks.

        Raises:
            DocumentAnalysisError: after ``max_retries`` failed attempts
        """
        params = {
            "Document": {"S3Object": {"Bucket": bucket, "Name": key}},
            "FeatureTypes": self.feature_types,
        }
        logger.info("Starting Textract analysis", bucket=bucket, key=key, feature_types=self.feature_types)

        last_error: Exception | None = None
        for attempt in range(1, self.max_retries + 1):
            try:
                response = self._call_with_timeout(params)
                blocks = response.get("Blocks") or []
                logger.info("Textract analysis completed", attempt=attempt, blocks_count=len(blocks))
                return blocks
            except Exception as e:
                last_error = e
                will_retry = attempt < self.max_retries
                logger.warning(
                    "Textract attempt failed",
                    attempt=attempt,
                    error=str(e),
                    will_retry=will_retry,
                )
                if will_retry:
                    self._sleep(self.retry_delay * attempt)

        raise DocumentAnalysisError(
            f"Textract failed after {self.max_retries} attempts: {last_error}"
        ) from last_error
