"""
AWS Lambda entry point for S3 ``ObjectCreated`` notifications.

Configure the function handler as ``invoice_pipeline.lambda_handler.handler``.
"""

import json

from loguru import logger

from .core.logging import setup_logging
from .services.events.notification_publisher import NotificationPublisher
from .services.pipeline import InvoicePipeline

setup_logging()

_pipeline: InvoicePipeline | None = None


def get_pipeline() -> InvoicePipeline:
    # Built lazily so boto3 clients are reused across warm invocations.
    global _pipeline
    if _pipeline is None:
        _pipeline = InvoicePipeline()
    return _pipeline


def _record_count(event) -> int:
    records = event.get("Records") if isinstance(event, dict) else None
    return len(records) if isinstance(records, list) else 0


def _notify_batch_failure(pipeline: InvoicePipeline | None, error: Exception) -> None:
    try:
        publisher = pipeline.publisher if pipeline is not None else NotificationPublisher.from_settings()
        publisher.notify_error("batch-processing", str(error))
    except Exception:
        logger.exception("Could not send batch failure notification")


def handler(event, context):
    request_id = getattr(context, "aws_request_id", None)
    with logger.contextualize(request_id=request_id):
        pipeline = None
        try:
            logger.info("Textract processor triggered", records=_record_count(event))
            pipeline = get_pipeline()
            results = pipeline.process_event(event)
        except Exception as e:
            logger.exception("Error processing invoices")
            _notify_batch_failure(pipeline, e)
            return {
                "statusCode": 500,
                "body": json.dumps({"message": "Error processing invoices", "error": str(e)}),
            }

        body = [r.model_dump(by_alias=True, exclude_none=True) for r in results]
        logger.info(
            "All records processed",
            succeeded=sum(1 for r in results if r.status == "success"),
            failed=sum(1 for r in results if r.status == "error"),
        )
        return {
            "statusCode": 200,
            "body": json.dumps({"message": "All invoices processed", "results": body}),
        }
