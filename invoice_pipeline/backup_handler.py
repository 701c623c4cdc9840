"""
Scheduled AWS Lambda entry point for the raw invoice backup.

Configure the function handler as ``invoice_pipeline.backup_handler.handler``
and trigger it from an EventBridge schedule.
"""

import json

from loguru import logger

from .core.logging import setup_logging
from .services.backup import InvoiceBackup

setup_logging()

_backup: InvoiceBackup | None = None


def get_backup() -> InvoiceBackup:
    global _backup
    if _backup is None:
        _backup = InvoiceBackup()
    return _backup


def handler(event, context):
    request_id = getattr(context, "aws_request_id", None)
    with logger.contextualize(request_id=request_id):
        logger.info("Starting minimal backup process")
        count = get_backup().run()

        return {
            "statusCode": 200,
            "body": json.dumps({"message": f"Minimal backup completed: {count} files", "backupCount": count}),
        }
