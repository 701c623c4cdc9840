"""
Document processing pipeline: S3 object -> Textract -> field extraction ->
DynamoDB -> SNS.

Each document is handled independently; a failure is logged, notified and
reported in that document's result without stopping the rest of a batch.
"""

import time
from datetime import datetime, UTC
from typing import Optional

from loguru import logger

from ..core.exceptions import InvalidEventError
from ..models.invoice import ExtractedInvoiceRecord, ProcessedInvoice, RecordResult
from .document_source import DocumentSource, parse_s3_event_record
from .events.notification_publisher import NotificationPublisher
from .invoice_extractor import extract_invoice
from .storage import InvoiceStoreBase, get_invoice_store
from .textract_client import TextractAnalyzer


def invoice_id_for(record: ExtractedInvoiceRecord) -> str:
    return record.invoice_data.invoice_number or f"inv-{int(time.time() * 1000)}"


def summarize(record: ExtractedInvoiceRecord) -> dict:
    return {
        "invoiceNumber": record.invoice_data.invoice_number,
        "totalAmount": record.invoice_data.total_amount,
        "vendorName": record.invoice_data.vendor_name,
    }


class InvoicePipeline:
    def __init__(
        self,
        source: Optional[DocumentSource] = None,
        analyzer: Optional[TextractAnalyzer] = None,
        store: Optional[InvoiceStoreBase] = None,
        publisher: Optional[NotificationPublisher] = None,
    ):
        self.source = source or DocumentSource()
        self.analyzer = analyzer or TextractAnalyzer()
        self.store = store or get_invoice_store()
        self.publisher = publisher or NotificationPublisher.from_settings()

    def process_document(self, bucket: str, key: str) -> RecordResult:
        """Validate, analyze, extract, store and notify for one S3 object."""
        started = time.monotonic()
        logger.info("Processing file", bucket=bucket, key=key)

        try:
            self.source.validate(bucket, key)
            blocks = self.analyzer.analyze(bucket, key)
            record = extract_invoice(blocks)

            processing_time = int((time.monotonic() - started) * 1000)
            invoice = ProcessedInvoice(
                invoice_id=invoice_id_for(record),
                file_name=key,
                source_bucket=bucket,
                extracted_at=datetime.now(UTC).isoformat(),
                processing_time_ms=processing_time,
                extracted_data=record,
            )
            invoice_id = self.store.save(invoice)
        except Exception as e:
            logger.error("Error processing record", key=key, error=str(e))
            self.publisher.notify_error(key, str(e))
            return RecordResult(object_key=key, status="error", error=str(e))

        summary = summarize(record)
        self.publisher.notify_success(key, "Invoice processed successfully", data=summary)
        logger.info("File processed successfully", key=key, invoice_id=invoice_id, processing_time=processing_time)

        return RecordResult(
            object_key=key,
            status="success",
            invoice_id=invoice_id,
            processing_time=processing_time,
            extracted_data=summary,
        )

    def process_event(self, event: dict) -> list[RecordResult]:
        """
        Process every record of an S3 notification event.

        Raises:
            InvalidEventError: if the event is not an object or carries no records
        """
        if event is not None and not isinstance(event, dict):
            raise InvalidEventError(f"Expected an S3 event object, got {type(event).__name__}")
        records = (event or {}).get("Records") or []
        if not isinstance(records, list) or not records:
            raise InvalidEventError("No S3 records found in event")

        results = []
        for record in records:
            try:
                bucket, key = parse_s3_event_record(record)
            except InvalidEventError as e:
                logger.error("Skipping malformed record", error=str(e))
                self.publisher.notify_error("unknown", str(e))
                results.append(RecordResult(object_key="unknown", status="error", error=str(e)))
                continue
            results.append(self.process_document(bucket, key))
        return results
