"""
DynamoDB-backed invoice store.

Items are keyed by ``invoiceId`` (hash) and ``timestamp`` (range), so a
re-processed invoice adds a new version instead of overwriting history.
"""

import json
from decimal import Decimal
from typing import Optional

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError
from loguru import logger

from ...core.config import settings
from ...core.exceptions import StorageError
from ...models.invoice import ProcessedInvoice
from .invoice_store_base import InvoiceStoreBase


def to_dynamo_item(data: dict) -> dict:
    """DynamoDB rejects Python floats; round-trip through JSON to get Decimals."""
    return json.loads(json.dumps(data), parse_float=Decimal)


def from_dynamo_item(value):
    if isinstance(value, list):
        return [from_dynamo_item(v) for v in value]
    if isinstance(value, dict):
        return {k: from_dynamo_item(v) for k, v in value.items()}
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


class DynamoDBInvoiceStore(InvoiceStoreBase):
    """
    Repository for extracted invoices in a DynamoDB table.

    Usage:
        store = DynamoDBInvoiceStore()                      # table from DYNAMODB_TABLE
        store = DynamoDBInvoiceStore(table=mock_table)      # tests
    """

    def __init__(self, table_name: Optional[str] = None, table: Optional[object] = None):
        self.table_name = table_name or settings.dynamodb_table
        if table is None:
            dynamodb = boto3.resource("dynamodb", region_name=settings.aws_region)
            table = dynamodb.Table(self.table_name)
        self._table = table

    def save(self, invoice: ProcessedInvoice) -> str:
        item = invoice.model_dump(by_alias=True)
        item["timestamp"] = invoice.extracted_at
        try:
            self._table.put_item(Item=to_dynamo_item(item))
        except ClientError as e:
            logger.error(f"Error storing invoice {invoice.invoice_id}: {e}")
            raise StorageError(f"Storage failed: {e}") from e

        logger.info("Stored extracted invoice", invoice_id=invoice.invoice_id, table=self.table_name)
        return invoice.invoice_id

    def get(self, invoice_id: str) -> Optional[dict]:
        """Latest stored version of ``invoice_id``"""
        try:
            response = self._table.query(
                KeyConditionExpression=Key("invoiceId").eq(invoice_id),
                ScanIndexForward=False,
                Limit=1,
            )
        except ClientError as e:
            logger.error(f"Error getting invoice {invoice_id}: {e}")
            raise StorageError(f"Lookup failed: {e}") from e

        items = response.get("Items") or []
        return from_dynamo_item(items[0]) if items else None

    def list_all(self) -> list:
        items = []
        kwargs = {}
        try:
            while True:
                response = self._table.scan(**kwargs)
                items.extend(response.get("Items") or [])
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                kwargs["ExclusiveStartKey"] = last_key
        except ClientError as e:
            logger.error(f"Error listing invoices: {e}")
            raise StorageError(f"Listing failed: {e}") from e
        return [from_dynamo_item(item) for item in items]
