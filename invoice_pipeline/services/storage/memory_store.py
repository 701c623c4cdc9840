"""
In-memory invoice store (local development and tests).
"""
from typing import Dict, Optional

from ...models.invoice import ProcessedInvoice
from .invoice_store_base import InvoiceStoreBase


class InMemoryInvoiceStore(InvoiceStoreBase):
    def __init__(self):
        self._invoices: Dict[str, dict] = {}

    def save(self, invoice: ProcessedInvoice) -> str:
        """Store the invoice, replacing any earlier one with the same ID"""
        self._invoices[invoice.invoice_id] = invoice.model_dump(by_alias=True)
        return invoice.invoice_id

    def get(self, invoice_id: str) -> Optional[dict]:
        return self._invoices.get(invoice_id)

    def list_all(self) -> list:
        return list(self._invoices.values())

    def clear(self) -> None:
        self._invoices.clear()
