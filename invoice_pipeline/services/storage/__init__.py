from ...core.config import settings
from .invoice_store_base import InvoiceStoreBase
from .memory_store import InMemoryInvoiceStore
from .dynamodb_store import DynamoDBInvoiceStore

_store: InvoiceStoreBase | None = None


def get_invoice_store() -> InvoiceStoreBase:
    """
    Process-wide invoice store.

    DynamoDB when a table is configured outside local runs, memory otherwise.
    """
    global _store
    if _store is None:
        if settings.dynamodb_table and settings.app_env != "local":
            _store = DynamoDBInvoiceStore()
        else:
            _store = InMemoryInvoiceStore()
    return _store


def set_invoice_store(store: InvoiceStoreBase | None) -> None:
    """Replace (or reset with None) the process-wide store."""
    global _store
    _store = store


__all__ = [
    "InvoiceStoreBase",
    "InMemoryInvoiceStore",
    "DynamoDBInvoiceStore",
    "get_invoice_store",
    "set_invoice_store",
]
