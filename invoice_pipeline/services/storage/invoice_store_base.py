"""
Abstract base class for extracted-invoice persistence.

Defines the interface every store implements so the pipeline and the API
can be wired to DynamoDB in AWS and to memory in local runs and tests.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ...models.invoice import ProcessedInvoice


class InvoiceStoreBase(ABC):
    """
    Abstract base class for invoice stores.

    Implementations:
    - In-memory storage (local development, tests)
    - DynamoDB (Lambda deployments)
    """

    @abstractmethod
    def save(self, invoice: ProcessedInvoice) -> str:
        """
        Persist a processed invoice.

        Args:
            invoice: Extracted record plus source metadata

        Returns:
            The invoice ID it was stored under
        """
        pass

    @abstractmethod
    def get(self, invoice_id: str) -> Optional[dict]:
        """
        Fetch a stored invoice by ID.

        Returns:
            The stored item (camelCase keys) or None if not found
        """
        pass

    @abstractmethod
    def list_all(self) -> list:
        """
        List stored invoices.

        Returns:
            List of stored items (same format as get)
        """
        pass
