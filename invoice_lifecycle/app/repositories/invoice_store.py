"""Invoice Store Interface

Defines the contract for the persistence collaborator behind the
InvoiceRepository.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from invoice_lifecycle.domain.invoice import Invoice


class InvoiceStore(ABC):
    """
    Persistence interface for Invoice records

    Implementations must keep invoice_number unique and answer
    list_by_prefix efficiently, since invoice number generation relies on it.
    Failures are raised as PersistenceError.
    """

    @abstractmethod
    async def load(self, invoice_id: str) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, invoice: Invoice) -> Invoice:
        """
        Insert (version 1) or update an invoice

        An update only applies while the stored version is invoice.version - 1.

        Args:
            invoice: Invoice to persist

        Returns:
            The persisted Invoice

        Raises:
            ConcurrentUpdateError: If the stored version moved on
        """
        pass

    @abstractmethod
    async def list_by_prefix(self, prefix: str) -> List[Invoice]:
        """
        Retrieve invoices whose invoice_number starts with prefix

        Args:
            prefix: Invoice number prefix (e.g., "202402-tenant-1-")

        Returns:
            List of invoices
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[Invoice]:
        """
        Retrieve every stored invoice

        Returns:
            List of invoices
        """
        pass
