"""CreateInvoice Use Case

Creates a new UNPAID invoice from a draft entered by an operator.
"""

from invoice_lifecycle.app.repositories.invoice_repository import InvoiceRepository
from invoice_lifecycle.app.services.unit_of_work import UnitOfWork
from invoice_lifecycle.domain.draft import InvoiceDraft
from invoice_lifecycle.domain.errors import InvoiceLifecycleError
from invoice_lifecycle.domain.invoice import Invoice
from invoice_lifecycle.libs.result import Result, Return, Error
from .common import to_error


class CreateInvoice:
    """
    Use Case: Create invoice

    Business Rules:
    1. customer_id, dates, period and at least one item are required
    2. Every item has quantity > 0 and unit_price >= 0
    3. Invoice number is auto-generated (YYYYMM-customerId-SEQ)
    4. Invoice is created with status=unpaid
    5. Nothing is persisted when validation fails

    Flow:
    1. Validate draft and create invoice through the repository
    2. Commit transaction while still holding the numbering lock
    3. Return invoice
    """

    def __init__(self, uow: UnitOfWork, invoice_repo: InvoiceRepository):
        self.uow = uow
        self.invoice_repo = invoice_repo

    async def execute(self, draft: InvoiceDraft) -> Result[Invoice]:
        """
        Execute invoice creation

        Args:
            draft: InvoiceDraft with customer, dates and items

        Returns:
            Result[Invoice]: Success with created invoice or error
        """
        try:
            async with self.invoice_repo.creation_scope(draft):
                invoice = await self.invoice_repo.create(draft)
                await self.uow.commit()
            return Return.ok(invoice)

        except InvoiceLifecycleError as e:
            await self.uow.rollback()
            return Return.err(to_error(e))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_INVOICE_FAILED",
                    message="Failed to create invoice",
                    reason=str(e),
                )
            )
