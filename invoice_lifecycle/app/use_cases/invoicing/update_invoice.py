"""UpdateInvoice Use Case

Merges edited fields into an existing invoice.
"""

from invoice_lifecycle.app.repositories.invoice_repository import InvoiceRepository
from invoice_lifecycle.app.services.unit_of_work import UnitOfWork
from invoice_lifecycle.domain.draft import InvoicePatch
from invoice_lifecycle.domain.errors import InvoiceLifecycleError
from invoice_lifecycle.domain.invoice import Invoice
from invoice_lifecycle.libs.result import Result, Return, Error
from .common import to_error


class UpdateInvoice:
    """
    Use Case: Update invoice fields

    Business Rules:
    1. Only fields set on the patch change
    2. Items and totals are recomputed when items change
    3. Status cannot be patched (see UpdateInvoiceStatus)
    """

    def __init__(self, uow: UnitOfWork, invoice_repo: InvoiceRepository):
        self.uow = uow
        self.invoice_repo = invoice_repo

    async def execute(self, invoice_id: str, patch: InvoicePatch) -> Result[Invoice]:
        try:
            async with self.invoice_repo.invoice_scope(invoice_id):
                invoice = await self.invoice_repo.update(invoice_id, patch)
                await self.uow.commit()
            return Return.ok(invoice)

        except InvoiceLifecycleError as e:
            await self.uow.rollback()
            return Return.err(to_error(e))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_INVOICE_FAILED",
                    message="Failed to update invoice",
                    reason=str(e),
                )
            )
