"""UpdateInvoiceStatus Use Cases

Moves invoices through their lifecycle. CancelInvoice and MarkInvoiceAsPaid
are shortcuts for the CANCELED and PAID targets.
"""

from invoice_lifecycle.app.repositories.invoice_repository import InvoiceRepository
from invoice_lifecycle.app.services.unit_of_work import UnitOfWork
from invoice_lifecycle.domain.errors import InvoiceLifecycleError
from invoice_lifecycle.domain.invoice import Invoice, InvoiceStatus
from invoice_lifecycle.libs.result import Result, Return, Error
from .common import to_error
from .dtos import UpdateInvoiceStatusCommandDTO


class UpdateInvoiceStatus:
    """
    Use Case: Change invoice status

    Business Rules:
    1. The move must be allowed by the active transition policy
    2. paid_at / canceled_at are set once
    3. A notification is emitted for issued, paid, overdue and canceled
    4. On failure the invoice is left unchanged

    Flow:
    1. Apply transition through the repository (emits notification)
    2. Commit transaction while still holding the invoice lock, so a
       concurrent request validates against the committed status
    3. Return updated invoice
    """

    def __init__(self, uow: UnitOfWork, invoice_repo: InvoiceRepository):
        self.uow = uow
        self.invoice_repo = invoice_repo

    async def execute(self, command: UpdateInvoiceStatusCommandDTO) -> Result[Invoice]:
        try:
            async with self.invoice_repo.invoice_scope(command.invoice_id):
                invoice = await self.invoice_repo.update_status(command.invoice_id, command.status)
                await self.uow.commit()
            return Return.ok(invoice)

        except InvoiceLifecycleError as e:
            await self.uow.rollback()
            return Return.err(to_error(e))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_INVOICE_STATUS_FAILED",
                    message="Failed to update invoice status",
                    reason=str(e),
                )
            )


class CancelInvoice(UpdateInvoiceStatus):
    """Use Case: Cancel invoice"""

    async def execute(self, invoice_id: str) -> Result[Invoice]:
        return await super().execute(
            UpdateInvoiceStatusCommandDTO(invoice_id=invoice_id, status=InvoiceStatus.CANCELED)
        )


class MarkInvoiceAsPaid(UpdateInvoiceStatus):
    """Use Case: Record payment of an invoice"""

    async def execute(self, invoice_id: str) -> Result[Invoice]:
        return await super().execute(
            UpdateInvoiceStatusCommandDTO(invoice_id=invoice_id, status=InvoiceStatus.PAID)
        )
