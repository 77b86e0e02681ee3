"""Invoice read Use Cases"""

from invoice_lifecycle.app.repositories.invoice_repository import InvoiceRepository
from invoice_lifecycle.domain.errors import InvoiceLifecycleError, NotFoundError
from invoice_lifecycle.domain.invoice import Invoice, InvoiceFilterOptions
from invoice_lifecycle.libs.result import Result, Return, Error
from .common import to_error
from .dtos import InvoiceListResponseDTO


class QueryInvoices:
    """
    Use Case: List invoices matching a filter

    All set filter fields must match; customer_name is a case-insensitive
    substring match; start_date/end_date bound the issue date.
    """

    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(self, filter_options: InvoiceFilterOptions) -> Result[InvoiceListResponseDTO]:
        try:
            invoices = await self.invoice_repo.query(filter_options)
            return Return.ok(InvoiceListResponseDTO(invoices=invoices, total=len(invoices)))

        except InvoiceLifecycleError as e:
            return Return.err(to_error(e))

        except Exception as e:
            return Return.err(
                Error(
                    code="QUERY_INVOICES_FAILED",
                    message="Failed to query invoices",
                    reason=str(e),
                )
            )


class FetchInvoiceById:
    """Use Case: Retrieve one invoice"""

    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(self, invoice_id: str) -> Result[Invoice]:
        try:
            invoice = await self.invoice_repo.find_by_id(invoice_id)
            if invoice is None:
                return Return.err(to_error(NotFoundError("invoice", invoice_id)))
            return Return.ok(invoice)

        except InvoiceLifecycleError as e:
            return Return.err(to_error(e))

        except Exception as e:
            return Return.err(
                Error(
                    code="FETCH_INVOICE_FAILED",
                    message="Failed to fetch invoice",
                    reason=str(e),
                )
            )
