"""Invoice API Routes

FastAPI routes for creating, editing, querying and moving invoices through
their lifecycle.
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from invoice_lifecycle.api.error import ClientError
from invoice_lifecycle.api.schemas.invoice_request import (
    CreateInvoiceRequestSchema,
    UpdateInvoiceRequestSchema,
    UpdateStatusRequestSchema,
)
from invoice_lifecycle.app.use_cases.invoicing import (
    CancelInvoice,
    CreateInvoice,
    FetchInvoiceById,
    InvoiceListResponseDTO,
    MarkInvoiceAsPaid,
    QueryInvoices,
    UpdateInvoice,
    UpdateInvoiceStatus,
    UpdateInvoiceStatusCommandDTO,
)
from invoice_lifecycle.depends import InvoicingComponents, get_components
from invoice_lifecycle.domain.invoice import Invoice, InvoiceFilterOptions, InvoiceStatus

router = APIRouter(prefix="/invoices", tags=["Invoices"])

_NOT_FOUND = {
    "description": "Invoice not found",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "INVOICE_NOT_FOUND",
                    "message": "Invoice with ID 123 not found"
                }
            }
        }
    }
}

_INVALID_TRANSITION = {
    "description": "Status change not allowed",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "INVALID_TRANSITION",
                    "message": "Cannot transition invoice from paid to unpaid"
                }
            }
        }
    }
}


@router.post(
    "",
    response_model=Invoice,
    status_code=status.HTTP_201_CREATED,
)
async def create_invoice(
    body: CreateInvoiceRequestSchema,
    components: InvoicingComponents = Depends(get_components),
):
    """
    Create an invoice in status `unpaid`.

    The invoice number (`YYYYMM-customerId-SEQ`) and all amounts are computed
    by the service.

    **Returns:**
    - 201: Invoice created
    - 400: Missing or invalid field
    """
    use_case = CreateInvoice(components.uow, components.invoice_repo)
    result = await use_case.execute(body.to_draft())

    if result.is_err():
        raise ClientError.from_error(result.error)
    return result.value


@router.get("", response_model=InvoiceListResponseDTO)
async def query_invoices(
    status_filter: Optional[InvoiceStatus] = Query(default=None, alias="status"),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    customer_id: Optional[str] = None,
    customer_name: Optional[str] = None,
    components: InvoicingComponents = Depends(get_components),
):
    """
    List invoices matching every given filter.

    **Query parameters:**
    - `status`: Invoice status
    - `start_date` / `end_date`: Inclusive issue date range
    - `customer_id`: Exact customer
    - `customer_name`: Case-insensitive substring
    """
    filter_options = InvoiceFilterOptions(
        status=status_filter,
        start_date=start_date,
        end_date=end_date,
        customer_id=customer_id,
        customer_name=customer_name,
    )
    result = await QueryInvoices(components.invoice_repo).execute(filter_options)

    if result.is_err():
        raise ClientError.from_error(result.error)
    return result.value


@router.get(
    "/{invoice_id}",
    response_model=Invoice,
    responses={404: _NOT_FOUND},
)
async def get_invoice(
    invoice_id: str,
    components: InvoicingComponents = Depends(get_components),
):
    result = await FetchInvoiceById(components.invoice_repo).execute(invoice_id)

    if result.is_err():
        raise ClientError.from_error(result.error)
    return result.value


@router.patch(
    "/{invoice_id}",
    response_model=Invoice,
    responses={404: _NOT_FOUND},
)
async def update_invoice(
    invoice_id: str,
    body: UpdateInvoiceRequestSchema,
    components: InvoicingComponents = Depends(get_components),
):
    """
    Edit invoice fields. Omitted fields are unchanged; sending `items`
    replaces all items and recomputes the totals.
    """
    use_case = UpdateInvoice(components.uow, components.invoice_repo)
    result = await use_case.execute(invoice_id, body.to_patch())

    if result.is_err():
        raise ClientError.from_error(result.error)
    return result.value


@router.post(
    "/{invoice_id}/status",
    response_model=Invoice,
    responses={404: _NOT_FOUND, 409: _INVALID_TRANSITION},
)
async def update_invoice_status(
    invoice_id: str,
    body: UpdateStatusRequestSchema,
    components: InvoicingComponents = Depends(get_components),
):
    """
    Move an invoice to a new status.

    Allowed moves depend on the configured transition policy. A notification
    is created for the customer when the invoice becomes issued, paid,
    overdue or canceled.

    **Returns:**
    - 200: Updated invoice
    - 404: Invoice not found
    - 409: Transition not allowed
    """
    use_case = UpdateInvoiceStatus(components.uow, components.invoice_repo)
    result = await use_case.execute(
        UpdateInvoiceStatusCommandDTO(invoice_id=invoice_id, status=body.status)
    )

    if result.is_err():
        raise ClientError.from_error(result.error)
    return result.value


@router.post(
    "/{invoice_id}/cancel",
    response_model=Invoice,
    responses={404: _NOT_FOUND, 409: _INVALID_TRANSITION},
)
async def cancel_invoice(
    invoice_id: str,
    components: InvoicingComponents = Depends(get_components),
):
    result = await CancelInvoice(components.uow, components.invoice_repo).execute(invoice_id)

    if result.is_err():
        raise ClientError.from_error(result.error)
    return result.value


@router.post(
    "/{invoice_id}/pay",
    response_model=Invoice,
    responses={404: _NOT_FOUND, 409: _INVALID_TRANSITION},
)
async def mark_invoice_as_paid(
    invoice_id: str,
    components: InvoicingComponents = Depends(get_components),
):
    result = await MarkInvoiceAsPaid(components.uow, components.invoice_repo).execute(invoice_id)

    if result.is_err():
        raise ClientError.from_error(result.error)
    return result.value
