"""Batch API Routes

Lets an external scheduler trigger the invoice batch over HTTP instead of
running the worker process.
"""

from fastapi import APIRouter, Depends

from invoice_lifecycle.api.error import ClientError
from invoice_lifecycle.api.schemas.invoice_request import RunBatchRequestSchema
from invoice_lifecycle.app.services.batch_processor import BatchResult
from invoice_lifecycle.app.services.clock import Clock
from invoice_lifecycle.app.use_cases.invoicing import RunBatchCommandDTO, RunInvoiceBatch
from invoice_lifecycle.depends import InvoicingComponents, get_clock, get_components

router = APIRouter(prefix="/batch", tags=["Batch"])


@router.post("/run", response_model=BatchResult)
async def run_invoice_batch(
    body: RunBatchRequestSchema,
    components: InvoicingComponents = Depends(get_components),
    clock: Clock = Depends(get_clock),
):
    """
    Run every batch routine due on `run_date` (default: today).

    Safe to call repeatedly for the same date. Per-invoice and per-customer
    failures are listed in `failures`.
    """
    use_case = RunInvoiceBatch(components.processor, clock)
    result = await use_case.execute(RunBatchCommandDTO(run_date=body.run_date))

    if result.is_err():
        raise ClientError.from_error(result.error)
    return result.value
