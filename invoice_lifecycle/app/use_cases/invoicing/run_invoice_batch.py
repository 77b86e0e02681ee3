"""RunInvoiceBatch Use Case

Single entry point for the scheduler: runs every invoice batch routine
due on the given date.
"""

from invoice_lifecycle.app.services.batch_processor import BatchProcessor, BatchResult
from invoice_lifecycle.app.services.clock import Clock
from invoice_lifecycle.libs.result import Result, Return, Error
from .dtos import RunBatchCommandDTO


class RunInvoiceBatch:
    """
    Use Case: Run invoice batch for a date

    Business Rules:
    1. Overdue sweep runs every day
    2. Generation / reminders run on their configured days
    3. Safe to re-run for the same date
    4. Per-entity failures are reported in the result, not as an error
    """

    def __init__(self, processor: BatchProcessor, clock: Clock):
        self.processor = processor
        self.clock = clock

    async def execute(self, command: RunBatchCommandDTO) -> Result[BatchResult]:
        run_date = command.run_date or self.clock.today()
        try:
            return Return.ok(await self.processor.run(run_date))
        except Exception as e:
            await self.processor.uow.rollback()
            return Return.err(
                Error(
                    code="INVOICE_BATCH_FAILED",
                    message=f"Invoice batch for {run_date.isoformat()} failed",
                    reason=str(e),
                )
            )
