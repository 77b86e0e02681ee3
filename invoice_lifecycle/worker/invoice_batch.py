"""Invoice Batch Background Worker

Runs the daily invoice batch: overdue sweep, monthly generation and
reminders. Can be run as a standalone script (cron) or continuously.
"""

import asyncio
import logging
from datetime import date
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from invoice_lifecycle.adapter.services.clock import SystemClock
from invoice_lifecycle.app.services.batch_processor import BatchResult
from invoice_lifecycle.app.services.clock import Clock
from invoice_lifecycle.app.services.keyed_lock import KeyedLock
from invoice_lifecycle.app.use_cases.invoicing import RunBatchCommandDTO, RunInvoiceBatch
from invoice_lifecycle.depends import build_components, init_models
from invoice_lifecycle.domain.errors import InvoiceLifecycleError

logger = logging.getLogger(__name__)


class InvoiceBatchWorker:
    """
    Background worker for the invoice batch

    Features:
    - Overdue sweep every day
    - Monthly generation and reminders on their configured days
    - Idempotent: safe to re-run for the same date
    - Can run once or continuously (at most one run per calendar day)

    Usage:
        # Run once for today
        worker = InvoiceBatchWorker()
        result = await worker.run_once()

        # Run once for a given date (backfill)
        result = await worker.run_once(run_date=date(2024, 2, 10))

        # Run continuously
        await worker.run_forever()
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        clock: Optional[Clock] = None,
        config=None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            clock: Time source (defaults to SystemClock)
        """
        self.config = config or ApplicationConfig
        self.db_uri = db_uri or self.config.DB_URI
        self.clock = clock or SystemClock()
        self.locks = KeyedLock()
        self._tables_ready = not self.config.CREATE_TABLES

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("InvoiceBatchWorker initialized")

    async def run_once(self, run_date: Optional[date] = None) -> BatchResult:
        """
        Run the batch once

        Args:
            run_date: Reference date (defaults to the clock's today)

        Returns:
            BatchResult with generated/updated invoices, reminders and failures

        Raises:
            InvoiceLifecycleError: If the run could not be carried out at all
        """
        if not self._tables_ready:
            await init_models(self.engine)
            self._tables_ready = True

        run_date = run_date or self.clock.today()

        async with self.async_session_factory() as session:
            components = build_components(session, self.clock, self.locks, config=self.config)
            use_case = RunInvoiceBatch(components.processor, self.clock)
            result = await use_case.execute(RunBatchCommandDTO(run_date=run_date))

        if result.is_err():
            logger.error(f"Invoice batch failed: {result.error.message} ({result.error.reason})")
            raise InvoiceLifecycleError(result.error.message, reason=result.error.reason)

        for failure in result.value.failures:
            logger.warning(
                f"Batch failure in {failure.stage.value} for {failure.entity_id or '-'}: "
                f"{failure.code} {failure.message}"
            )
        return result.value

    async def run_forever(self, check_interval_seconds: Optional[int] = None):
        """
        Run the batch continuously, at most once per calendar day

        Args:
            check_interval_seconds: Seconds between checks
                (default: ApplicationConfig.BATCH_CHECK_INTERVAL_SECONDS)
        """
        check_interval_seconds = check_interval_seconds or self.config.BATCH_CHECK_INTERVAL_SECONDS
        logger.info(f"Starting continuous invoice batch with {check_interval_seconds}s interval")

        last_processed_date = None

        while True:
            today = self.clock.today()
            if last_processed_date != today:
                try:
                    result = await self.run_once(today)
                    last_processed_date = today
                    logger.info(
                        f"Processed batch for {today.isoformat()}: "
                        f"{len(result.generated_invoices)} generated, "
                        f"{len(result.updated_invoices)} overdue"
                    )
                except Exception as e:
                    logger.error(f"Batch cycle failed: {e}")
            else:
                logger.debug(f"Batch for {today.isoformat()} already processed")

            await asyncio.sleep(check_interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("InvoiceBatchWorker shutdown complete")


async def main(argv=None):
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run for today
        python -m invoice_lifecycle.worker.invoice_batch

        # Run for a specific date
        python -m invoice_lifecycle.worker.invoice_batch --date 2024-02-10

        # Run continuously
        python -m invoice_lifecycle.worker.invoice_batch --continuous
    """
    import argparse

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Invoice Batch Worker")
    parser.add_argument("--date", type=date.fromisoformat, help="Run date (YYYY-MM-DD)")
    parser.add_argument(
        "--continuous", action="store_true", help="Run continuously"
    )
    args = parser.parse_args(argv)

    if not ApplicationConfig.BATCH_ENABLED:
        logger.info("Invoice batch is disabled (BATCH_ENABLED=false)")
        return

    worker = InvoiceBatchWorker()

    try:
        if args.continuous:
            await worker.run_forever()
        else:
            result = await worker.run_once(run_date=args.date)
            print(f"Invoice batch complete for {result.run_date.isoformat()}:")
            print(f"  Generated invoices: {len(result.generated_invoices)}")
            print(f"  Overdue invoices: {len(result.updated_invoices)}")
            print(f"  Reminders: {len(result.reminder_sent)}")
            print(f"  Failures: {len(result.failures)}")
            print(f"  Execution time: {result.execution_time_ms}ms")
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
