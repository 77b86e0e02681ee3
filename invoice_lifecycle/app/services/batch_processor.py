"""Invoice Batch Processor

Date-driven orchestration of the recurring invoice jobs:
- daily: ISSUED invoices past their due date become OVERDUE
- generation day (10th): invoices for the previous month are generated
- unpaid reminder day (20th): reminders for UNPAID invoices
- issued reminder day (5th): reminders for ISSUED invoices

Every routine is idempotent for a given date. Each entity is committed on
its own, so one failing customer or invoice never aborts the rest.
"""

import logging
import time
from calendar import monthrange
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import List, Optional, Tuple
from pydantic import BaseModel, Field
from invoice_lifecycle.app.repositories.billing_profile_store import BillingProfileStore
from invoice_lifecycle.app.repositories.invoice_repository import InvoiceRepository
from invoice_lifecycle.app.services.keyed_lock import KeyedLock
from invoice_lifecycle.app.services.notification_emitter import InvoiceEvent, NotificationEmitter
from invoice_lifecycle.app.services.unit_of_work import UnitOfWork
from invoice_lifecycle.domain.billing_profile import BillingProfile
from invoice_lifecycle.domain.draft import InvoiceDraft, InvoiceItemDraft
from invoice_lifecycle.domain.errors import (
    ConcurrentUpdateError,
    DuplicateGenerationError,
    InvalidTransitionError,
    InvoiceLifecycleError,
    ValidationError,
)
from invoice_lifecycle.domain.invoice import Invoice, InvoiceStatus
from invoice_lifecycle.domain.notification import (
    NotificationEventType,
    ReminderEvent,
    ReminderType,
)

logger = logging.getLogger(__name__)


class BatchStage(str, Enum):
    """Routines of a batch run"""
    OVERDUE_SWEEP = "overdue_sweep"
    MONTHLY_GENERATION = "monthly_generation"
    UNPAID_REMINDER = "unpaid_reminder"
    ISSUED_REMINDER = "issued_reminder"


class BatchFailure(BaseModel):
    """One entity (or whole stage, when entity_id is None) that failed"""

    stage: BatchStage
    entity_id: Optional[str] = None
    code: str
    message: str


class BatchResult(BaseModel):
    """Aggregated outcome of BatchProcessor.run"""

    run_date: date
    generated_invoices: List[Invoice] = Field(default_factory=list)
    updated_invoices: List[Invoice] = Field(default_factory=list)
    reminder_sent: List[ReminderEvent] = Field(default_factory=list)
    failures: List[BatchFailure] = Field(default_factory=list)
    execution_time_ms: int = 0


@dataclass(frozen=True)
class BatchCalendar:
    """Days of the month on which the date-gated routines fire"""

    generation_day: int = 10
    unpaid_reminder_day: int = 20
    issued_reminder_day: int = 5


def previous_month_period(today: date) -> Tuple[date, date]:
    """First and last day of the calendar month before today"""
    period_end = today.replace(day=1) - timedelta(days=1)
    return period_end.replace(day=1), period_end


def last_day_of_month(day: date) -> date:
    _, last = monthrange(day.year, day.month)
    return day.replace(day=last)


class BatchProcessor:
    """
    Batch processor for recurring invoice jobs

    Usage:
        processor = BatchProcessor(repository, profile_store, emitter, uow)
        result = await processor.run(date(2024, 2, 10))
    """

    def __init__(
        self,
        repository: InvoiceRepository,
        profile_store: BillingProfileStore,
        emitter: NotificationEmitter,
        uow: UnitOfWork,
        calendar: Optional[BatchCalendar] = None,
        locks: Optional[KeyedLock] = None,
    ):
        self.repository = repository
        self.profile_store = profile_store
        self.emitter = emitter
        self.uow = uow
        self.calendar = calendar or BatchCalendar()
        self.locks = locks or repository.locks

    async def run(self, today: date) -> BatchResult:
        """
        Run the overdue sweep, then every routine scheduled for today

        Args:
            today: Reference date of the run

        Returns:
            BatchResult with generated/updated invoices, reminders and failures
        """
        start_time = time.time()
        result = BatchResult(run_date=today)
        logger.info(f"Starting invoice batch for {today.isoformat()}")

        stages = (
            (BatchStage.OVERDUE_SWEEP, self.run_daily_overdue_sweep, result.updated_invoices),
            (BatchStage.MONTHLY_GENERATION, self.run_monthly_generation, result.generated_invoices),
            (BatchStage.UNPAID_REMINDER, self.run_unpaid_reminder, result.reminder_sent),
            (BatchStage.ISSUED_REMINDER, self.run_issued_reminder, result.reminder_sent),
        )
        for stage, routine, collected in stages:
            try:
                collected.extend(await routine(today, failures=result.failures))
            except InvoiceLifecycleError as e:
                logger.error(f"Batch stage {stage.value} failed: {e.message}")
                result.failures.append(
                    BatchFailure(stage=stage, code=e.code, message=e.message)
                )

        result.execution_time_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Invoice batch for {today.isoformat()} complete: "
            f"{len(result.generated_invoices)} generated, "
            f"{len(result.updated_invoices)} overdue, "
            f"{len(result.reminder_sent)} reminders, "
            f"{len(result.failures)} failures, "
            f"{result.execution_time_ms}ms"
        )
        return result

    async def run_daily_overdue_sweep(
        self, today: date, failures: Optional[List[BatchFailure]] = None
    ) -> List[Invoice]:
        """Move ISSUED invoices with due_date < today to OVERDUE"""
        failures = failures if failures is not None else []
        candidates = [
            invoice
            for invoice in await self.repository.list_by_status(InvoiceStatus.ISSUED)
            if invoice.due_date < today
        ]

        updated = []
        for invoice in candidates:
            try:
                async with self.repository.invoice_scope(invoice.id):
                    overdue = await self.repository.update_status(invoice.id, InvoiceStatus.OVERDUE)
                    await self.uow.commit()
                updated.append(overdue)
            except (InvalidTransitionError, ConcurrentUpdateError):
                # Status changed since the candidates were listed
                await self.uow.rollback()
                logger.info(f"Invoice {invoice.invoice_number} is no longer issued, skipping")
            except Exception as e:
                await self._record_failure(failures, BatchStage.OVERDUE_SWEEP, invoice.id, e)

        logger.info(f"Overdue sweep marked {len(updated)}/{len(candidates)} invoices overdue")
        return updated

    async def run_monthly_generation(
        self, today: date, failures: Optional[List[BatchFailure]] = None
    ) -> List[Invoice]:
        """Generate the previous month's invoice for every billable customer"""
        if today.day != self.calendar.generation_day:
            return []
        failures = failures if failures is not None else []

        period_start, period_end = previous_month_period(today)
        due_date = last_day_of_month(today)
        profiles = await self.profile_store.list_active()
        logger.info(
            f"Generating invoices for {len(profiles)} customers, period "
            f"{period_start.isoformat()} to {period_end.isoformat()}"
        )

        generated = []
        for profile in profiles:
            lock_key = f"generation:{profile.customer_id}:{period_start:%Y%m}"
            try:
                async with self.locks.hold(lock_key):
                    invoice = await self._generate_for_customer(
                        profile, today, period_start, period_end, due_date
                    )
                generated.append(invoice)
            except DuplicateGenerationError as e:
                # Expected on re-runs
                logger.info(e.message)
            except Exception as e:
                await self._record_failure(
                    failures, BatchStage.MONTHLY_GENERATION, profile.customer_id, e
                )

        logger.info(f"Monthly generation created {len(generated)} invoices")
        return generated

    async def run_unpaid_reminder(
        self, today: date, failures: Optional[List[BatchFailure]] = None
    ) -> List[ReminderEvent]:
        """Remind about UNPAID invoices on the unpaid reminder day"""
        if today.day != self.calendar.unpaid_reminder_day:
            return []
        return await self._send_reminders(
            today,
            InvoiceStatus.UNPAID,
            ReminderType.UNPAID,
            NotificationEventType.UNPAID_REMINDER,
            BatchStage.UNPAID_REMINDER,
            failures if failures is not None else [],
        )

    async def run_issued_reminder(
        self, today: date, failures: Optional[List[BatchFailure]] = None
    ) -> List[ReminderEvent]:
        """Remind about ISSUED invoices on the issued reminder day"""
        if today.day != self.calendar.issued_reminder_day:
            return []
        return await self._send_reminders(
            today,
            InvoiceStatus.ISSUED,
            ReminderType.ISSUED,
            NotificationEventType.ISSUED_REMINDER,
            BatchStage.ISSUED_REMINDER,
            failures if failures is not None else [],
        )

    async def _generate_for_customer(
        self,
        profile: BillingProfile,
        today: date,
        period_start: date,
        period_end: date,
        due_date: date,
    ) -> Invoice:
        if await self.repository.exists_for_period(profile.customer_id, period_start, period_end):
            raise DuplicateGenerationError(
                f"Invoice already exists for customer {profile.customer_id} "
                f"for period {period_start.isoformat()} to {period_end.isoformat()}"
            )

        if not profile.customer_name:
            raise ValidationError("customer_name", "billing profile has no customer name")
        if profile.monthly_fee is None:
            raise ValidationError("monthly_fee", "billing profile has no monthly fee")

        draft = InvoiceDraft(
            customer_id=profile.customer_id,
            customer_name=profile.customer_name,
            issue_date=today,
            due_date=due_date,
            period_start=period_start,
            period_end=period_end,
            items=[
                InvoiceItemDraft(
                    name=profile.item_name,
                    description=f"{period_start:%Y-%m}",
                    quantity=1,
                    unit_price=profile.monthly_fee,
                    tax_rate=profile.tax_rate,
                )
            ],
        )
        async with self.repository.creation_scope(draft):
            invoice = await self.repository.create(draft)
            await self.emitter.emit(InvoiceEvent(NotificationEventType.GENERATED, invoice))
            await self.uow.commit()
        return invoice

    async def _send_reminders(
        self,
        today: date,
        status: InvoiceStatus,
        reminder_type: ReminderType,
        event_type: NotificationEventType,
        stage: BatchStage,
        failures: List[BatchFailure],
    ) -> List[ReminderEvent]:
        invoices = await self.repository.list_by_status(status)
        reminders = []
        for invoice in invoices:
            reminder = ReminderEvent(
                invoice_id=invoice.id,
                customer_id=invoice.customer_id,
                type=reminder_type,
            )
            try:
                await self.emitter.emit(
                    InvoiceEvent(event_type, invoice, event_key=reminder.event_key(today))
                )
                await self.uow.commit()
                reminders.append(reminder)
            except Exception as e:
                await self._record_failure(failures, stage, invoice.id, e)

        logger.info(f"Sent {len(reminders)} {reminder_type.value} reminders")
        return reminders

    async def _record_failure(
        self,
        failures: List[BatchFailure],
        stage: BatchStage,
        entity_id: str,
        error: Exception,
    ) -> None:
        await self.uow.rollback()
        if isinstance(error, InvoiceLifecycleError):
            code, message = error.code, error.message
        else:
            code, message = "UNEXPECTED_ERROR", str(error)
        logger.error(f"Batch stage {stage.value} failed for {entity_id}: {message}")
        failures.append(
            BatchFailure(stage=stage, entity_id=entity_id, code=code, message=message)
        )
