"""Invoice Repository

CRUD, filtered queries, status changes and invoice number assignment on
top of the abstract InvoiceStore.
"""

import logging
import re
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator, Iterable, List, Optional
from invoice_lifecycle.app.repositories.invoice_store import InvoiceStore
from invoice_lifecycle.app.services.clock import Clock
from invoice_lifecycle.app.services.keyed_lock import KeyedLock
from invoice_lifecycle.app.services.notification_emitter import InvoiceEvent, NotificationEmitter
from invoice_lifecycle.app.services.timeouts import call_with_timeout
from invoice_lifecycle.domain.draft import InvoiceDraft, InvoiceItemDraft, InvoicePatch
from invoice_lifecycle.domain.errors import NotFoundError, ValidationError
from invoice_lifecycle.domain.invoice import (
    BankInfo,
    Invoice,
    InvoiceFilterOptions,
    InvoiceItem,
    InvoiceStatus,
    calculate_totals,
)
from invoice_lifecycle.domain.status_transition import (
    STRICT_POLICY,
    TransitionPolicy,
    apply_transition,
)

logger = logging.getLogger(__name__)

CUSTOMER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
MAX_SEQUENCE = 999

_REQUIRED_FIELDS = ("customer_id", "issue_date", "due_date", "period_start", "period_end")


class InvoiceRepository:
    """
    Invoice Repository - the only writer of invoices

    Business Rules:
    1. Drafts are fully validated before anything is persisted
    2. Invoice numbers are YYYYMM-customerId-SEQ, never reused
    3. Status changes go through the active TransitionPolicy
    4. Successful status changes emit a notification
    5. Creation is serialized per (customer, month); updates per invoice
    6. Every saved change increments version; the store rejects a save whose
       previous version is no longer current (ConcurrentUpdateError)
    7. Store calls are bounded by timeout_seconds (PersistenceError on expiry)
    """

    def __init__(
        self,
        store: InvoiceStore,
        emitter: NotificationEmitter,
        clock: Clock,
        policy: TransitionPolicy = STRICT_POLICY,
        locks: Optional[KeyedLock] = None,
        issuer_tenant_id: str = "system-admin",
        issuer_bank_info: Optional[BankInfo] = None,
        timeout_seconds: float = 10.0,
    ):
        self.store = store
        self.emitter = emitter
        self.clock = clock
        self.policy = policy
        self.locks = locks or KeyedLock()
        self.issuer_tenant_id = issuer_tenant_id
        self.issuer_bank_info = issuer_bank_info
        self.timeout_seconds = timeout_seconds

    async def create(self, draft: InvoiceDraft) -> Invoice:
        """
        Create a new UNPAID invoice

        Args:
            draft: InvoiceDraft with customer, dates and items

        Returns:
            Persisted Invoice with invoice_number assigned

        Raises:
            ValidationError: If a required field is missing or malformed
            PersistenceError: If the store fails
        """
        self._validate_required(draft)
        if not CUSTOMER_ID_PATTERN.match(draft.customer_id):
            raise ValidationError(
                "customer_id", "may only contain letters, digits, '_' and '-'"
            )
        self._validate_period(draft.period_start, draft.period_end)
        items = self._build_items(draft.items)
        subtotal, tax_total, total = calculate_totals(items)

        now = self.clock.now()
        async with self.creation_scope(draft):
            invoice_number = await self.generate_invoice_number(
                draft.customer_id, draft.issue_date
            )
            invoice = Invoice(
                invoice_number=invoice_number,
                tenant_id=draft.tenant_id or self.issuer_tenant_id,
                customer_id=draft.customer_id,
                customer_name=draft.customer_name,
                issue_date=draft.issue_date,
                due_date=draft.due_date,
                period_start=draft.period_start,
                period_end=draft.period_end,
                status=InvoiceStatus.UNPAID,
                items=items,
                subtotal=subtotal,
                tax_total=tax_total,
                total=total,
                notes=draft.notes,
                created_at=now,
                updated_at=now,
                bank_info=draft.bank_info or self.issuer_bank_info,
            )
            created = await self._call(self.store.save(invoice))

        logger.info(f"Created invoice {created.invoice_number} for customer {created.customer_id}")
        return created

    async def generate_invoice_number(self, customer_id: str, on_date: date) -> str:
        """
        Next invoice number for a customer and month

        Format: YYYYMM-customerId-SEQ (e.g., 202402-tenant-1-001)

        Returns:
            Invoice number with the next unused 3-digit sequence

        Raises:
            ValidationError: If the month's 999 sequence numbers are used up
        """
        prefix = f"{on_date:%Y%m}-{customer_id}"
        existing = await self._call(self.store.list_by_prefix(f"{prefix}-"))

        # "202402-tenant-" also matches "202402-tenant-1-001"; compare exact prefixes
        sequences = [
            int(invoice.invoice_number.rsplit("-", 1)[1])
            for invoice in existing
            if invoice.billing_prefix == prefix
            and invoice.invoice_number.rsplit("-", 1)[1].isdigit()
        ]
        sequence = max(sequences) + 1 if sequences else 1
        if sequence > MAX_SEQUENCE:
            raise ValidationError(
                "invoice_number", f"sequence exhausted for {prefix} ({MAX_SEQUENCE} invoices)"
            )
        return f"{prefix}-{sequence:03d}"

    async def update(self, invoice_id: str, patch: InvoicePatch) -> Invoice:
        """
        Merge patch fields into an invoice

        Raises:
            NotFoundError: If invoice_id is unknown
            ValidationError: If the merged invoice is invalid
        """
        async with self.invoice_scope(invoice_id):
            invoice = await self.get(invoice_id)

            changes = {}
            for field in patch.model_fields_set:
                value = getattr(patch, field)
                if field == "items":
                    if value is None:
                        raise ValidationError("items", "at least one item is required")
                    items = self._build_items(value)
                    subtotal, tax_total, total = calculate_totals(items)
                    changes.update(items=items, subtotal=subtotal, tax_total=tax_total, total=total)
                elif value is None and field in _REQUIRED_FIELDS:
                    raise ValidationError(field, "is required")
                elif field == "customer_name":
                    changes[field] = value or ""
                else:
                    changes[field] = value

            merged = invoice.model_copy(update=changes)
            self._validate_period(merged.period_start, merged.period_end)
            merged = merged.model_copy(
                update={"updated_at": self.clock.now(), "version": invoice.version + 1}
            )
            saved = await self._call(self.store.save(merged))

        logger.info(f"Updated invoice {saved.invoice_number}: {sorted(changes)}")
        return saved

    async def update_status(self, invoice_id: str, new_status: InvoiceStatus) -> Invoice:
        """
        Move an invoice to a new status and emit the matching notification

        Raises:
            NotFoundError: If invoice_id is unknown
            InvalidTransitionError: If the active policy forbids the move
            ConcurrentUpdateError: If another writer saved the invoice first
        """
        async with self.invoice_scope(invoice_id):
            invoice = await self.get(invoice_id)
            updated = apply_transition(invoice, new_status, self.clock.now(), self.policy)
            updated = updated.model_copy(update={"version": invoice.version + 1})
            saved = await self._call(self.store.save(updated))

        logger.info(
            f"Invoice {saved.invoice_number} moved from {invoice.status.value} to {saved.status.value}"
        )
        event = InvoiceEvent.for_transition(saved)
        if event is not None:
            await self.emitter.emit(event)
        return saved

    async def query(self, filter_options: Optional[InvoiceFilterOptions] = None) -> List[Invoice]:
        """
        Invoices matching every set filter field, ordered by issue date and number
        """
        filter_options = filter_options or InvoiceFilterOptions()
        invoices = await self._call(self.store.list_all())
        matched = [invoice for invoice in invoices if filter_options.matches(invoice)]
        return sorted(matched, key=lambda invoice: (invoice.issue_date, invoice.invoice_number))

    async def list_by_status(self, status: InvoiceStatus) -> List[Invoice]:
        return await self.query(InvoiceFilterOptions(status=status))

    async def find_by_id(self, invoice_id: str) -> Optional[Invoice]:
        return await self._call(self.store.load(invoice_id))

    async def get(self, invoice_id: str) -> Invoice:
        invoice = await self.find_by_id(invoice_id)
        if invoice is None:
            raise NotFoundError("invoice", invoice_id)
        return invoice

    async def exists_for_period(self, customer_id: str, period_start: date, period_end: date) -> bool:
        """
        Check if any invoice (in any status) covers exactly this billing period

        Used by monthly generation to prevent double billing.
        """
        invoices = await self._call(self.store.list_all())
        return any(
            invoice.customer_id == customer_id
            and invoice.period_start == period_start
            and invoice.period_end == period_end
            for invoice in invoices
        )

    @asynccontextmanager
    async def invoice_scope(self, invoice_id: str) -> AsyncIterator[None]:
        """
        Hold the invoice's lock; callers keep it until their commit so the
        next writer in this process reads the committed row.
        """
        async with self.locks.hold(f"invoice:{invoice_id}"):
            yield

    @asynccontextmanager
    async def creation_scope(self, draft: InvoiceDraft) -> AsyncIterator[None]:
        """Hold the (month, customer) numbering lock for a draft, if it names both"""
        if draft.customer_id and draft.issue_date:
            async with self.locks.hold(f"number:{draft.issue_date:%Y%m}:{draft.customer_id}"):
                yield
        else:
            yield

    def _validate_required(self, draft: InvoiceDraft) -> None:
        for field in _REQUIRED_FIELDS:
            if getattr(draft, field) in (None, ""):
                raise ValidationError(field, "is required")

    def _validate_period(self, period_start: date, period_end: date) -> None:
        if period_end < period_start:
            raise ValidationError(
                "period_end", f"{period_end} is before period_start {period_start}"
            )

    def _build_items(self, drafts: Iterable[InvoiceItemDraft]) -> List[InvoiceItem]:
        items = []
        for index, draft in enumerate(drafts):
            field = f"items[{index}]"
            if not draft.name:
                raise ValidationError(f"{field}.name", "is required")
            if draft.quantity is None or draft.quantity <= 0:
                raise ValidationError(f"{field}.quantity", "must be greater than 0")
            if draft.unit_price is None or draft.unit_price < 0:
                raise ValidationError(f"{field}.unit_price", "must be 0 or greater")
            if draft.tax_rate < 0:
                raise ValidationError(f"{field}.tax_rate", "must be 0 or greater")
            items.append(
                InvoiceItem.build(
                    name=draft.name,
                    quantity=draft.quantity,
                    unit_price=draft.unit_price,
                    tax_rate=draft.tax_rate,
                    description=draft.description,
                    item_id=draft.id,
                )
            )
        if not items:
            raise ValidationError("items", "at least one item is required")
        return items

    async def _call(self, awaitable):
        return await call_with_timeout(awaitable, self.timeout_seconds, "Invoice store")
