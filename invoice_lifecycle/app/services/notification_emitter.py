"""Notification Emitter

Turns invoice lifecycle events into InvoiceNotification records, stores
them and hands them to the configured sink.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
from invoice_lifecycle.app.repositories.notification_store import NotificationStore
from invoice_lifecycle.app.services.clock import Clock
from invoice_lifecycle.app.services.notification_service import NotificationSink
from invoice_lifecycle.app.services.timeouts import call_with_timeout
from invoice_lifecycle.domain.errors import NotFoundError
from invoice_lifecycle.domain.invoice import Invoice, InvoiceStatus
from invoice_lifecycle.domain.notification import InvoiceNotification, NotificationEventType

logger = logging.getLogger(__name__)


TEMPLATES: Dict[NotificationEventType, Tuple[str, str]] = {
    NotificationEventType.ISSUED: (
        "Invoice issued: {number}",
        "Your invoice for {period_start} - {period_end} has been issued. Total: {total}",
    ),
    NotificationEventType.PAID: (
        "Payment received: {number}",
        "Payment for invoice {number} has been received. Thank you.",
    ),
    NotificationEventType.OVERDUE: (
        "Payment overdue: {number}",
        "Invoice {number} was due on {due_date}. Please arrange payment as soon as possible.",
    ),
    NotificationEventType.CANCELED: (
        "Invoice canceled: {number}",
        "Invoice {number} has been canceled.",
    ),
    NotificationEventType.GENERATED: (
        "New invoice generated: {number}",
        "An invoice for {period_start} - {period_end} has been generated. Total: {total}",
    ),
    NotificationEventType.UNPAID_REMINDER: (
        "Reminder: invoice not yet issued: {number}",
        "Invoice {number} for {period_start} - {period_end} has not been issued yet.",
    ),
    NotificationEventType.ISSUED_REMINDER: (
        "Reminder: payment due: {number}",
        "Invoice {number} is awaiting payment by {due_date}. Total: {total}",
    ),
}

_TRANSITION_EVENTS = {
    InvoiceStatus.ISSUED: NotificationEventType.ISSUED,
    InvoiceStatus.PAID: NotificationEventType.PAID,
    InvoiceStatus.OVERDUE: NotificationEventType.OVERDUE,
    InvoiceStatus.CANCELED: NotificationEventType.CANCELED,
}


@dataclass(frozen=True)
class InvoiceEvent:
    """Lifecycle event about one invoice"""

    event_type: NotificationEventType
    invoice: Invoice
    event_key: Optional[str] = None

    @classmethod
    def for_transition(cls, invoice: Invoice) -> Optional["InvoiceEvent"]:
        """Event for an invoice that has just reached its current status"""
        event_type = _TRANSITION_EVENTS.get(invoice.status)
        if event_type is None:
            return None
        return cls(event_type=event_type, invoice=invoice)


class NotificationEmitter:
    """
    Creates and tracks invoice notifications

    Notifications are always addressed to invoice.customer_id. Events with an
    event_key are emitted at most once; re-emitting returns the stored record.
    Store calls are bounded by timeout_seconds (PersistenceError on expiry).
    """

    def __init__(
        self,
        store: NotificationStore,
        clock: Clock,
        sink: Optional[NotificationSink] = None,
        timeout_seconds: float = 10.0,
    ):
        self.store = store
        self.clock = clock
        self.sink = sink
        self.timeout_seconds = timeout_seconds

    async def emit(self, event: InvoiceEvent) -> Optional[InvoiceNotification]:
        """
        Store a notification for the event and deliver it

        Args:
            event: Lifecycle event

        Returns:
            The stored notification, or None if the event type has no template
        """
        template = TEMPLATES.get(event.event_type)
        if template is None:
            return None

        if event.event_key:
            existing = await self._call(self.store.get_by_event_key(event.event_key))
            if existing is not None:
                logger.debug(f"Notification for {event.event_key} already emitted")
                return existing

        title, message = self._render(template, event.invoice)
        notification = InvoiceNotification(
            user_id=event.invoice.customer_id,
            invoice_id=event.invoice.id,
            event_type=event.event_type,
            event_key=event.event_key,
            title=title,
            message=message,
            created_at=self.clock.now(),
        )
        notification = await self._call(self.store.append(notification))
        await self._deliver(notification)
        return notification

    async def mark_read(self, notification_id: str) -> InvoiceNotification:
        notification = await self._call(self.store.get(notification_id))
        if notification is None:
            raise NotFoundError("notification", notification_id)
        if not notification.is_read:
            await self._call(self.store.set_read([notification_id]))
        return notification.model_copy(update={"is_read": True})

    async def mark_all_read(self, user_id: str) -> int:
        unread = await self._call(self.store.list_by_user(user_id, unread_only=True))
        if not unread:
            return 0
        return await self._call(self.store.set_read([n.id for n in unread]))

    async def list_for_user(self, user_id: str, unread_only: bool = False) -> List[InvoiceNotification]:
        return await self._call(self.store.list_by_user(user_id, unread_only=unread_only))

    def _render(self, template: Tuple[str, str], invoice: Invoice) -> Tuple[str, str]:
        values = {
            "number": invoice.invoice_number,
            "period_start": invoice.period_start.isoformat(),
            "period_end": invoice.period_end.isoformat(),
            "due_date": invoice.due_date.isoformat(),
            "total": f"{invoice.total:,}",
        }
        title, message = template
        return title.format(**values), message.format(**values)

    async def _deliver(self, notification: InvoiceNotification) -> None:
        if self.sink is None:
            return
        try:
            if not await self.sink.deliver(notification):
                logger.warning(f"Notification {notification.id} was not accepted by the sink")
        except Exception as e:
            logger.error(f"Notification sink {type(self.sink).__name__} failed: {e}")

    async def _call(self, awaitable):
        return await call_with_timeout(awaitable, self.timeout_seconds, "Notification store")
