"""In-memory store implementations

Dictionary-backed stores used by tests and by the demo wiring. They keep
the same uniqueness rules as the SQL stores.
"""

from typing import Dict, List, Optional
from invoice_lifecycle.app.repositories.billing_profile_store import BillingProfileStore
from invoice_lifecycle.app.repositories.invoice_store import InvoiceStore
from invoice_lifecycle.app.repositories.notification_store import NotificationStore
from invoice_lifecycle.domain.billing_profile import BillingProfile
from invoice_lifecycle.domain.errors import ConcurrentUpdateError, PersistenceError
from invoice_lifecycle.domain.invoice import Invoice
from invoice_lifecycle.domain.notification import InvoiceNotification


class InMemoryInvoiceStore(InvoiceStore):
    def __init__(self):
        self._invoices: Dict[str, Invoice] = {}

    async def load(self, invoice_id: str) -> Optional[Invoice]:
        invoice = self._invoices.get(invoice_id)
        return invoice.model_copy(deep=True) if invoice else None

    async def save(self, invoice: Invoice) -> Invoice:
        for other in self._invoices.values():
            if other.id != invoice.id and other.invoice_number == invoice.invoice_number:
                raise PersistenceError(
                    f"Invoice number {invoice.invoice_number} already exists",
                    reason="unique constraint on invoice_number",
                )
        current = self._invoices.get(invoice.id)
        if current is not None and current.version != invoice.version - 1:
            raise ConcurrentUpdateError(invoice.id, invoice.version - 1)
        self._invoices[invoice.id] = invoice.model_copy(deep=True)
        return invoice

    async def list_by_prefix(self, prefix: str) -> List[Invoice]:
        return [
            invoice.model_copy(deep=True)
            for invoice in sorted(self._invoices.values(), key=lambda i: i.invoice_number)
            if invoice.invoice_number.startswith(prefix)
        ]

    async def list_all(self) -> List[Invoice]:
        return [invoice.model_copy(deep=True) for invoice in self._invoices.values()]


class InMemoryNotificationStore(NotificationStore):
    def __init__(self):
        self._notifications: Dict[str, InvoiceNotification] = {}

    async def append(self, notification: InvoiceNotification) -> InvoiceNotification:
        if notification.event_key and await self.get_by_event_key(notification.event_key):
            raise PersistenceError(
                f"Notification for {notification.event_key} already exists",
                reason="unique constraint on event_key",
            )
        self._notifications[notification.id] = notification.model_copy()
        return notification

    async def get(self, notification_id: str) -> Optional[InvoiceNotification]:
        notification = self._notifications.get(notification_id)
        return notification.model_copy() if notification else None

    async def get_by_event_key(self, event_key: str) -> Optional[InvoiceNotification]:
        for notification in self._notifications.values():
            if notification.event_key == event_key:
                return notification.model_copy()
        return None

    async def list_by_user(self, user_id: str, unread_only: bool = False) -> List[InvoiceNotification]:
        matched = [
            notification.model_copy()
            for notification in self._notifications.values()
            if notification.user_id == user_id and not (unread_only and notification.is_read)
        ]
        return sorted(matched, key=lambda n: n.created_at, reverse=True)

    async def set_read(self, notification_ids: List[str]) -> int:
        changed = 0
        for notification_id in notification_ids:
            notification = self._notifications.get(notification_id)
            if notification is not None and not notification.is_read:
                self._notifications[notification_id] = notification.model_copy(update={"is_read": True})
                changed += 1
        return changed


class InMemoryBillingProfileStore(BillingProfileStore):
    def __init__(self, profiles: Optional[List[BillingProfile]] = None):
        self._profiles: Dict[str, BillingProfile] = {}
        for profile in profiles or []:
            self._profiles[profile.customer_id] = profile

    async def get(self, customer_id: str) -> Optional[BillingProfile]:
        return self._profiles.get(customer_id)

    async def save(self, profile: BillingProfile) -> BillingProfile:
        self._profiles[profile.customer_id] = profile
        return profile

    async def list_active(self) -> List[BillingProfile]:
        return [
            profile
            for _, profile in sorted(self._profiles.items())
            if profile.active
        ]
