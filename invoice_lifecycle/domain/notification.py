"""Invoice Notification Domain Entity

In-app notification addressed to the customer of an invoice. Produced by
status transitions and batch events; only the read flag changes later.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field
from invoice_lifecycle.domain.base import generate_uuid


class NotificationEventType(str, Enum):
    """Lifecycle events that produce notifications"""
    ISSUED = "issued"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELED = "canceled"
    GENERATED = "generated"
    UNPAID_REMINDER = "unpaid_reminder"
    ISSUED_REMINDER = "issued_reminder"


class ReminderType(str, Enum):
    """Reminder kinds sent by the batch processor"""
    UNPAID = "unpaid"
    ISSUED = "issued"


class InvoiceNotification(BaseModel):
    """
    Invoice Notification - Inbox record for a customer

    Domain Rules:
    - user_id is always the invoice's customer_id
    - Append-only; is_read is the only mutable field
    - event_key, when present, is unique (deduplicates batch re-runs)
    """

    id: str = Field(default_factory=generate_uuid)
    user_id: str
    invoice_id: str
    event_type: NotificationEventType
    event_key: Optional[str] = None
    title: str
    message: str
    is_read: bool = False
    created_at: datetime


class ReminderEvent(BaseModel):
    """Reminder produced by a batch run (status is not changed)"""

    invoice_id: str
    customer_id: str
    type: ReminderType

    def event_key(self, today: date) -> str:
        return f"{self.type.value}:{self.invoice_id}:{today.isoformat()}"
