from .invoice_store import InvoiceStore
from .notification_store import NotificationStore
from .billing_profile_store import BillingProfileStore

__all__ = [
    "InvoiceStore",
    "NotificationStore",
    "BillingProfileStore",
]
