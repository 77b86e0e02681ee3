from .invoice_store import SqlAlchemyInvoiceStore
from .notification_store import SqlAlchemyNotificationStore
from .billing_profile_store import SqlAlchemyBillingProfileStore
from .in_memory import InMemoryInvoiceStore, InMemoryNotificationStore, InMemoryBillingProfileStore

__all__ = [
    "SqlAlchemyInvoiceStore",
    "SqlAlchemyNotificationStore",
    "SqlAlchemyBillingProfileStore",
    "InMemoryInvoiceStore",
    "InMemoryNotificationStore",
    "InMemoryBillingProfileStore",
]
