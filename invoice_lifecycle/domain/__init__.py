from .base import BaseModel, generate_uuid
from .errors import (
    InvoiceLifecycleError,
    ValidationError,
    NotFoundError,
    InvalidTransitionError,
    DuplicateGenerationError,
    PersistenceError,
    ConcurrentUpdateError,
)
from .invoice import (
    Invoice,
    InvoiceItem,
    InvoiceStatus,
    InvoiceFilterOptions,
    BankInfo,
    AccountType,
    calculate_tax,
    calculate_totals,
)
from .notification import InvoiceNotification, NotificationEventType, ReminderEvent, ReminderType
from .billing_profile import BillingProfile
from .status_transition import (
    TransitionPolicy,
    STRICT_POLICY,
    PERMISSIVE_POLICY,
    get_transition_policy,
    is_transition_allowed,
    apply_transition,
)

__all__ = [
    "BaseModel",
    "generate_uuid",
    "InvoiceLifecycleError",
    "ValidationError",
    "NotFoundError",
    "InvalidTransitionError",
    "DuplicateGenerationError",
    "PersistenceError",
    "ConcurrentUpdateError",
    "Invoice",
    "InvoiceItem",
    "InvoiceStatus",
    "InvoiceFilterOptions",
    "BankInfo",
    "AccountType",
    "calculate_tax",
    "calculate_totals",
    "InvoiceNotification",
    "NotificationEventType",
    "ReminderEvent",
    "ReminderType",
    "BillingProfile",
    "TransitionPolicy",
    "STRICT_POLICY",
    "PERMISSIVE_POLICY",
    "get_transition_policy",
    "is_transition_allowed",
    "apply_transition",
]
