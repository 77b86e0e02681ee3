from .unit_of_work import UnitOfWork
from .clock import Clock
from .keyed_lock import KeyedLock
from .notification_service import NotificationSink
from .notification_emitter import NotificationEmitter, InvoiceEvent

__all__ = [
    "UnitOfWork",
    "Clock",
    "KeyedLock",
    "NotificationSink",
    "NotificationEmitter",
    "InvoiceEvent",
]
