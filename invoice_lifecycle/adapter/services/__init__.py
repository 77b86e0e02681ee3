from .unit_of_work import SqlAlchemyUnitOfWork, InMemoryUnitOfWork
from .clock import SystemClock, FixedClock
from .notification_service import (
    LoggingNotificationSink,
    WebhookNotificationSink,
    CompositeNotificationSink,
    create_notification_sink,
)

__all__ = [
    "SqlAlchemyUnitOfWork",
    "InMemoryUnitOfWork",
    "SystemClock",
    "FixedClock",
    "LoggingNotificationSink",
    "WebhookNotificationSink",
    "CompositeNotificationSink",
    "create_notification_sink",
]
