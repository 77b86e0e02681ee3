"""Notification inbox Use Cases"""

from invoice_lifecycle.app.services.notification_emitter import NotificationEmitter
from invoice_lifecycle.app.services.unit_of_work import UnitOfWork
from invoice_lifecycle.domain.errors import InvoiceLifecycleError
from invoice_lifecycle.domain.notification import InvoiceNotification
from invoice_lifecycle.libs.result import Result, Return, Error
from .common import to_error
from .dtos import MarkAllReadResponseDTO, NotificationListResponseDTO


class ListNotifications:
    """Use Case: A user's notifications, newest first"""

    def __init__(self, emitter: NotificationEmitter):
        self.emitter = emitter

    async def execute(self, user_id: str, unread_only: bool = False) -> Result[NotificationListResponseDTO]:
        try:
            notifications = await self.emitter.list_for_user(user_id, unread_only=unread_only)
        except InvoiceLifecycleError as e:
            return Return.err(to_error(e))
        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_NOTIFICATIONS_FAILED",
                    message="Failed to list notifications",
                    reason=str(e),
                )
            )
        return Return.ok(
            NotificationListResponseDTO(
                user_id=user_id,
                notifications=notifications,
                unread_count=sum(1 for n in notifications if not n.is_read),
            )
        )


class MarkNotificationRead:
    """Use Case: Mark one notification as read (idempotent)"""

    def __init__(self, uow: UnitOfWork, emitter: NotificationEmitter):
        self.uow = uow
        self.emitter = emitter

    async def execute(self, notification_id: str) -> Result[InvoiceNotification]:
        try:
            notification = await self.emitter.mark_read(notification_id)
            await self.uow.commit()
            return Return.ok(notification)

        except InvoiceLifecycleError as e:
            await self.uow.rollback()
            return Return.err(to_error(e))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="MARK_NOTIFICATION_READ_FAILED",
                    message="Failed to mark notification as read",
                    reason=str(e),
                )
            )


class MarkAllNotificationsRead:
    """Use Case: Mark every notification of a user as read (idempotent)"""

    def __init__(self, uow: UnitOfWork, emitter: NotificationEmitter):
        self.uow = uow
        self.emitter = emitter

    async def execute(self, user_id: str) -> Result[MarkAllReadResponseDTO]:
        try:
            updated = await self.emitter.mark_all_read(user_id)
            await self.uow.commit()
            return Return.ok(MarkAllReadResponseDTO(user_id=user_id, updated=updated))

        except InvoiceLifecycleError as e:
            await self.uow.rollback()
            return Return.err(to_error(e))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="MARK_ALL_NOTIFICATIONS_READ_FAILED",
                    message="Failed to mark notifications as read",
                    reason=str(e),
                )
            )
