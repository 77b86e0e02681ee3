"""SQLAlchemy Notification Store Implementation"""

from typing import List, Optional
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select, col
from sqlmodel.ext.asyncio.session import AsyncSession
from invoice_lifecycle.adapter.repositories.records import NotificationRecord
from invoice_lifecycle.app.repositories.notification_store import NotificationStore
from invoice_lifecycle.domain.errors import PersistenceError
from invoice_lifecycle.domain.notification import InvoiceNotification


class SqlAlchemyNotificationStore(NotificationStore):
    """SQLAlchemy implementation of NotificationStore"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, notification: InvoiceNotification) -> InvoiceNotification:
        try:
            self.session.add(NotificationRecord.from_notification(notification))
            await self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to store notification", reason=str(e)) from e
        return notification

    async def get(self, notification_id: str) -> Optional[InvoiceNotification]:
        statement = select(NotificationRecord).where(NotificationRecord.id == notification_id)
        return await self._fetch_one(statement)

    async def get_by_event_key(self, event_key: str) -> Optional[InvoiceNotification]:
        statement = select(NotificationRecord).where(NotificationRecord.event_key == event_key)
        return await self._fetch_one(statement)

    async def list_by_user(self, user_id: str, unread_only: bool = False) -> List[InvoiceNotification]:
        statement = select(NotificationRecord).where(NotificationRecord.user_id == user_id)
        if unread_only:
            statement = statement.where(col(NotificationRecord.is_read) == False)  # noqa: E712
        statement = statement.order_by(col(NotificationRecord.created_at).desc())
        try:
            result = await self.session.execute(statement)
            records = result.scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to query notifications", reason=str(e)) from e
        return [record.to_notification() for record in records]

    async def set_read(self, notification_ids: List[str]) -> int:
        if not notification_ids:
            return 0
        statement = (
            update(NotificationRecord)
            .where(col(NotificationRecord.id).in_(notification_ids))
            .where(col(NotificationRecord.is_read) == False)  # noqa: E712
            .values(is_read=True)
            .execution_options(synchronize_session="fetch")
        )
        try:
            result = await self.session.execute(statement)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to update notifications", reason=str(e)) from e
        return result.rowcount or 0

    async def _fetch_one(self, statement) -> Optional[InvoiceNotification]:
        try:
            result = await self.session.execute(statement)
            record = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load notification", reason=str(e)) from e
        return record.to_notification() if record else None
