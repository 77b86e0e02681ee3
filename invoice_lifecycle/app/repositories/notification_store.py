"""Notification Store Interface

Defines the contract for invoice notification persistence.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from invoice_lifecycle.domain.notification import InvoiceNotification


class NotificationStore(ABC):
    """
    Persistence interface for InvoiceNotification records

    Notifications are append-only; set_read is the only update.
    """

    @abstractmethod
    async def append(self, notification: InvoiceNotification) -> InvoiceNotification:
        """
        Store a new notification

        Args:
            notification: Notification to persist

        Returns:
            The persisted notification
        """
        pass

    @abstractmethod
    async def get(self, notification_id: str) -> Optional[InvoiceNotification]:
        """
        Retrieve notification by ID

        Returns:
            InvoiceNotification if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_event_key(self, event_key: str) -> Optional[InvoiceNotification]:
        """
        Retrieve the notification produced for a deduplication key

        Returns:
            InvoiceNotification if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_by_user(self, user_id: str, unread_only: bool = False) -> List[InvoiceNotification]:
        """
        Retrieve notifications addressed to a user, newest first

        Args:
            user_id: Addressee (customer ID)
            unread_only: If True, only notifications with is_read=False

        Returns:
            List of notifications
        """
        pass

    @abstractmethod
    async def set_read(self, notification_ids: List[str]) -> int:
        """
        Mark notifications as read

        Args:
            notification_ids: IDs to mark

        Returns:
            Number of notifications that changed from unread to read
        """
        pass
