"""Notification Sink Interface

Defines the contract for handing invoice notifications to downstream
delivery (UI inbox push, email, SMS).
"""

from abc import ABC, abstractmethod
from invoice_lifecycle.domain.notification import InvoiceNotification


class NotificationSink(ABC):
    """
    Abstract sink for invoice notifications

    Implementations can deliver notifications via:
    - Logging
    - Webhook (HTTP POST)
    - Email / SMS gateways
    """

    @abstractmethod
    async def deliver(self, notification: InvoiceNotification) -> bool:
        """
        Hand a notification to downstream delivery

        Args:
            notification: Stored notification record

        Returns:
            True if accepted, False otherwise
        """
        pass
