"""Notification Sink Implementations

Provides concrete implementations for delivering invoice notifications.
"""

import logging
from typing import Optional
import httpx
from invoice_lifecycle.app.services.notification_service import NotificationSink
from invoice_lifecycle.domain.notification import InvoiceNotification

logger = logging.getLogger(__name__)


class LoggingNotificationSink(NotificationSink):
    """
    Notification sink that logs notifications

    Useful for development and testing, or as a fallback.
    """

    async def deliver(self, notification: InvoiceNotification) -> bool:
        """
        Log notification

        Returns:
            Always True (logging never fails)
        """
        logger.info(
            f"[INVOICE NOTIFICATION] User: {notification.user_id}, "
            f"Invoice: {notification.invoice_id}, "
            f"Event: {notification.event_type.value}, "
            f"Title: {notification.title}"
        )
        return True


class WebhookNotificationSink(NotificationSink):
    """
    Notification sink that posts notifications to an HTTP webhook

    Sends JSON payload to configured webhook URL.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize webhook notification sink

        Args:
            webhook_url: URL to POST notifications to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def deliver(self, notification: InvoiceNotification) -> bool:
        """
        Send notification via webhook

        Returns:
            True if webhook call succeeded, False otherwise
        """
        payload = {
            "type": "invoice_notification",
            "notification_id": notification.id,
            "user_id": notification.user_id,
            "invoice_id": notification.invoice_id,
            "event_type": notification.event_type.value,
            "title": notification.title,
            "message": notification.message,
            "created_at": notification.created_at.isoformat(),
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(
                    f"Webhook notification sent for {notification.id} to {self.webhook_url}"
                )
                return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to send webhook notification {notification.id}: {e}")
            return False


class CompositeNotificationSink(NotificationSink):
    """
    Notification sink that delegates to multiple sinks

    Useful for sending to multiple channels (e.g., log + webhook).
    """

    def __init__(self, sinks: list[NotificationSink]):
        self.sinks = sinks

    async def deliver(self, notification: InvoiceNotification) -> bool:
        """
        Deliver to all configured sinks

        Returns:
            True if at least one sink accepted the notification
        """
        success = False
        for sink in self.sinks:
            try:
                if await sink.deliver(notification):
                    success = True
            except Exception as e:
                logger.error(f"Notification sink {type(sink).__name__} failed: {e}")
        return success


def create_notification_sink(webhook_url: Optional[str] = None) -> NotificationSink:
    """
    Factory function to create the configured notification sink

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     sink with logging + webhook. Otherwise, just logging.
    """
    sinks: list[NotificationSink] = [LoggingNotificationSink()]

    if webhook_url:
        sinks.append(WebhookNotificationSink(webhook_url))

    if len(sinks) == 1:
        return sinks[0]

    return CompositeNotificationSink(sinks)
