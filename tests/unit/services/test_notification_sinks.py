"""Unit tests for notification sink implementations"""

import httpx
import pytest
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

from invoice_lifecycle.adapter.services.notification_service import (
    CompositeNotificationSink,
    LoggingNotificationSink,
    WebhookNotificationSink,
    create_notification_sink,
)
from invoice_lifecycle.domain.notification import InvoiceNotification, NotificationEventType

WEBHOOK_URL = "https://hooks.example.com/invoices"


@pytest.fixture
def sample_notification():
    return InvoiceNotification(
        user_id="tenant-1",
        invoice_id="inv1",
        event_type=NotificationEventType.PAID,
        title="Payment received: 202402-tenant-1-001",
        message="Payment for invoice 202402-tenant-1-001 has been received. Thank you.",
        created_at=datetime(2024, 2, 15, 9, 0, 0),
    )


@pytest.mark.asyncio
class TestWebhookNotificationSink:
    async def test_posts_payload(self, sample_notification):
        # Arrange
        response = httpx.Response(200, request=httpx.Request("POST", WEBHOOK_URL))
        sink = WebhookNotificationSink(WEBHOOK_URL)

        # Act
        with patch.object(httpx.AsyncClient, "post", AsyncMock(return_value=response)) as mock_post:
            delivered = await sink.deliver(sample_notification)

        # Assert
        assert delivered is True
        payload = mock_post.call_args.kwargs["json"]
        assert payload["user_id"] == "tenant-1"
        assert payload["event_type"] == "paid"

    async def test_http_error_returns_false(self, sample_notification):
        sink = WebhookNotificationSink(WEBHOOK_URL)

        with patch.object(
            httpx.AsyncClient, "post", AsyncMock(side_effect=httpx.ConnectError("refused"))
        ):
            delivered = await sink.deliver(sample_notification)

        assert delivered is False

    async def test_error_status_returns_false(self, sample_notification):
        response = httpx.Response(500, request=httpx.Request("POST", WEBHOOK_URL))
        sink = WebhookNotificationSink(WEBHOOK_URL)

        with patch.object(httpx.AsyncClient, "post", AsyncMock(return_value=response)):
            delivered = await sink.deliver(sample_notification)

        assert delivered is False


@pytest.mark.asyncio
class TestCompositeNotificationSink:
    async def test_succeeds_if_any_sink_accepts(self, sample_notification):
        failing = MagicMock()
        failing.deliver = AsyncMock(side_effect=RuntimeError("boom"))
        sink = CompositeNotificationSink([failing, LoggingNotificationSink()])

        assert await sink.deliver(sample_notification) is True


class TestCreateNotificationSink:
    def test_logging_only_without_webhook(self):
        assert isinstance(create_notification_sink(), LoggingNotificationSink)

    def test_composite_with_webhook(self):
        sink = create_notification_sink(WEBHOOK_URL)

        assert isinstance(sink, CompositeNotificationSink)
        assert isinstance(sink.sinks[1], WebhookNotificationSink)
