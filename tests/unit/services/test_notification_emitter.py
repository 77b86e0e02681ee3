"""Unit tests for NotificationEmitter

Tests cover:
- Templates and addressing
- event_key deduplication
- Read tracking
- Sink delivery failures
"""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

from invoice_lifecycle.app.services.notification_emitter import (
    TEMPLATES,
    InvoiceEvent,
    NotificationEmitter,
)
from invoice_lifecycle.domain.errors import NotFoundError, PersistenceError
from invoice_lifecycle.domain.invoice import InvoiceStatus
from invoice_lifecycle.domain.notification import NotificationEventType
from tests.factories import make_invoice


@pytest.mark.asyncio
class TestEmit:
    """Test notification creation"""

    async def test_emit_renders_template_for_customer(self, emitter, notification_store, clock):
        """
        Given: An issued invoice
        When: The ISSUED event is emitted
        Then: One unread notification addressed to the customer is stored
        """
        # Arrange
        invoice = make_invoice(status=InvoiceStatus.ISSUED)

        # Act
        notification = await emitter.emit(InvoiceEvent(NotificationEventType.ISSUED, invoice))

        # Assert
        assert notification.user_id == "tenant-1"
        assert notification.invoice_id == invoice.id
        assert notification.title == "Invoice issued: 202402-tenant-1-001"
        assert "2024-01-01 - 2024-01-31" in notification.message
        assert "33,000" in notification.message
        assert notification.is_read is False
        assert notification.created_at == clock.now()
        assert await notification_store.list_by_user("tenant-1") == [notification]

    @pytest.mark.parametrize("event_type", list(NotificationEventType))
    async def test_every_event_type_has_a_template(self, emitter, event_type):
        assert event_type in TEMPLATES

        notification = await emitter.emit(InvoiceEvent(event_type, make_invoice()))

        assert notification.event_type == event_type
        assert "202402-tenant-1-001" in notification.title

    async def test_event_key_deduplicates(self, emitter, notification_store):
        """
        Given: A reminder event with an event_key already emitted
        When: The same event is emitted again
        Then: The stored notification is returned and nothing new is stored
        """
        # Arrange
        event = InvoiceEvent(
            NotificationEventType.UNPAID_REMINDER,
            make_invoice(),
            event_key="unpaid:inv1:2024-02-20",
        )
        first = await emitter.emit(event)

        # Act
        second = await emitter.emit(event)

        # Assert
        assert second.id == first.id
        assert len(await notification_store.list_by_user("tenant-1")) == 1

    async def test_events_without_key_are_not_deduplicated(self, emitter, notification_store):
        event = InvoiceEvent(NotificationEventType.ISSUED, make_invoice())

        await emitter.emit(event)
        await emitter.emit(event)

        assert len(await notification_store.list_by_user("tenant-1")) == 2


class TestInvoiceEventForTransition:
    @pytest.mark.parametrize(
        "status, event_type",
        [
            (InvoiceStatus.ISSUED, NotificationEventType.ISSUED),
            (InvoiceStatus.PAID, NotificationEventType.PAID),
            (InvoiceStatus.OVERDUE, NotificationEventType.OVERDUE),
            (InvoiceStatus.CANCELED, NotificationEventType.CANCELED),
        ],
    )
    def test_maps_status_to_event(self, status, event_type):
        event = InvoiceEvent.for_transition(make_invoice(status=status))

        assert event.event_type == event_type

    def test_unpaid_has_no_event(self):
        assert InvoiceEvent.for_transition(make_invoice(status=InvoiceStatus.UNPAID)) is None


@pytest.mark.asyncio
class TestReadTracking:
    """Test mark_read / mark_all_read"""

    async def test_mark_read_is_idempotent(self, emitter, notification_store):
        # Arrange
        notification = await emitter.emit(InvoiceEvent(NotificationEventType.ISSUED, make_invoice()))

        # Act
        first = await emitter.mark_read(notification.id)
        second = await emitter.mark_read(notification.id)

        # Assert
        assert first.is_read is True
        assert second.is_read is True
        assert (await notification_store.get(notification.id)).is_read is True

    async def test_mark_read_unknown_id(self, emitter):
        with pytest.raises(NotFoundError) as exc_info:
            await emitter.mark_read("missing")

        assert exc_info.value.code == "NOTIFICATION_NOT_FOUND"

    async def test_mark_all_read_only_touches_one_user(self, emitter, clock):
        """
        Given: Two unread notifications for tenant-1 and one for tenant-2
        When: mark_all_read("tenant-1") is called twice
        Then: 2 then 0 are updated; tenant-2 stays unread
        """
        # Arrange
        await emitter.emit(InvoiceEvent(NotificationEventType.ISSUED, make_invoice()))
        clock.advance(minutes=1)
        await emitter.emit(InvoiceEvent(NotificationEventType.PAID, make_invoice()))
        await emitter.emit(
            InvoiceEvent(NotificationEventType.ISSUED, make_invoice(customer_id="tenant-2"))
        )

        # Act
        first = await emitter.mark_all_read("tenant-1")
        second = await emitter.mark_all_read("tenant-1")

        # Assert
        assert first == 2
        assert second == 0
        assert await emitter.list_for_user("tenant-1", unread_only=True) == []
        assert len(await emitter.list_for_user("tenant-2", unread_only=True)) == 1

    async def test_list_for_user_is_newest_first(self, emitter, clock):
        await emitter.emit(InvoiceEvent(NotificationEventType.ISSUED, make_invoice()))
        clock.advance(days=1)
        await emitter.emit(InvoiceEvent(NotificationEventType.PAID, make_invoice()))

        notifications = await emitter.list_for_user("tenant-1")

        assert [n.event_type for n in notifications] == [
            NotificationEventType.PAID,
            NotificationEventType.ISSUED,
        ]


@pytest.mark.asyncio
class TestSinkDelivery:
    """Test hand-off to the notification sink"""

    async def test_sink_receives_notification(self, notification_store, clock):
        sink = MagicMock()
        sink.deliver = AsyncMock(return_value=True)
        emitter = NotificationEmitter(store=notification_store, clock=clock, sink=sink)

        notification = await emitter.emit(InvoiceEvent(NotificationEventType.PAID, make_invoice()))

        sink.deliver.assert_called_once_with(notification)

    async def test_sink_failure_does_not_fail_emit(self, notification_store, clock):
        """
        Given: A sink that raises
        When: An event is emitted
        Then: The notification is still stored and returned
        """
        sink = MagicMock()
        sink.deliver = AsyncMock(side_effect=RuntimeError("webhook down"))
        emitter = NotificationEmitter(store=notification_store, clock=clock, sink=sink)

        notification = await emitter.emit(InvoiceEvent(NotificationEventType.PAID, make_invoice()))

        assert await notification_store.get(notification.id) is not None


@pytest.mark.asyncio
class TestStoreTimeout:
    async def test_slow_notification_store_raises_persistence_error(self, clock):
        """
        Given: A notification store that never answers in time
        When: An event is emitted
        Then: PersistenceError is raised after the timeout and the sink is not called
        """
        # Arrange
        async def slow_append(notification):
            await asyncio.sleep(1)

        store = AsyncMock()
        store.append = slow_append
        sink = MagicMock()
        sink.deliver = AsyncMock(return_value=True)
        emitter = NotificationEmitter(store=store, clock=clock, sink=sink, timeout_seconds=0.01)

        # Act & Assert
        with pytest.raises(PersistenceError) as exc_info:
            await emitter.emit(InvoiceEvent(NotificationEventType.PAID, make_invoice()))
        assert exc_info.value.code == "PERSISTENCE_ERROR"
        sink.deliver.assert_not_called()

    async def test_slow_listing_raises_persistence_error(self, clock):
        async def slow_list(user_id, unread_only=False):
            await asyncio.sleep(1)

        store = AsyncMock()
        store.list_by_user = slow_list
        emitter = NotificationEmitter(store=store, clock=clock, timeout_seconds=0.01)

        with pytest.raises(PersistenceError):
            await emitter.mark_all_read("tenant-1")
