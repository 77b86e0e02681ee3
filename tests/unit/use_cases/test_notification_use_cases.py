"""Unit tests for notification and billing profile use cases"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from invoice_lifecycle.app.services.notification_emitter import InvoiceEvent
from invoice_lifecycle.app.use_cases.invoicing import (
    ListNotifications,
    MarkAllNotificationsRead,
    MarkNotificationRead,
    SaveBillingProfile,
)
from invoice_lifecycle.domain.billing_profile import BillingProfile
from invoice_lifecycle.domain.notification import NotificationEventType
from tests.factories import make_invoice


@pytest.mark.asyncio
class TestListNotifications:
    async def test_counts_unread(self, emitter):
        """
        Given: Two notifications, one read
        When: ListNotifications is executed
        Then: Both are returned and unread_count is 1
        """
        # Arrange
        first = await emitter.emit(InvoiceEvent(NotificationEventType.ISSUED, make_invoice()))
        await emitter.emit(InvoiceEvent(NotificationEventType.PAID, make_invoice()))
        await emitter.mark_read(first.id)

        # Act
        result = await ListNotifications(emitter).execute("tenant-1")

        # Assert
        assert result.is_ok()
        assert len(result.value.notifications) == 2
        assert result.value.unread_count == 1

    async def test_unread_only(self, emitter):
        first = await emitter.emit(InvoiceEvent(NotificationEventType.ISSUED, make_invoice()))
        await emitter.mark_read(first.id)

        result = await ListNotifications(emitter).execute("tenant-1", unread_only=True)

        assert result.value.notifications == []


@pytest.mark.asyncio
class TestMarkNotificationRead:
    async def test_marks_and_commits(self, emitter, uow):
        notification = await emitter.emit(InvoiceEvent(NotificationEventType.ISSUED, make_invoice()))

        result = await MarkNotificationRead(uow, emitter).execute(notification.id)

        assert result.value.is_read is True
        assert uow.commits == 1

    async def test_unknown_notification(self, emitter, uow):
        result = await MarkNotificationRead(uow, emitter).execute("missing")

        assert result.error.code == "NOTIFICATION_NOT_FOUND"
        assert uow.rollbacks == 1


@pytest.mark.asyncio
class TestMarkAllNotificationsRead:
    async def test_returns_updated_count(self, emitter, uow):
        await emitter.emit(InvoiceEvent(NotificationEventType.ISSUED, make_invoice()))
        await emitter.emit(InvoiceEvent(NotificationEventType.PAID, make_invoice()))

        first = await MarkAllNotificationsRead(uow, emitter).execute("tenant-1")
        second = await MarkAllNotificationsRead(uow, emitter).execute("tenant-1")

        assert first.value.updated == 2
        assert second.value.updated == 0


@pytest.mark.asyncio
class TestSaveBillingProfile:
    async def test_saves_and_commits(self, mock_uow):
        # Arrange
        profile_store = MagicMock()
        profile = BillingProfile(customer_id="tenant-1", customer_name="Sample Corp", monthly_fee=Decimal("30000"))
        profile_store.save = AsyncMock(return_value=profile)

        # Act
        result = await SaveBillingProfile(mock_uow, profile_store).execute(profile)

        # Assert
        assert result.value == profile
        profile_store.save.assert_called_once_with(profile)
        mock_uow.commit.assert_called_once()

    async def test_unexpected_error_rolls_back(self, mock_uow):
        profile_store = MagicMock()
        profile_store.save = AsyncMock(side_effect=RuntimeError("disk full"))

        result = await SaveBillingProfile(mock_uow, profile_store).execute(
            BillingProfile(customer_id="tenant-1")
        )

        assert result.error.code == "SAVE_BILLING_PROFILE_FAILED"
        assert result.error.reason == "disk full"
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
class TestUnexpectedNotificationErrors:
    """Errors outside the domain taxonomy come back as *_FAILED results"""

    @pytest.fixture
    def broken_emitter(self):
        emitter = MagicMock()
        emitter.list_for_user = AsyncMock(side_effect=RuntimeError("boom"))
        emitter.mark_read = AsyncMock(side_effect=RuntimeError("boom"))
        emitter.mark_all_read = AsyncMock(side_effect=RuntimeError("boom"))
        return emitter

    async def test_list(self, broken_emitter):
        result = await ListNotifications(broken_emitter).execute("tenant-1")

        assert result.error.code == "LIST_NOTIFICATIONS_FAILED"

    async def test_mark_read(self, broken_emitter, mock_uow):
        result = await MarkNotificationRead(mock_uow, broken_emitter).execute("n1")

        assert result.error.code == "MARK_NOTIFICATION_READ_FAILED"
        mock_uow.rollback.assert_called_once()

    async def test_mark_all_read(self, broken_emitter, mock_uow):
        result = await MarkAllNotificationsRead(mock_uow, broken_emitter).execute("tenant-1")

        assert result.error.code == "MARK_ALL_NOTIFICATIONS_READ_FAILED"
        mock_uow.rollback.assert_called_once()
