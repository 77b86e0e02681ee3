"""Notification API Routes"""

from fastapi import APIRouter, Depends, Query

from invoice_lifecycle.api.error import ClientError
from invoice_lifecycle.api.schemas.invoice_request import MarkAllReadRequestSchema
from invoice_lifecycle.app.use_cases.invoicing import (
    ListNotifications,
    MarkAllNotificationsRead,
    MarkAllReadResponseDTO,
    MarkNotificationRead,
    NotificationListResponseDTO,
)
from invoice_lifecycle.depends import InvoicingComponents, get_components
from invoice_lifecycle.domain.notification import InvoiceNotification

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponseDTO)
async def list_notifications(
    user_id: str = Query(..., min_length=1),
    unread_only: bool = False,
    components: InvoicingComponents = Depends(get_components),
):
    """A user's notifications, newest first"""
    result = await ListNotifications(components.emitter).execute(user_id, unread_only=unread_only)

    if result.is_err():
        raise ClientError.from_error(result.error)
    return result.value


@router.post("/read-all", response_model=MarkAllReadResponseDTO)
async def mark_all_notifications_read(
    body: MarkAllReadRequestSchema,
    components: InvoicingComponents = Depends(get_components),
):
    result = await MarkAllNotificationsRead(components.uow, components.emitter).execute(body.user_id)

    if result.is_err():
        raise ClientError.from_error(result.error)
    return result.value


@router.post("/{notification_id}/read", response_model=InvoiceNotification)
async def mark_notification_read(
    notification_id: str,
    components: InvoicingComponents = Depends(get_components),
):
    result = await MarkNotificationRead(components.uow, components.emitter).execute(notification_id)

    if result.is_err():
        raise ClientError.from_error(result.error)
    return result.value
