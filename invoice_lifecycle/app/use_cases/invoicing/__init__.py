"""Invoicing use cases"""
from .create_invoice import CreateInvoice
from .update_invoice import UpdateInvoice
from .update_invoice_status import UpdateInvoiceStatus, CancelInvoice, MarkInvoiceAsPaid
from .query_invoices import QueryInvoices, FetchInvoiceById
from .run_invoice_batch import RunInvoiceBatch
from .notifications import ListNotifications, MarkNotificationRead, MarkAllNotificationsRead
from .save_billing_profile import SaveBillingProfile
from .dtos import (
    UpdateInvoiceStatusCommandDTO,
    RunBatchCommandDTO,
    InvoiceListResponseDTO,
    NotificationListResponseDTO,
    MarkAllReadResponseDTO,
)

__all__ = [
    "CreateInvoice",
    "UpdateInvoice",
    "UpdateInvoiceStatus",
    "CancelInvoice",
    "MarkInvoiceAsPaid",
    "QueryInvoices",
    "FetchInvoiceById",
    "RunInvoiceBatch",
    "ListNotifications",
    "MarkNotificationRead",
    "MarkAllNotificationsRead",
    "SaveBillingProfile",
    "UpdateInvoiceStatusCommandDTO",
    "RunBatchCommandDTO",
    "InvoiceListResponseDTO",
    "NotificationListResponseDTO",
    "MarkAllReadResponseDTO",
]
