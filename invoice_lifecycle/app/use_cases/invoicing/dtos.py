"""Data Transfer Objects for Invoicing Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field
from invoice_lifecycle.domain.invoice import Invoice, InvoiceStatus
from invoice_lifecycle.domain.notification import InvoiceNotification


class UpdateInvoiceStatusCommandDTO(BaseModel):
    """Command DTO for moving an invoice to a new status"""

    invoice_id: str = Field(..., description="Invoice ID")
    status: InvoiceStatus = Field(..., description="Target status")


class RunBatchCommandDTO(BaseModel):
    """Command DTO for a batch run"""

    run_date: Optional[date] = Field(
        default=None,
        description="Reference date (defaults to the clock's today)"
    )


class InvoiceListResponseDTO(BaseModel):
    """Response DTO for invoice queries"""

    invoices: List[Invoice] = Field(default_factory=list)
    total: int = Field(..., description="Number of matching invoices")


class NotificationListResponseDTO(BaseModel):
    """Response DTO for a user's notifications"""

    user_id: str
    notifications: List[InvoiceNotification] = Field(default_factory=list)
    unread_count: int = 0


class MarkAllReadResponseDTO(BaseModel):
    """Response DTO for mark-all-read"""

    user_id: str
    updated: int = Field(..., description="Notifications changed from unread to read")
