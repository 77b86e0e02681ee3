"""SQLModel records

Table definitions backing the SQLAlchemy stores. Invoices keep their full
document (items, bank snapshot, totals) in a JSON payload; the columns
next to it exist for uniqueness and lookups.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import JSON, Boolean, Date, DateTime, Integer, Numeric, String, Text
from invoice_lifecycle.domain.base import BaseModel
from invoice_lifecycle.domain.billing_profile import BillingProfile
from invoice_lifecycle.domain.invoice import Invoice
from invoice_lifecycle.domain.notification import InvoiceNotification, NotificationEventType


class InvoiceRecord(BaseModel, table=True):
    """
    Invoice row

    Domain Rules:
    - invoice_number is unique (guards concurrent generation across processes)
    - payload holds the complete Invoice document
    - version mirrors Invoice.version; updates match on the previous value
    """

    __tablename__ = "invoices"
    __table_args__ = (
        Index('ix_invoices_invoice_number', 'invoice_number', unique=True),
        Index('ix_invoices_customer_period', 'customer_id', 'period_start', 'period_end'),
        Index('ix_invoices_status', 'status'),
    )

    id: str = Field(
        sa_column=Column(String(32), primary_key=True),
        description="Invoice ID"
    )

    invoice_number: str = Field(
        sa_column=Column(String(120), nullable=False),
        description="Unique invoice number (YYYYMM-customerId-SEQ)"
    )

    customer_id: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Customer ID (payer)"
    )

    status: str = Field(
        sa_column=Column(String(20), nullable=False),
        description="Invoice status"
    )

    issue_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Issue date"
    )

    period_start: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Billing period start date"
    )

    period_end: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Billing period end date"
    )

    payload: dict = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
        description="Complete invoice document"
    )

    version: int = Field(
        default=1,
        sa_column=Column(Integer, nullable=False, default=1),
        description="Optimistic concurrency version"
    )

    @staticmethod
    def column_values(invoice: Invoice) -> dict:
        return dict(
            invoice_number=invoice.invoice_number,
            customer_id=invoice.customer_id,
            status=invoice.status.value,
            issue_date=invoice.issue_date,
            period_start=invoice.period_start,
            period_end=invoice.period_end,
            payload=invoice.model_dump(mode="json"),
            version=invoice.version,
        )

    @classmethod
    def from_invoice(cls, invoice: Invoice) -> "InvoiceRecord":
        return cls(id=invoice.id, **cls.column_values(invoice))

    def to_invoice(self) -> Invoice:
        return Invoice.model_validate(self.payload)


class NotificationRecord(BaseModel, table=True):
    """
    Invoice notification row

    Domain Rules:
    - Append-only; is_read is the only updated column
    - event_key is unique when present
    """

    __tablename__ = "invoice_notifications"
    __table_args__ = (
        Index('ix_invoice_notifications_user_id', 'user_id'),
        Index('ix_invoice_notifications_event_key', 'event_key', unique=True),
    )

    id: str = Field(
        sa_column=Column(String(32), primary_key=True),
        description="Notification ID"
    )

    user_id: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Addressee (customer ID)"
    )

    invoice_id: str = Field(
        sa_column=Column(String(32), nullable=False),
        description="Invoice the notification is about"
    )

    event_type: str = Field(
        sa_column=Column(String(30), nullable=False),
        description="Lifecycle event that produced the notification"
    )

    event_key: Optional[str] = Field(
        default=None,
        sa_column=Column(String(200), nullable=True),
        description="Deduplication key for batch events"
    )

    title: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Notification title"
    )

    message: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Notification body"
    )

    is_read: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False),
        description="Read flag"
    )

    created_at: datetime = Field(
        sa_column=Column(DateTime, nullable=False),
        description="Creation timestamp"
    )

    @classmethod
    def from_notification(cls, notification: InvoiceNotification) -> "NotificationRecord":
        return cls(
            id=notification.id,
            user_id=notification.user_id,
            invoice_id=notification.invoice_id,
            event_type=notification.event_type.value,
            event_key=notification.event_key,
            title=notification.title,
            message=notification.message,
            is_read=notification.is_read,
            created_at=notification.created_at,
        )

    def to_notification(self) -> InvoiceNotification:
        return InvoiceNotification(
            id=self.id,
            user_id=self.user_id,
            invoice_id=self.invoice_id,
            event_type=NotificationEventType(self.event_type),
            event_key=self.event_key,
            title=self.title,
            message=self.message,
            is_read=self.is_read,
            created_at=self.created_at,
        )


class BillingProfileRecord(BaseModel, table=True):
    """Billing profile row (one per customer)"""

    __tablename__ = "billing_profiles"

    customer_id: str = Field(
        sa_column=Column(String(100), primary_key=True),
        description="Customer ID"
    )

    customer_name: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Customer display name"
    )

    monthly_fee: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(18, 2), nullable=True),
        description="Monthly base fee"
    )

    tax_rate: Decimal = Field(
        default=Decimal("10"),
        sa_column=Column(Numeric(5, 2), nullable=False),
        description="Tax rate (percentage)"
    )

    item_name: str = Field(
        default="Monthly base fee",
        sa_column=Column(String(255), nullable=False),
        description="Line item name on generated invoices"
    )

    active: bool = Field(
        default=True,
        sa_column=Column(Boolean, nullable=False, default=True),
        description="Whether the customer is billed"
    )

    @classmethod
    def from_profile(cls, profile: BillingProfile) -> "BillingProfileRecord":
        return cls(**profile.model_dump())

    def to_profile(self) -> BillingProfile:
        return BillingProfile(
            customer_id=self.customer_id,
            customer_name=self.customer_name,
            monthly_fee=self.monthly_fee,
            tax_rate=self.tax_rate,
            item_name=self.item_name,
            active=self.active,
        )
