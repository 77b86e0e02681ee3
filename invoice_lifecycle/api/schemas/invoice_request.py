"""Request schemas for Invoice Lifecycle API

Pydantic models for incoming HTTP requests. Business validation (required
fields, item amounts, periods) stays in the repository so that API and
batch callers get the same VALIDATION_ERROR messages.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from invoice_lifecycle.domain.billing_profile import BillingProfile
from invoice_lifecycle.domain.draft import InvoiceDraft, InvoiceItemDraft, InvoicePatch
from invoice_lifecycle.domain.invoice import BankInfo, InvoiceStatus


class InvoiceItemSchema(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    quantity: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None
    tax_rate: Decimal = Field(default=Decimal("10"), description="Tax rate in percent")

    def to_draft(self) -> InvoiceItemDraft:
        return InvoiceItemDraft(**self.model_dump())


class CreateInvoiceRequestSchema(BaseModel):
    """
    Request schema for creating an invoice

    Used for POST /invoices endpoint.
    """

    customer_id: Optional[str] = Field(default=None, description="Customer identifier")
    customer_name: str = ""
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    items: List[InvoiceItemSchema] = Field(default_factory=list)
    notes: Optional[str] = None
    bank_info: Optional[BankInfo] = None

    def to_draft(self) -> InvoiceDraft:
        return InvoiceDraft(
            customer_id=self.customer_id,
            customer_name=self.customer_name,
            issue_date=self.issue_date,
            due_date=self.due_date,
            period_start=self.period_start,
            period_end=self.period_end,
            items=[item.to_draft() for item in self.items],
            notes=self.notes,
            bank_info=self.bank_info,
        )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "customer_id": "tenant-1",
                "customer_name": "Sample Corp",
                "issue_date": "2024-02-10",
                "due_date": "2024-02-29",
                "period_start": "2024-01-01",
                "period_end": "2024-01-31",
                "items": [
                    {"name": "Monthly base fee", "quantity": "1", "unit_price": "30000", "tax_rate": "10"}
                ],
            }
        }
    )


class UpdateInvoiceRequestSchema(BaseModel):
    """
    Request schema for editing an invoice

    Used for PATCH /invoices/{invoice_id}. Omitted fields are left unchanged.
    """

    customer_name: Optional[str] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    items: Optional[List[InvoiceItemSchema]] = None
    notes: Optional[str] = None
    bank_info: Optional[BankInfo] = None

    def to_patch(self) -> InvoicePatch:
        changes = {field: getattr(self, field) for field in self.model_fields_set}
        if changes.get("items") is not None:
            changes["items"] = [item.to_draft() for item in changes["items"]]
        return InvoicePatch(**changes)


class UpdateStatusRequestSchema(BaseModel):
    """Used for POST /invoices/{invoice_id}/status"""

    status: InvoiceStatus


class MarkAllReadRequestSchema(BaseModel):
    """Used for POST /notifications/read-all"""

    user_id: str = Field(..., min_length=1)


class BillingProfileRequestSchema(BaseModel):
    """Used for PUT /billing-profiles/{customer_id}"""

    customer_name: Optional[str] = None
    monthly_fee: Optional[Decimal] = Field(default=None, ge=0)
    tax_rate: Decimal = Field(default=Decimal("10"), ge=0)
    item_name: str = "Monthly base fee"
    active: bool = True

    def to_profile(self, customer_id: str) -> BillingProfile:
        return BillingProfile(customer_id=customer_id, **self.model_dump())


class RunBatchRequestSchema(BaseModel):
    """Used for POST /batch/run; run_date defaults to today"""

    run_date: Optional[date] = None
