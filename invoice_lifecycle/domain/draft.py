"""Invoice drafts and patches

Unvalidated input to InvoiceRepository.create / update. Every field is
optional here so that missing values are reported as domain
ValidationErrors naming the offending field.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from invoice_lifecycle.domain.invoice import BankInfo


class InvoiceItemDraft(BaseModel):
    """Line item input; amount and tax_amount are always computed"""

    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    quantity: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None
    tax_rate: Decimal = Decimal("10")


class InvoiceDraft(BaseModel):
    """Input for creating an invoice"""

    customer_id: Optional[str] = None
    customer_name: str = ""
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    items: List[InvoiceItemDraft] = Field(default_factory=list)
    notes: Optional[str] = None
    tenant_id: Optional[str] = None
    bank_info: Optional[BankInfo] = None


class InvoicePatch(BaseModel):
    """Partial update; only explicitly set fields are merged"""

    customer_name: Optional[str] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    items: Optional[List[InvoiceItemDraft]] = None
    notes: Optional[str] = None
    bank_info: Optional[BankInfo] = None
