"""Invoice Domain Entity

Billing invoice issued by a tenant to a customer, its line items and the
bank account snapshot printed on it.
"""

from datetime import date, datetime
from decimal import Decimal, ROUND_FLOOR
from enum import Enum
from typing import List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field
from invoice_lifecycle.domain.base import generate_uuid


class InvoiceStatus(str, Enum):
    """Invoice status types"""
    UNPAID = "unpaid"        # Created, not yet sent to the customer
    ISSUED = "issued"        # Sent to the customer, awaiting payment
    PAID = "paid"            # Payment received (terminal)
    OVERDUE = "overdue"      # Issued and past its due date
    CANCELED = "canceled"    # Withdrawn (terminal, retained)


class AccountType(str, Enum):
    """Bank account types"""
    ORDINARY = "ordinary"
    CHECKING = "checking"


class BankInfo(BaseModel):
    """Payee bank account, copied onto the invoice when it is created"""

    model_config = ConfigDict(frozen=True)

    bank_name: str
    branch_name: str
    account_type: AccountType = AccountType.ORDINARY
    account_number: str
    account_holder: str


def calculate_tax(amount: Decimal, tax_rate: Decimal) -> Decimal:
    """floor(amount * tax_rate / 100)"""
    return (amount * tax_rate / Decimal(100)).to_integral_value(rounding=ROUND_FLOOR)


class InvoiceItem(BaseModel):
    """
    Invoice Item - Single billed line

    Domain Rules:
    - amount = quantity * unit_price
    - tax_amount = floor(amount * tax_rate / 100)
    - Derived fields are recomputed by build() and recalculate()
    """

    id: str = Field(default_factory=generate_uuid)
    name: str
    description: Optional[str] = None
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal = Decimal("10")
    amount: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")

    @classmethod
    def build(
        cls,
        name: str,
        quantity,
        unit_price,
        tax_rate=Decimal("10"),
        description: Optional[str] = None,
        item_id: Optional[str] = None,
    ) -> "InvoiceItem":
        quantity = Decimal(str(quantity))
        unit_price = Decimal(str(unit_price))
        tax_rate = Decimal(str(tax_rate))
        amount = quantity * unit_price
        return cls(
            id=item_id or generate_uuid(),
            name=name,
            description=description,
            quantity=quantity,
            unit_price=unit_price,
            tax_rate=tax_rate,
            amount=amount,
            tax_amount=calculate_tax(amount, tax_rate),
        )

    def recalculate(self) -> "InvoiceItem":
        return InvoiceItem.build(
            name=self.name,
            quantity=self.quantity,
            unit_price=self.unit_price,
            tax_rate=self.tax_rate,
            description=self.description,
            item_id=self.id,
        )


def calculate_totals(items: List[InvoiceItem]) -> Tuple[Decimal, Decimal, Decimal]:
    """Return (subtotal, tax_total, total) for a list of items"""
    subtotal = sum((item.amount for item in items), Decimal("0"))
    tax_total = sum((item.tax_amount for item in items), Decimal("0"))
    return subtotal, tax_total, subtotal + tax_total


class Invoice(BaseModel):
    """
    Invoice - Billing document

    Domain Rules:
    - invoice_number is unique and follows YYYYMM-customerId-SEQ
    - total == subtotal + tax_total; both are sums over items
    - Status changes only through the transition validator
    - paid_at / canceled_at are set once, when PAID / CANCELED is reached
    - Invoices are never deleted; CANCELED is terminal but retained
    """

    id: str = Field(default_factory=generate_uuid)
    invoice_number: str
    tenant_id: str
    customer_id: str
    customer_name: str = ""
    issue_date: date
    due_date: date
    period_start: date
    period_end: date
    status: InvoiceStatus = InvoiceStatus.UNPAID
    items: List[InvoiceItem] = Field(default_factory=list)
    subtotal: Decimal = Decimal("0")
    tax_total: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    paid_at: Optional[datetime] = None
    canceled_at: Optional[datetime] = None
    bank_info: Optional[BankInfo] = None
    version: int = Field(default=1, ge=1, description="Incremented on every saved change")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "5f0c6c1e8a3b4c7d9e2f1a0b3c4d5e6f",
                "invoice_number": "202402-tenant-1-001",
                "tenant_id": "system-admin",
                "customer_id": "tenant-1",
                "customer_name": "Sample Corp",
                "issue_date": "2024-02-10",
                "due_date": "2024-02-29",
                "period_start": "2024-01-01",
                "period_end": "2024-01-31",
                "status": "unpaid",
                "subtotal": "30000",
                "tax_total": "3000",
                "total": "33000",
                "version": 1,
            }
        }
    )

    @property
    def billing_prefix(self) -> str:
        """YYYYMM-customerId part of the invoice number"""
        return self.invoice_number.rsplit("-", 1)[0]


class InvoiceFilterOptions(BaseModel):
    """Query filter; unset fields impose no constraint"""

    status: Optional[InvoiceStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None

    def matches(self, invoice: Invoice) -> bool:
        if self.status is not None and invoice.status != self.status:
            return False
        if self.start_date is not None and invoice.issue_date < self.start_date:
            return False
        if self.end_date is not None and invoice.issue_date > self.end_date:
            return False
        if self.customer_id is not None and invoice.customer_id != self.customer_id:
            return False
        if self.customer_name and self.customer_name.lower() not in invoice.customer_name.lower():
            return False
        return True
