"""Billing Profile Domain Entity

Billable customer and the recurring monthly fee used by monthly invoice
generation.
"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict


class BillingProfile(BaseModel):
    """
    Billing Profile - Recurring billing settings of one customer

    Domain Rules:
    - One profile per customer_id
    - Only active profiles are billed
    - Profiles are owned by an external collaborator and may be incomplete;
      monthly generation validates them per customer
    """

    customer_id: str
    customer_name: Optional[str] = None
    monthly_fee: Optional[Decimal] = None
    tax_rate: Decimal = Decimal("10")
    item_name: str = "Monthly base fee"
    active: bool = True

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "customer_id": "tenant-1",
                "customer_name": "Sample Corp",
                "monthly_fee": "30000",
                "tax_rate": "10",
                "item_name": "Monthly base fee",
                "active": True,
            }
        }
    )
