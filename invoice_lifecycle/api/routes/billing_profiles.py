"""Billing Profile API Routes"""

from fastapi import APIRouter, Depends

from invoice_lifecycle.api.error import ClientError
from invoice_lifecycle.api.schemas.invoice_request import BillingProfileRequestSchema
from invoice_lifecycle.app.use_cases.invoicing import SaveBillingProfile
from invoice_lifecycle.depends import InvoicingComponents, get_components
from invoice_lifecycle.domain.billing_profile import BillingProfile

router = APIRouter(prefix="/billing-profiles", tags=["Billing Profiles"])


@router.put("/{customer_id}", response_model=BillingProfile)
async def save_billing_profile(
    customer_id: str,
    body: BillingProfileRequestSchema,
    components: InvoicingComponents = Depends(get_components),
):
    """
    Register or update the monthly fee of a customer.

    Active profiles are billed by the monthly generation run.
    """
    use_case = SaveBillingProfile(components.uow, components.profile_store)
    result = await use_case.execute(body.to_profile(customer_id))

    if result.is_err():
        raise ClientError.from_error(result.error)
    return result.value
