"""SaveBillingProfile Use Case

Registers or updates a billable customer for monthly generation.
"""

from invoice_lifecycle.app.repositories.billing_profile_store import BillingProfileStore
from invoice_lifecycle.app.services.unit_of_work import UnitOfWork
from invoice_lifecycle.domain.billing_profile import BillingProfile
from invoice_lifecycle.domain.errors import InvoiceLifecycleError
from invoice_lifecycle.libs.result import Result, Return, Error
from .common import to_error


class SaveBillingProfile:
    """Use Case: Upsert a customer's billing profile"""

    def __init__(self, uow: UnitOfWork, profile_store: BillingProfileStore):
        self.uow = uow
        self.profile_store = profile_store

    async def execute(self, profile: BillingProfile) -> Result[BillingProfile]:
        try:
            saved = await self.profile_store.save(profile)
            await self.uow.commit()
            return Return.ok(saved)

        except InvoiceLifecycleError as e:
            await self.uow.rollback()
            return Return.err(to_error(e))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="SAVE_BILLING_PROFILE_FAILED",
                    message="Failed to save billing profile",
                    reason=str(e),
                )
            )
