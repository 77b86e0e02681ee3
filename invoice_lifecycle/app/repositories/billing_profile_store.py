"""Billing Profile Store Interface

Defines the contract for billable customer lookups used by monthly
invoice generation.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from invoice_lifecycle.domain.billing_profile import BillingProfile


class BillingProfileStore(ABC):
    """Persistence interface for BillingProfile records"""

    @abstractmethod
    async def get(self, customer_id: str) -> Optional[BillingProfile]:
        """
        Retrieve the profile of a customer

        Returns:
            BillingProfile if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, profile: BillingProfile) -> BillingProfile:
        """
        Insert or replace the profile of profile.customer_id

        Returns:
            The persisted profile
        """
        pass

    @abstractmethod
    async def list_active(self) -> List[BillingProfile]:
        """
        Retrieve all active profiles, ordered by customer_id

        Returns:
            List of billable customer profiles
        """
        pass
