"""SQLAlchemy Billing Profile Store Implementation"""

from typing import List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select, col
from sqlmodel.ext.asyncio.session import AsyncSession
from invoice_lifecycle.adapter.repositories.records import BillingProfileRecord
from invoice_lifecycle.app.repositories.billing_profile_store import BillingProfileStore
from invoice_lifecycle.domain.billing_profile import BillingProfile
from invoice_lifecycle.domain.errors import PersistenceError


class SqlAlchemyBillingProfileStore(BillingProfileStore):
    """SQLAlchemy implementation of BillingProfileStore"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, customer_id: str) -> Optional[BillingProfile]:
        try:
            record = await self.session.get(BillingProfileRecord, customer_id)
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load billing profile", reason=str(e)) from e
        return record.to_profile() if record else None

    async def save(self, profile: BillingProfile) -> BillingProfile:
        try:
            await self.session.merge(BillingProfileRecord.from_profile(profile))
            await self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to save billing profile {profile.customer_id}", reason=str(e)
            ) from e
        return profile

    async def list_active(self) -> List[BillingProfile]:
        statement = (
            select(BillingProfileRecord)
            .where(col(BillingProfileRecord.active) == True)  # noqa: E712
            .order_by(BillingProfileRecord.customer_id)
        )
        try:
            result = await self.session.execute(statement)
            records = result.scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to list billing profiles", reason=str(e)) from e
        return [record.to_profile() for record in records]
