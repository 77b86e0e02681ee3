"""SQLAlchemy Invoice Store Implementation

Implements invoice persistence using SQLAlchemy async session.
"""

from typing import List, Optional
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select, col
from sqlmodel.ext.asyncio.session import AsyncSession
from invoice_lifecycle.adapter.repositories.records import InvoiceRecord
from invoice_lifecycle.app.repositories.invoice_store import InvoiceStore
from invoice_lifecycle.domain.errors import ConcurrentUpdateError, PersistenceError
from invoice_lifecycle.domain.invoice import Invoice


class SqlAlchemyInvoiceStore(InvoiceStore):
    """
    SQLAlchemy implementation of InvoiceStore

    Writes are flushed, not committed; the caller's UnitOfWork commits.
    Updates are conditional on the previous version, so a writer holding a
    stale copy (another session or process) fails instead of overwriting.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def load(self, invoice_id: str) -> Optional[Invoice]:
        statement = (
            select(InvoiceRecord)
            .where(InvoiceRecord.id == invoice_id)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.session.execute(statement)
            record = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load invoice", reason=str(e)) from e
        return record.to_invoice() if record else None

    async def save(self, invoice: Invoice) -> Invoice:
        if invoice.version <= 1:
            return await self._insert(invoice)

        expected_version = invoice.version - 1
        statement = (
            update(InvoiceRecord)
            .where(col(InvoiceRecord.id) == invoice.id)
            .where(col(InvoiceRecord.version) == expected_version)
            .values(**InvoiceRecord.column_values(invoice))
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to save invoice {invoice.invoice_number}", reason=str(e)
            ) from e
        if result.rowcount == 0:
            raise ConcurrentUpdateError(invoice.id, expected_version)
        return invoice

    async def list_by_prefix(self, prefix: str) -> List[Invoice]:
        statement = (
            select(InvoiceRecord)
            .where(col(InvoiceRecord.invoice_number).startswith(prefix, autoescape=True))
            .order_by(InvoiceRecord.invoice_number)
        )
        return await self._fetch(statement)

    async def list_all(self) -> List[Invoice]:
        statement = select(InvoiceRecord).order_by(InvoiceRecord.issue_date, InvoiceRecord.invoice_number)
        return await self._fetch(statement)

    async def _insert(self, invoice: Invoice) -> Invoice:
        try:
            self.session.add(InvoiceRecord.from_invoice(invoice))
            await self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to save invoice {invoice.invoice_number}", reason=str(e)
            ) from e
        return invoice

    async def _fetch(self, statement) -> List[Invoice]:
        try:
            result = await self.session.execute(
                statement.execution_options(populate_existing=True)
            )
            records = result.scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to query invoices", reason=str(e)) from e
        return [record.to_invoice() for record in records]
