from dataclasses import dataclass
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from invoice_lifecycle.adapter.repositories import records  # noqa: F401 (registers tables)
from invoice_lifecycle.adapter.repositories.billing_profile_store import SqlAlchemyBillingProfileStore
from invoice_lifecycle.adapter.repositories.invoice_store import SqlAlchemyInvoiceStore
from invoice_lifecycle.adapter.repositories.notification_store import SqlAlchemyNotificationStore
from invoice_lifecycle.adapter.services.clock import SystemClock
from invoice_lifecycle.adapter.services.notification_service import create_notification_sink
from invoice_lifecycle.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from invoice_lifecycle.app.repositories.billing_profile_store import BillingProfileStore
from invoice_lifecycle.app.repositories.invoice_repository import InvoiceRepository
from invoice_lifecycle.app.services.batch_processor import BatchCalendar, BatchProcessor
from invoice_lifecycle.app.services.clock import Clock
from invoice_lifecycle.app.services.keyed_lock import KeyedLock
from invoice_lifecycle.app.services.notification_emitter import NotificationEmitter
from invoice_lifecycle.app.services.unit_of_work import UnitOfWork
from invoice_lifecycle.domain.invoice import BankInfo
from invoice_lifecycle.domain.status_transition import get_transition_policy

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def init_models(db_engine: AsyncEngine = engine) -> None:
    async with db_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


@dataclass
class InvoicingComponents:
    """Collaborators of one session, wired from configuration"""

    uow: UnitOfWork
    invoice_repo: InvoiceRepository
    emitter: NotificationEmitter
    profile_store: BillingProfileStore
    processor: BatchProcessor


def build_components(
    session: AsyncSession,
    clock: Clock,
    locks: KeyedLock,
    config=ApplicationConfig,
) -> InvoicingComponents:
    uow = SqlAlchemyUnitOfWork(session)
    emitter = NotificationEmitter(
        store=SqlAlchemyNotificationStore(session),
        clock=clock,
        sink=create_notification_sink(config.NOTIFICATION_WEBHOOK),
        timeout_seconds=config.REPOSITORY_TIMEOUT_SECONDS,
    )
    invoice_repo = InvoiceRepository(
        store=SqlAlchemyInvoiceStore(session),
        emitter=emitter,
        clock=clock,
        policy=get_transition_policy(config.TRANSITION_POLICY),
        locks=locks,
        issuer_tenant_id=config.ISSUER_TENANT_ID,
        issuer_bank_info=BankInfo(**config.ISSUER_BANK_INFO) if config.ISSUER_BANK_INFO else None,
        timeout_seconds=config.REPOSITORY_TIMEOUT_SECONDS,
    )
    profile_store = SqlAlchemyBillingProfileStore(session)
    processor = BatchProcessor(
        repository=invoice_repo,
        profile_store=profile_store,
        emitter=emitter,
        uow=uow,
        calendar=BatchCalendar(
            generation_day=config.INVOICE_GENERATION_DAY,
            unpaid_reminder_day=config.UNPAID_REMINDER_DAY,
            issued_reminder_day=config.ISSUED_REMINDER_DAY,
        ),
        locks=locks,
    )
    return InvoicingComponents(
        uow=uow,
        invoice_repo=invoice_repo,
        emitter=emitter,
        profile_store=profile_store,
        processor=processor,
    )


def get_clock(request: Request) -> Clock:
    return getattr(request.app.state, "clock", None) or SystemClock()


def get_locks(request: Request) -> KeyedLock:
    return request.app.state.locks


async def get_components(
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
    locks: KeyedLock = Depends(get_locks),
) -> InvoicingComponents:
    return build_components(session, clock, locks, config=ApplicationConfig)
