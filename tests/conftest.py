"""Shared test fixtures

In-memory wiring of the invoice lifecycle engine with a fixed clock.
"""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from invoice_lifecycle.adapter.repositories.in_memory import (
    InMemoryBillingProfileStore,
    InMemoryInvoiceStore,
    InMemoryNotificationStore,
)
from invoice_lifecycle.adapter.services.clock import FixedClock
from invoice_lifecycle.adapter.services.unit_of_work import InMemoryUnitOfWork
from invoice_lifecycle.app.repositories.invoice_repository import InvoiceRepository
from invoice_lifecycle.app.services.batch_processor import BatchProcessor
from invoice_lifecycle.app.services.keyed_lock import KeyedLock
from invoice_lifecycle.app.services.notification_emitter import NotificationEmitter
from tests.factories import make_draft


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 2, 1, 9, 0, 0))


@pytest.fixture
def uow():
    return InMemoryUnitOfWork()


@pytest.fixture
def invoice_store():
    return InMemoryInvoiceStore()


@pytest.fixture
def notification_store():
    return InMemoryNotificationStore()


@pytest.fixture
def profile_store():
    return InMemoryBillingProfileStore()


@pytest.fixture
def locks():
    return KeyedLock()


@pytest.fixture
def emitter(notification_store, clock):
    return NotificationEmitter(store=notification_store, clock=clock)


@pytest.fixture
def repository(invoice_store, emitter, clock, locks):
    return InvoiceRepository(store=invoice_store, emitter=emitter, clock=clock, locks=locks)


@pytest.fixture
def processor(repository, profile_store, emitter, uow, locks):
    return BatchProcessor(
        repository=repository,
        profile_store=profile_store,
        emitter=emitter,
        uow=uow,
        locks=locks,
    )


@pytest.fixture
def sample_draft():
    return make_draft()
