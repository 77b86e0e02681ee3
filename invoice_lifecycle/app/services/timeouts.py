"""Bounded store calls"""

import asyncio
from typing import Awaitable, TypeVar
from invoice_lifecycle.domain.errors import PersistenceError

T = TypeVar("T")


async def call_with_timeout(awaitable: Awaitable[T], timeout_seconds: float, store_name: str) -> T:
    """Await a store call, raising PersistenceError when it exceeds timeout_seconds"""
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
    except asyncio.TimeoutError:
        raise PersistenceError(
            f"{store_name} did not respond in time",
            reason=f"timeout={timeout_seconds}s",
        ) from None
