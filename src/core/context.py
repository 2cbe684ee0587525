"""Cancellation context shared by every backend call of one invocation."""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

from core.domain.errors import OperationCancelledError

T = TypeVar("T")


class CancelContext:
    """Cooperative cancellation for a single command run.

    Once cancelled, the call in flight is aborted and every later call fails
    immediately with `OperationCancelledError`. Results already produced are
    never touched.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason = "operation cancelled"

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "operation cancelled") -> None:
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelledError(self._reason)

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await `awaitable` unless the context gets cancelled first."""

        if self.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            self.raise_if_cancelled()
        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task in done:
            return task.result()

        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        raise OperationCancelledError(self._reason)
