"""Block administration services.

Two pieces live here:

- the identifier resolver, which tries the ID-based backend call first and
  falls back to the identifier-based one only when the backend rejects the
  input as not being an ID;
- the batch executor, which applies an operation to every identifier in order,
  keeps going past failures and reports all of them at the end.

The CLI delegates to these helpers and keeps printing/spinners out of them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable, TypeVar

from core.domain.errors import (
    BackendError,
    BatchOperationError,
    BlockAdminError,
    BlockFailure,
    IdentifierOperationError,
)
from core.domain.models import Action, UserBlock
from core.interfaces.blocks_api import UserBlocksAPI

logger = logging.getLogger(__name__)

T = TypeVar("T")

BackendCall = Callable[[str], Awaitable[T]]


@dataclass
class BatchResult:
    """Failures collected over a batch run, in input order."""

    failures: list[BlockFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def error(self) -> BatchOperationError | None:
        if self.ok:
            return None
        return BatchOperationError(self.failures)

    def raise_for_failures(self) -> None:
        err = self.error()
        if err is not None:
            raise err


async def resolve(
    identifier: str,
    primary: BackendCall[T],
    fallback: BackendCall[T],
    *,
    action: Action,
) -> T:
    """Run `primary`, falling back to `fallback` on a shape rejection.

    Any other failure of `primary` is terminal. The terminal error is raised as
    an `IdentifierOperationError` naming the identifier and the action.
    """

    try:
        return await primary(identifier)
    except BackendError as exc:
        if not exc.is_shape_rejection:
            raise IdentifierOperationError(identifier, action, exc) from exc
        logger.debug("%r is not a user ID (%s), retrying as identifier", identifier, exc)
    except BlockAdminError as exc:
        raise IdentifierOperationError(identifier, action, exc) from exc

    try:
        return await fallback(identifier)
    except BlockAdminError as exc:
        raise IdentifierOperationError(identifier, action, exc) from exc


async def run_batch(
    identifiers: Iterable[str],
    operation: Callable[[str], Awaitable[object]],
    *,
    action: Action,
) -> BatchResult:
    """Apply `operation` to each non-empty identifier, one at a time."""

    result = BatchResult()
    attempted = 0
    for identifier in identifiers:
        if identifier == "":
            continue
        attempted += 1
        try:
            await operation(identifier)
        except BlockAdminError as exc:
            if not isinstance(exc, IdentifierOperationError):
                exc = IdentifierOperationError(identifier, action, exc)
            logger.info("%s", exc)
            result.failures.append(BlockFailure(identifier=identifier, error=exc))

    logger.debug("%s: %d attempted, %d failed", action.value, attempted, len(result.failures))
    return result


async def list_user_blocks(api: UserBlocksAPI, identifier: str) -> list[UserBlock]:
    return await resolve(identifier, api.blocks, api.blocks_by_identifier, action=Action.LIST)


async def unblock_user(api: UserBlocksAPI, identifier: str) -> None:
    await resolve(identifier, api.unblock, api.unblock_by_identifier, action=Action.UNBLOCK)


async def unblock_users(api: UserBlocksAPI, identifiers: Iterable[str]) -> BatchResult:
    """Clear blocks for every identifier; see `run_batch`."""

    async def _unblock(identifier: str) -> None:
        await unblock_user(api, identifier)

    return await run_batch(identifiers, _unblock, action=Action.UNBLOCK)
