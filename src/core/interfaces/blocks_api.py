"""Contract of the identity service's user-blocks capability.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- The Management API client and the test fakes are interchangeable.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import UserBlock


@runtime_checkable
class UserBlocksAPI(Protocol):
    """Minimum surface the resolver needs.

    Design rules:
    - Every method is async because it performs I/O (HTTP).
    - The `*_by_identifier` variants accept a username, email or phone number.
    - Failures raise `core.domain.errors.BackendError` (or a cancellation).
    """

    async def blocks(self, user_id: str) -> list[UserBlock]:
        ...

    async def blocks_by_identifier(self, identifier: str) -> list[UserBlock]:
        ...

    async def unblock(self, user_id: str) -> None:
        ...

    async def unblock_by_identifier(self, identifier: str) -> None:
        ...
