"""Domain models (Pydantic v2).

Note:
- These models describe *what* a block is, not *how* it is fetched.
- A block record is passed through untouched: unknown keys are kept so the
  JSON output mirrors what the identity service returned.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class UserBlock(BaseModel):
    """One brute-force-protection block entry for a user."""

    model_config = ConfigDict(extra="allow")

    identifier: str | None = Field(
        default=None,
        description="Identifier the block applies to (username, email or phone).",
    )
    ip: str | None = Field(
        default=None,
        description="Source IP address that triggered the block.",
    )
    connection: str | None = Field(
        default=None,
        description="Connection name the block was raised on.",
    )


class UserBlocksPage(BaseModel):
    """Body of a `user-blocks` lookup response."""

    model_config = ConfigDict(extra="ignore")

    blocked_for: list[UserBlock] = Field(default_factory=list)


class Action(str, Enum):
    """Operation attempted for an identifier, used to describe failures."""

    LIST = "list"
    UNBLOCK = "unblock"

    def describe(self, identifier: str) -> str:
        if self is Action.LIST:
            return f"failed to list user blocks for user with ID {identifier}"
        return f"failed to unblock user with identifier {identifier}"
