"""Error taxonomy for block administration.

Every expected failure derives from `BlockAdminError`, so the CLI has a single
boundary to catch. Backend failures carry an `ErrorKind` instead of a raw
status code; the resolver switches on the kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from core.domain.models import Action


class ErrorKind(str, Enum):
    SHAPE_REJECTION = "shape_rejection"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    OTHER = "other"

    @classmethod
    def from_status(cls, status: int | None) -> "ErrorKind":
        """Classify an HTTP status returned by the identity service."""

        if status == 400:
            return cls.SHAPE_REJECTION
        if status in (401, 403):
            return cls.UNAUTHORIZED
        if status == 404:
            return cls.NOT_FOUND
        if status == 429:
            return cls.RATE_LIMITED
        return cls.OTHER


class BlockAdminError(Exception):
    """Base class for expected failures."""


class ConfigurationError(BlockAdminError):
    pass


class OperationCancelledError(BlockAdminError):
    pass


class BackendError(BlockAdminError):
    """Failure reported by (or while reaching) the identity service."""

    def __init__(self, message: str, *, status: int | None = None, kind: ErrorKind | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.kind = kind if kind is not None else ErrorKind.from_status(status)

    @property
    def is_shape_rejection(self) -> bool:
        return self.kind is ErrorKind.SHAPE_REJECTION


class IdentifierOperationError(BlockAdminError):
    """A failure wrapped with the identifier and the attempted action."""

    def __init__(self, identifier: str, action: Action, cause: BaseException) -> None:
        super().__init__(f"{action.describe(identifier)}: {cause}")
        self.identifier = identifier
        self.action = action
        self.cause = cause


@dataclass(frozen=True)
class BlockFailure:
    """Failed outcome of one identifier in a batch."""

    identifier: str
    error: IdentifierOperationError

    def __str__(self) -> str:
        return str(self.error)


class BatchOperationError(BlockAdminError):
    """Combined failure of a batch; every individual failure stays inspectable."""

    def __init__(self, failures: list[BlockFailure]) -> None:
        self.failures = list(failures)
        super().__init__("\n".join(str(failure) for failure in self.failures))

    @property
    def identifiers(self) -> list[str]:
        return [failure.identifier for failure in self.failures]
