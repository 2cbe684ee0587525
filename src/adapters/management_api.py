"""Management API adapter: user blocks.

Implements `core.interfaces.blocks_api.UserBlocksAPI` on top of the v2
`user-blocks` endpoints:

- GET/DELETE `user-blocks/{id}` for internal user IDs;
- GET/DELETE `user-blocks?identifier=...` for usernames, emails and phones.

Errors are translated to `BackendError` with an `ErrorKind`, so nothing above
this module ever looks at a status code.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.context import CancelContext
from core.domain.errors import BackendError, ConfigurationError, ErrorKind
from core.domain.models import UserBlock, UserBlocksPage

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Format a Management API error body as '<status> <error>: <message>'."""

    body: Any = None
    try:
        body = response.json()
    except ValueError:
        body = None

    reason = response.reason_phrase or "Error"
    if isinstance(body, dict):
        error = body.get("error") or reason
        message = body.get("message")
        if message:
            return f"{response.status_code} {error}: {message}"
        return f"{response.status_code} {error}"

    text = response.text.strip()
    if text:
        return f"{response.status_code} {reason}: {text[:200]}"
    return f"{response.status_code} {reason}"


class ManagementAPIClient:
    """Async client for the user-blocks endpoints.

    Use as an async context manager so the underlying `httpx.AsyncClient` is
    closed at the end of the invocation.
    """

    def __init__(
        self,
        settings: AppSettings,
        *,
        context: CancelContext | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        base_url = settings.management_base_url()
        if not base_url:
            raise ConfigurationError("missing tenant domain: set BLOCKCTL_DOMAIN or run `blockctl doctor setup`")
        if not settings.api_token:
            raise ConfigurationError("missing API token: set BLOCKCTL_API_TOKEN or run `blockctl doctor setup`")

        self._context = context or CancelContext()
        self._http = build_async_client(
            settings,
            base_url=base_url,
            token=settings.api_token,
            transport=transport,
        )

    async def __aenter__(self) -> "ManagementAPIClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, url: str, *, params: dict[str, str] | None = None) -> httpx.Response:
        logger.debug("%s %s %s", method, url, params or "")
        try:
            response = await self._context.guard(self._http.request(method, url, params=params))
        except httpx.HTTPError as exc:
            raise BackendError(f"request to identity service failed: {exc}", kind=ErrorKind.OTHER) from exc

        if response.is_error:
            raise BackendError(_error_message(response), status=response.status_code)
        return response

    @staticmethod
    def _user_path(user_id: str) -> str:
        return f"user-blocks/{quote(user_id, safe='')}"

    @staticmethod
    def _parse_blocks(response: httpx.Response) -> list[UserBlock]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise BackendError(
                f"invalid JSON in user-blocks response: {exc}",
                status=response.status_code,
                kind=ErrorKind.OTHER,
            ) from exc
        try:
            return UserBlocksPage.model_validate(payload).blocked_for
        except ValidationError as exc:
            raise BackendError(
                f"unexpected user-blocks response: {exc.error_count()} invalid field(s)",
                status=response.status_code,
                kind=ErrorKind.OTHER,
            ) from exc

    async def blocks(self, user_id: str) -> list[UserBlock]:
        response = await self._request("GET", self._user_path(user_id))
        return self._parse_blocks(response)

    async def blocks_by_identifier(self, identifier: str) -> list[UserBlock]:
        response = await self._request("GET", "user-blocks", params={"identifier": identifier})
        return self._parse_blocks(response)

    async def unblock(self, user_id: str) -> None:
        await self._request("DELETE", self._user_path(user_id))

    async def unblock_by_identifier(self, identifier: str) -> None:
        await self._request("DELETE", "user-blocks", params={"identifier": identifier})
