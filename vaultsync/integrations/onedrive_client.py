"""vaultsync/integrations/onedrive_client.py
Authorization and HTTP transport used by the OneDrive storage provider.

Responsibilities:
- Provide an auth interface used by the transport (ensure_authorized, get_auth_headers, revoke)
- TokenAuth reads `MS_ACCESS_TOKEN` from env for manual testing
- GraphTransport exposes a single `request` coroutine with per-call accepted statuses,
  JSON/binary response shapes and response-header access

Notes:
- The OAuth2 authorization-code/PKCE exchange and token refresh are intentionally
  NOT implemented here. Plug any object satisfying `VaultAuth` instead.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Dict, Any, Optional, Union, Awaitable, Iterable
import asyncio
import aiohttp
from multidict import CIMultiDict
from vaultsync.config import settings
from vaultsync.errors import TransportError, UnauthorizedError
from vaultsync.monitoring.logger import log


class VaultAuth(Protocol):
    """Auth interface consumed by the storage provider and the transport.

    Implementations may provide either a synchronous `get_auth_headers()` or
    an async `get_auth_headers()` coroutine. `GraphTransport` handles both.
    Token refresh, if any, must be serialized by the implementation.
    """

    async def ensure_authorized(self) -> None:
        ...

    def get_auth_headers(self) -> Union[Dict[str, str], Awaitable[Dict[str, str]]]:
        ...

    async def revoke(self, logout_url: str) -> None:
        ...


class TokenAuth:
    """Simple auth provider that reads `MS_ACCESS_TOKEN` from env/settings.

    This is intended for manual testing with a personal OneDrive access token.
    """

    def __init__(self, token: Optional[str] = None, session: Optional[aiohttp.ClientSession] = None):
        self.token = token or settings.MS_ACCESS_TOKEN
        self._session = session

    async def ensure_authorized(self) -> None:
        if not self.token:
            log("DEBUG", "MS_ACCESS_TOKEN not provided for TokenAuth", module="onedrive_client")
            raise UnauthorizedError("access token not configured")

    def get_auth_headers(self) -> Dict[str, str]:
        if not self.token:
            raise UnauthorizedError("access token not configured")
        return {"Authorization": f"Bearer {self.token}"}

    async def revoke(self, logout_url: str) -> None:
        """Hit the logout endpoint (best-effort) and forget the token."""
        sess = self._session or aiohttp.ClientSession()
        created_local = self._session is None
        try:
            async with sess.get(logout_url) as resp:
                log("INFO", "Logout endpoint called", module="onedrive_client", status=resp.status)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            log("WARNING", f"Logout request failed: {e}", module="onedrive_client")
        finally:
            self.token = None
            if created_local:
                await sess.close()


@dataclass
class TransportResponse:
    status: int
    body: Any = None
    headers: CIMultiDict = field(default_factory=CIMultiDict)


class GraphTransport:
    """Thin aiohttp transport for Microsoft Graph requests.

    A session injected at construction is reused and never closed here;
    otherwise a session is created and closed per request.
    """

    def __init__(self, auth: VaultAuth, session: aiohttp.ClientSession | None = None):
        self.auth = auth
        self._external_session = session

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._external_session is not None:
            return self._external_session
        return aiohttp.ClientSession()

    async def _auth_headers(self) -> Dict[str, str]:
        # Support auth providers that return headers either synchronously or
        # asynchronously.
        headers = self.auth.get_auth_headers()
        if asyncio.iscoroutine(headers):
            headers = await headers
        return dict(headers)

    async def request(
        self,
        url: str,
        method: str = "GET",
        *,
        headers: Optional[Dict[str, str]] = None,
        data: Any = None,
        json: Any = None,
        response_type: Optional[str] = "json",
        statuses: Iterable[int] = (200,),
        skip_auth: bool = False,
    ) -> TransportResponse:
        """Send one request and decode the body according to `response_type`.

        `response_type` is "json", "binary" or None (body discarded).
        Statuses outside `statuses` raise TransportError carrying the status.
        """
        accepted = set(statuses)
        req_headers: Dict[str, str] = {} if skip_auth else await self._auth_headers()
        if response_type == "json":
            req_headers.setdefault("Accept", "application/json")
        if headers:
            req_headers.update(headers)
        session = await self._get_session()
        try:
            async with session.request(method, url, headers=req_headers, data=data, json=json) as resp:
                if resp.status not in accepted:
                    # Error pages from proxies or the download CDN are not always UTF-8
                    text = (await resp.read()).decode("utf-8", "replace")
                    log("DEBUG", f"{method} request failed: {resp.status} {text[:200]}", module="onedrive_client", status=resp.status)
                    raise TransportError(f"{method} failed: {resp.status}", status=resp.status)
                body: Any = None
                if response_type == "json" and resp.status != 204:
                    try:
                        body = await resp.json(content_type=None)
                    except ValueError as e:
                        log("DEBUG", f"{method} response is not JSON: {e}", module="onedrive_client", status=resp.status)
                        raise TransportError(f"{method} returned invalid JSON", status=resp.status) from e
                elif response_type == "binary":
                    body = await resp.read()
                return TransportResponse(status=resp.status, body=body, headers=CIMultiDict(resp.headers))
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            log("DEBUG", f"{method} request error: {e}", module="onedrive_client")
            raise TransportError(f"{method} error: {e}") from e
        finally:
            if self._external_session is None:
                await session.close()
