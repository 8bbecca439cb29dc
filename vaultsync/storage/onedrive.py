# vaultsync/storage/onedrive.py
"""
OneDrive provider for vault storage.

Talks to Microsoft Graph through an injected transport and authorization.
Revisions are Graph eTags and are only ever compared for equality; writes
with an expected revision are sent as `If-Match` so the drive itself rejects
lost updates with 412.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import quote

from vaultsync.config import Settings, settings
from vaultsync.errors import (
    NotFoundError,
    ProtocolViolationError,
    RevisionConflictError,
    StorageError,
    TransportError,
    UnauthorizedError,
)
from vaultsync.integrations.graph_models import DriveItem, DriveItemCollection, parse_payload
from vaultsync.integrations.onedrive_client import GraphTransport, VaultAuth
from vaultsync.monitoring.errors import record_error
from vaultsync.monitoring.logger import log
from vaultsync.storage.base import DirectoryEntry, LoadResult, SaveResult, StatResult, StorageProvider

COMPONENT = "onedrive_storage"


@dataclass(frozen=True)
class OAuthConfig:
    """Description of the OAuth app handed to the external authorization flow."""
    url: str
    token_url: str
    scope: str
    client_id: Optional[str]
    client_secret: Optional[str]
    pkce: bool = True


def _elapsed_ms(started: float) -> float:
    return round((time.monotonic() - started) * 1000, 1)


class OneDriveStorage(StorageProvider):
    """
    Vault storage backed by a personal OneDrive.

    Args:
        auth: Authorization context, checked before every operation
        transport: Graph transport; defaults to an aiohttp `GraphTransport` using `auth`
        config: Settings; defaults to the module-level settings
    """

    name = "onedrive"

    def __init__(self, auth: VaultAuth, transport: GraphTransport | None = None, config: Settings | None = None):
        super().__init__()
        self.auth = auth
        self.transport = transport or GraphTransport(auth)
        self.config = config or settings
        self.base_url = self.config.ONEDRIVE_BASE_URL.rstrip("/")
        self.root_prefix = self.config.ONEDRIVE_ROOT_PREFIX

    def path_for_name(self, file_name: str) -> str:
        return self.root_prefix + file_name + self.config.VAULT_FILE_EXTENSION

    def _url(self, path: str) -> str:
        return self.base_url + path

    async def _authorize(self, operation: str, path: Optional[str]) -> None:
        started = time.monotonic()
        try:
            await self.auth.ensure_authorized()
        except UnauthorizedError as exc:
            await self._report(operation, path, started, exc)
            raise

    async def _report(self, operation: str, path: Optional[str], started: float, exc: StorageError) -> None:
        """Log a failed operation; protocol violations are also alerted."""
        if exc.path is None:
            exc.path = path
        fields = {
            "operation": operation,
            "path": path,
            "elapsed_ms": _elapsed_ms(started),
            "status": getattr(exc, "status", None),
            "phase": getattr(exc, "phase", None),
        }
        message = f"{operation} error: {exc.message}"
        if isinstance(exc, ProtocolViolationError):
            await record_error(COMPONENT, operation, message, details={"error": type(exc).__name__}, **fields)
        else:
            log("ERROR", message, module=COMPONENT, **fields)

    async def stat(self, path: str) -> StatResult:
        await self._authorize("stat", path)
        log("DEBUG", "Stat", module=COMPONENT, operation="stat", path=path)
        started = time.monotonic()
        try:
            try:
                resp = await self.transport.request(self._url(path))
            except TransportError as exc:
                if exc.status == 404:
                    raise NotFoundError(path) from exc
                raise
            item = parse_payload(DriveItem, resp.body, path=path)
            if not item.e_tag:
                raise ProtocolViolationError("no eTag", path=path)
        except NotFoundError:
            log("DEBUG", "Stated not found", module=COMPONENT, operation="stat", path=path, elapsed_ms=_elapsed_ms(started))
            raise
        except StorageError as exc:
            await self._report("stat", path, started, exc)
            raise
        log("DEBUG", "Stated", module=COMPONENT, operation="stat", path=path, rev=item.e_tag, elapsed_ms=_elapsed_ms(started))
        return StatResult(rev=item.e_tag)

    async def load(self, path: str) -> LoadResult:
        await self._authorize("load", path)
        log("DEBUG", "Load", module=COMPONENT, operation="load", path=path)
        started = time.monotonic()
        try:
            try:
                meta = await self.transport.request(self._url(path))
            except TransportError as exc:
                exc.phase = "metadata"
                raise
            item = parse_payload(DriveItem, meta.body, path=path, phase="metadata")
            if not item.download_url or not item.e_tag:
                raise ProtocolViolationError("no download url", path=path, phase="metadata")
            # The download url is a self-authorizing capability; no bearer token is sent
            try:
                content = await self.transport.request(item.download_url, response_type="binary", skip_auth=True)
            except TransportError as exc:
                exc.phase = "content"
                raise
        except StorageError as exc:
            await self._report("load", path, started, exc)
            raise
        rev = content.headers.get("ETag") or item.e_tag
        log("DEBUG", "Loaded", module=COMPONENT, operation="load", path=path, rev=rev, elapsed_ms=_elapsed_ms(started))
        return LoadResult(data=content.body or b"", rev=rev)

    async def save(self, path: str, data: bytes, rev: Optional[str] = None) -> SaveResult:
        await self._authorize("save", path)
        log("DEBUG", "Save", module=COMPONENT, operation="save", path=path, rev=rev)
        started = time.monotonic()
        headers = {"Content-Type": "application/octet-stream"}
        if rev:
            headers["If-Match"] = rev
        try:
            resp = await self.transport.request(
                self._url(path) + ":/content",
                method="PUT",
                headers=headers,
                data=data,
                statuses=(200, 201, 412),
            )
            item = parse_payload(DriveItem, resp.body, path=path)
            if not item.e_tag:
                raise ProtocolViolationError("no eTag", path=path)
        except StorageError as exc:
            await self._report("save", path, started, exc)
            raise
        if resp.status == 412:
            log("INFO", "Save conflict", module=COMPONENT, operation="save", path=path, rev=item.e_tag, elapsed_ms=_elapsed_ms(started))
            raise RevisionConflictError(path, rev=item.e_tag)
        log("DEBUG", "Saved", module=COMPONENT, operation="save", path=path, rev=item.e_tag, elapsed_ms=_elapsed_ms(started))
        return SaveResult(rev=item.e_tag)

    async def list(self, directory: Optional[str] = None) -> List[DirectoryEntry]:
        await self._authorize("list", directory)
        log("DEBUG", "List", module=COMPONENT, operation="list", path=directory)
        started = time.monotonic()
        url = self._url(f"{directory}:/children" if directory else "/drive/root/children")
        try:
            resp = await self.transport.request(url)
            if not isinstance(resp.body, dict) or resp.body.get("value") is None:
                raise ProtocolViolationError("list error", path=directory)
            listing = parse_payload(DriveItemCollection, resp.body, path=directory)
            entries = []
            for raw in listing.value:
                if not isinstance(raw, dict) or not raw.get("name"):
                    continue
                item = parse_payload(DriveItem, raw, path=directory)
                parent = item.parent_reference.path if item.parent_reference else None
                if parent is None:
                    raise ProtocolViolationError(f"no parent path for {item.name}", path=directory)
                entries.append(
                    DirectoryEntry(
                        name=item.name,
                        path=f"{parent}/{item.name}",
                        rev=item.e_tag,
                        is_directory=item.is_folder,
                    )
                )
        except StorageError as exc:
            await self._report("list", directory, started, exc)
            raise
        log("DEBUG", f"Listed {len(entries)} items", module=COMPONENT, operation="list", path=directory, elapsed_ms=_elapsed_ms(started))
        return entries

    async def remove(self, path: str) -> None:
        await self._authorize("remove", path)
        log("DEBUG", "Remove", module=COMPONENT, operation="remove", path=path)
        started = time.monotonic()
        try:
            await self.transport.request(self._url(path), method="DELETE", response_type=None, statuses=(200, 204))
        except StorageError as exc:
            await self._report("remove", path, started, exc)
            raise
        log("DEBUG", "Removed", module=COMPONENT, operation="remove", path=path, elapsed_ms=_elapsed_ms(started))

    async def mkdir(self, path: str) -> None:
        await self._authorize("mkdir", path)
        log("DEBUG", "Make dir", module=COMPONENT, operation="mkdir", path=path)
        started = time.monotonic()
        payload = {
            "name": path.removeprefix(self.root_prefix),
            "folder": {},
            "@microsoft.graph.conflictBehavior": "fail",
        }
        try:
            resp = await self.transport.request(
                self._url("/drive/root/children"),
                method="POST",
                json=payload,
                response_type=None,
                statuses=(200, 201, 204, 409),
            )
        except StorageError as exc:
            await self._report("mkdir", path, started, exc)
            raise
        if resp.status == 409:
            log("INFO", "Dir already exists", module=COMPONENT, operation="mkdir", path=path, elapsed_ms=_elapsed_ms(started))
            return
        log("DEBUG", "Made dir", module=COMPONENT, operation="mkdir", path=path, elapsed_ms=_elapsed_ms(started))

    def logout_url(self) -> str:
        return self.config.ONEDRIVE_LOGOUT_URL.replace("{url}", quote(self.config.OAUTH_REDIRECT_URL, safe=""))

    async def set_enabled(self, enabled: bool) -> None:
        # Revoke while the session is still known, then disable
        if not enabled:
            try:
                await self.auth.revoke(self.logout_url())
            except Exception as e:
                log("ERROR", f"Authorization revoke failed: {e}", module=COMPONENT, operation="set_enabled")
        await super().set_enabled(enabled)

    def oauth_config(self) -> OAuthConfig:
        client_id = self.config.ONEDRIVE_CLIENT_ID
        client_secret = self.config.ONEDRIVE_CLIENT_SECRET
        if not client_id or not client_secret:
            client_id = self.config.ONEDRIVE_DEFAULT_CLIENT_ID
            client_secret = self.config.ONEDRIVE_DEFAULT_CLIENT_SECRET
        return OAuthConfig(
            url=self.config.ONEDRIVE_AUTHORIZE_URL,
            token_url=self.config.ONEDRIVE_TOKEN_URL,
            scope=self.config.ONEDRIVE_SCOPE,
            client_id=client_id,
            client_secret=client_secret,
        )
