"""Shared fakes for storage tests.

`FakeDrive` emulates the subset of Microsoft Graph the OneDrive provider
uses, at the transport level, so provider tests exercise real request
shapes without the network. `ScriptedTransport` replays canned responses
for malformed-payload cases a well-behaved drive would never produce.
"""
import pytest
from multidict import CIMultiDict

from vaultsync.config import Settings, settings
from vaultsync.errors import TransportError, UnauthorizedError
from vaultsync.integrations.onedrive_client import TransportResponse
from vaultsync.storage.onedrive import OneDriveStorage

BASE_URL = "https://graph.test/v1.0/me"
DOWNLOAD_URL = "https://download.test"
ROOT = "/drive/root:"


def reply(status=200, body=None, headers=None):
    return TransportResponse(status=status, body=body, headers=CIMultiDict(headers or {}))


def _check(resp, method, statuses):
    if resp.status not in statuses:
        raise TransportError(f"{method} failed: {resp.status}", status=resp.status)
    return resp


class FakeAuth:
    def __init__(self, authorized=True, revoke_error=None):
        self.authorized = authorized
        self.revoke_error = revoke_error
        self.events = []

    async def ensure_authorized(self):
        self.events.append("ensure")
        if not self.authorized:
            raise UnauthorizedError("not authorized")

    def get_auth_headers(self):
        return {"Authorization": "Bearer test-token"}

    async def revoke(self, logout_url):
        self.events.append(("revoke", logout_url))
        if self.revoke_error:
            raise self.revoke_error


class ScriptedTransport:
    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = []

    async def request(self, url, method="GET", *, headers=None, data=None, json=None,
                      response_type="json", statuses=(200,), skip_auth=False):
        self.calls.append({
            "url": url, "method": method, "headers": headers, "data": data, "json": json,
            "response_type": response_type, "statuses": tuple(statuses), "skip_auth": skip_auth,
        })
        resp = self._responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return _check(resp, method, statuses)


class FakeDrive:
    """In-memory drive keyed by provider path (e.g. '/drive/root:/a.kdbx')."""

    def __init__(self):
        self.items = {}
        self.calls = []
        self._version = 0

    def put(self, path, data=b"", folder=False):
        self._version += 1
        self.items[path] = {"data": data, "etag": f'"{{{path}}},{self._version}"', "folder": folder}
        return self.items[path]["etag"]

    def _meta(self, path):
        item = self.items[path]
        parent, name = path.rsplit("/", 1)
        meta = {"name": name, "eTag": item["etag"], "parentReference": {"path": parent}}
        if item["folder"]:
            meta["folder"] = {"childCount": 0}
        else:
            meta["@microsoft.graph.downloadUrl"] = DOWNLOAD_URL + path
        return meta

    def _children(self, directory):
        return [self._meta(p) for p in self.items if p.rsplit("/", 1)[0] == directory]

    async def request(self, url, method="GET", *, headers=None, data=None, json=None,
                      response_type="json", statuses=(200,), skip_auth=False):
        self.calls.append((method, url, skip_auth))
        headers = headers or {}
        if url.startswith(DOWNLOAD_URL):
            path = url[len(DOWNLOAD_URL):]
            item = self.items.get(path)
            if item is None:
                return _check(reply(404), method, statuses)
            return _check(reply(200, item["data"], {"ETag": "content-" + item["etag"]}), method, statuses)
        path = url[len(BASE_URL):]
        if method == "PUT" and path.endswith(":/content"):
            path = path[: -len(":/content")]
            current = self.items.get(path)
            expected = headers.get("If-Match")
            if expected and current is not None and current["etag"] != expected:
                return _check(reply(412, {"error": {"code": "resourceModified"}, "eTag": current["etag"]}), method, statuses)
            etag = self.put(path, data)
            return _check(reply(200 if current else 201, {"name": path.rsplit("/", 1)[1], "eTag": etag}), method, statuses)
        if method == "POST" and path == "/drive/root/children":
            full = f"{ROOT}/{json['name']}"
            if full in self.items:
                return _check(reply(409, {"error": {"code": "nameAlreadyExists"}}), method, statuses)
            self.put(full, folder=True)
            return _check(reply(201, self._meta(full)), method, statuses)
        if method == "DELETE":
            if self.items.pop(path, None) is None:
                return _check(reply(404), method, statuses)
            return _check(reply(204), method, statuses)
        if path == "/drive/root/children":
            return _check(reply(200, {"value": self._children(ROOT)}), method, statuses)
        if path.endswith(":/children"):
            return _check(reply(200, {"value": self._children(path[: -len(":/children")])}), method, statuses)
        if path not in self.items:
            return _check(reply(404, {"error": {"code": "itemNotFound"}}), method, statuses)
        return _check(reply(200, self._meta(path)), method, statuses)


@pytest.fixture(autouse=True)
def no_alerts(monkeypatch):
    monkeypatch.setattr(settings, "ALERT_WEBHOOK_URL", None)


@pytest.fixture
def config():
    return Settings(
        _env_file=None,
        ONEDRIVE_BASE_URL=BASE_URL,
        OAUTH_REDIRECT_URL="https://app.test/oauth",
        ONEDRIVE_CLIENT_ID=None,
        ONEDRIVE_CLIENT_SECRET=None,
        ONEDRIVE_DEFAULT_CLIENT_ID="default-id",
        ONEDRIVE_DEFAULT_CLIENT_SECRET="default-secret",
    )


@pytest.fixture
def auth():
    return FakeAuth()


@pytest.fixture
def drive():
    return FakeDrive()


@pytest.fixture
def storage(auth, drive, config):
    return OneDriveStorage(auth, transport=drive, config=config)
