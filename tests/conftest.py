"""Shared fixtures for the test suite."""

from pathlib import Path

import httpx
import pytest

from ardemo.services.cache import AssetCache, RecentURLCache
from ardemo.services.content import ContentClient

SERVER = "https://someserver.com"
TOKEN = "123"


@pytest.fixture
def asset_cache(tmp_path: Path) -> AssetCache:
    return AssetCache(
        listing_path=tmp_path / "ARDemoCache.json",
        saved_files_dir=tmp_path / "savedFiles",
    )


@pytest.fixture
def make_download(tmp_path: Path):
    """Create a file the way a finished download leaves it in a temp dir."""
    downloads = tmp_path / "downloads"
    downloads.mkdir()

    def _make(name: str = "asset.bin", content: bytes = b"payload") -> Path:
        path = downloads / name
        path.write_bytes(content)
        return path

    return _make


@pytest.fixture
def url_cache_path(tmp_path: Path) -> Path:
    return tmp_path / "ARDemoMugURLCache.json"


@pytest.fixture
def recent_urls(url_cache_path: Path) -> RecentURLCache:
    return RecentURLCache(url_cache_path)


class FakeDeliveryServer:
    """In-process stand-in for the delivery API, served through MockTransport."""

    def __init__(self):
        self.assets: dict[str, dict] = {}
        self.files: dict[str, tuple[str, bytes, str]] = {}  # id -> (filename, content, etag)
        self.requests: list[httpx.Request] = []
        self.omit_etag = False
        self.pages: dict[str, str] = {}  # id -> non-JSON body served for the item
        self.transport_failures = 0

    def add_file(self, identifier: str, filename: str, content: bytes, etag: str) -> None:
        self.files[identifier] = (filename, content, etag)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.transport_failures:
            self.transport_failures -= 1
            raise httpx.ConnectError("Connection refused", request=request)
        if request.url.params.get("channelToken") != TOKEN:
            return httpx.Response(401)

        path = request.url.path
        prefix = "/content/published/api/v1.1"
        assert path.startswith(prefix)
        path = path[len(prefix):]

        if path == "/items":
            wanted = request.url.params.get("q", "")
            items = [a for a in self.assets.values() if f'"{a.get("type")}"' in wanted]
            return httpx.Response(200, json={"items": items})

        if path.startswith("/items/"):
            identifier = path.split("/")[2]
            if identifier in self.pages:
                return httpx.Response(
                    200, text=self.pages[identifier], headers={"Content-Type": "text/html"}
                )
            asset = self.assets.get(identifier)
            if asset is None:
                return httpx.Response(404, json={"detail": "not found"})
            return httpx.Response(200, json=asset)

        if path.startswith("/assets/") and path.endswith("/native"):
            identifier = path.split("/")[2]
            if identifier not in self.files:
                return httpx.Response(404)
            filename, content, etag = self.files[identifier]
            if request.headers.get("If-None-Match") == etag:
                return httpx.Response(304)
            headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
            if not self.omit_etag:
                headers["ETag"] = etag
            return httpx.Response(200, content=content, headers=headers)

        return httpx.Response(404)

    def downloads(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith("/native")]


@pytest.fixture
def server() -> FakeDeliveryServer:
    return FakeDeliveryServer()


@pytest.fixture
def content_client(server: FakeDeliveryServer):
    client = ContentClient(
        SERVER,
        TOKEN,
        client=httpx.Client(transport=httpx.MockTransport(server.handler)),
    )
    yield client
    client.close()
