import asyncio

import httpx
import pytest
import pytest_asyncio

from rawrelay.backends.memory import MemoryBackend
from rawrelay.engine import ResourceCache
from rawrelay.origin import OriginClient

BASE_URL = "https://raw.example.com/org/repo/main"
URL = f"{BASE_URL}/init.lua"


class FakeClock:
    """Manually advanced replacement for ``time.time``."""

    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeOrigin:
    """Scripted origin used as an ``httpx.MockTransport`` handler."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responses: list[httpx.Response | Exception] = []

    def queue(self, *responses: httpx.Response | Exception) -> None:
        self.responses.extend(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected origin request: {request.url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def origin_response(
    content: bytes = b"print('v1')",
    etag: str | None = '"v1"',
    content_type: str | None = "text/plain; charset=utf-8",
    status_code: int = 200,
) -> httpx.Response:
    headers = {}
    if etag is not None:
        headers["ETag"] = etag
    if content_type is not None:
        headers["Content-Type"] = content_type
    return httpx.Response(status_code, content=content, headers=headers)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def origin() -> FakeOrigin:
    return FakeOrigin()


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest_asyncio.fixture
async def http_client(origin: FakeOrigin):
    async with httpx.AsyncClient(transport=httpx.MockTransport(origin)) as client:
        yield client


@pytest_asyncio.fixture
async def engine(
    http_client: httpx.AsyncClient, backend: MemoryBackend, clock: FakeClock
) -> ResourceCache:
    return ResourceCache(OriginClient(http_client), backend=backend, ttl=60, clock=clock)


class TrickleStream(httpx.AsyncByteStream):
    """Body that arrives one byte at a time, never idle long enough to hit a read timeout."""

    def __init__(self, chunks: int = 10, interval: float = 0.2) -> None:
        self.chunks = chunks
        self.interval = interval

    async def __aiter__(self):
        for _ in range(self.chunks):
            await asyncio.sleep(self.interval)
            yield b"x"


def trickle_response(**kwargs) -> httpx.Response:
    return httpx.Response(200, headers={"ETag": '"slow"'}, stream=TrickleStream(**kwargs))
