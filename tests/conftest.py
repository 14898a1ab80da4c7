"""Shared fixtures for preloader tests."""

import asyncio
import gzip

import pytest
from rubymarshal.writer import writes

from preloader.core import Response
from preloader.errors import TransportError


def gzip_marshal(obj) -> bytes:
    """Marshal a Python object the way a gem server serves its index."""
    return gzip.compress(writes(obj))


class RecordingTransport:
    """In-memory transport that records every call made to it."""

    def __init__(self, index: bytes = b"", failing=(), delay: float = 0.0):
        self.index = index
        self.failing = set(failing)
        self.delay = delay
        self.calls: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def gets(self) -> list[str]:
        return [path for method, path in self.calls if method == "GET"]

    @property
    def heads(self) -> list[str]:
        return [path for method, path in self.calls if method == "HEAD"]

    async def get(self, path: str) -> bytes:
        self.calls.append(("GET", path))
        return self.index

    async def head(self, path: str) -> Response:
        self.calls.append(("HEAD", path))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if path in self.failing:
                raise TransportError(f"HEAD {path} returned 404", status_code=404)
            return Response(url=path, status=200, content=b"", headers={})
        finally:
            self.in_flight -= 1


@pytest.fixture
def latest_specs() -> bytes:
    return gzip_marshal([["latest_gem", "1.0.0", ""]])


@pytest.fixture
def full_specs() -> bytes:
    return gzip_marshal([["latest_gem", "1.0.0", ""], ["other", "0.1.0", ""]])


@pytest.fixture
def make_transport():
    return RecordingTransport
