"""Protocol definitions for preloader components."""

from dataclasses import dataclass
from typing import Protocol


@dataclass
class Response:
    """HTTP response container."""

    url: str
    status: int
    content: bytes
    headers: dict[str, str]

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    """Protocol for clients talking to a gem repository.

    Paths are relative to the repository root. Both methods raise on
    network failures and non-success statuses.
    """

    async def get(self, path: str) -> bytes:
        """Fetch a resource body."""
        ...

    async def head(self, path: str) -> Response:
        """Check a resource without downloading its body."""
        ...
