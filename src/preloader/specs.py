"""Fetching and decoding of the repository spec index."""

import gzip
import zlib
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from rubymarshal.reader import loads

from .core import Transport
from .errors import FormatError


class IndexSource(Enum):
    """Which index resource to download."""

    FULL = "specs.4.8.gz"
    LATEST = "latest_specs.4.8.gz"


@dataclass(frozen=True)
class PackageIdentifier:
    """A package name and version taken from the index."""

    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.name}-{self.version}"


def _to_text(value) -> str:
    """Coerce a decoded Marshal value to a string.

    Gem::Version is a user-marshalled object whose dumped data is
    ``[version_string]``.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")

    # strings carrying instance variables come back wrapped
    text = getattr(value, "text", None)
    if isinstance(text, str):
        return text

    dump = getattr(value, "marshal_dump", None)
    if callable(dump):
        data = dump()
        if isinstance(data, (list, tuple)) and len(data) == 1:
            return _to_text(data[0])
        raise FormatError(f"Unexpected user-marshalled value: {data!r}")

    raise FormatError(f"Expected a string in index entry, got {type(value).__name__}")


def decode_index(payload: bytes) -> tuple[PackageIdentifier, ...]:
    """Gunzip and unmarshal an index payload into identifiers."""
    try:
        raw = gzip.decompress(payload)
    except (OSError, EOFError, zlib.error) as e:
        raise FormatError(f"Index is not a valid gzip stream: {e}") from e

    try:
        entries = loads(raw)
    except Exception as e:
        raise FormatError(f"Index is not a valid Marshal payload: {e}") from e

    if not isinstance(entries, (list, tuple)):
        raise FormatError(f"Expected a list of specs, got {type(entries).__name__}")

    identifiers = []
    for entry in entries:
        if not isinstance(entry, (list, tuple)) or len(entry) != 3:
            raise FormatError(f"Expected a (name, version, platform) entry, got {entry!r}")
        name, version, _platform = entry
        identifiers.append(PackageIdentifier(_to_text(name), _to_text(version)))
    return tuple(identifiers)


class IndexFetcher:
    """Downloads and decodes the spec index once, then serves it from memory."""

    def __init__(self, transport: Transport, source: IndexSource = IndexSource.FULL):
        self.transport = transport
        self.source = source
        self._index: tuple[PackageIdentifier, ...] | None = None

    @property
    def resource(self) -> str:
        return self.source.value

    async def fetch(self) -> tuple[PackageIdentifier, ...]:
        """Return the decoded index, downloading it on first use."""
        if self._index is None:
            payload = await self.transport.get(self.resource)
            self._index = decode_index(payload)
        return self._index

    def __iter__(self) -> Iterator[PackageIdentifier]:
        return iter(self._index or ())

    def __len__(self) -> int:
        return len(self._index or ())
