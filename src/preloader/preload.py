"""Preloader engine: probes every selected package with bounded concurrency."""

import asyncio
from typing import Sequence

import typer

from .core import Transport
from .errors import ItemProbeError
from .specs import IndexFetcher, IndexSource, PackageIdentifier

DEFAULT_WORKERS = 20


def select_range(
    index: Sequence[PackageIdentifier],
    skip: int,
    limit: int | None,
) -> Sequence[PackageIdentifier]:
    """Return the skip/limit window of the index, empty when out of range."""
    if skip < 0 or skip >= len(index):
        return ()
    end = skip + (len(index) if limit is None else limit)
    if end <= skip:
        return ()
    return index[skip:min(end, len(index))]


class PreloadRunner:
    """Sends a HEAD request for every package in a slice of the index.

    Configure with the chainable ``with_*`` methods, then ``await run()``.
    Failing probes are collected in ``errors`` and reported on stderr; they
    never abort the run.
    """

    def __init__(
        self,
        transport: Transport,
        latest: bool = False,
        progress: bool = False,
    ):
        self.transport = transport
        self.fetcher = IndexFetcher(
            transport,
            IndexSource.LATEST if latest else IndexSource.FULL,
        )
        self.progress = progress
        self.workers = DEFAULT_WORKERS
        self.skip = 0
        self.limit: int | None = None

        self.errors: list[ItemProbeError] = []
        self.probed = 0

    def with_workers(self, count: int) -> "PreloadRunner":
        self.workers = count
        return self

    def with_skip(self, count: int) -> "PreloadRunner":
        self.skip = count
        return self

    def with_limit(self, count: int | None) -> "PreloadRunner":
        self.limit = count
        return self

    async def _probe(self, identifier: PackageIdentifier):
        """Probe a single package, recording any failure."""
        self.probed += 1
        try:
            await self.transport.head(f"gems/{identifier}.gem")
        except Exception as e:
            self.errors.append(ItemProbeError(identifier, e))
            typer.echo(f"\nError while processing package: {identifier} ({e})", err=True)

    async def _worker(self, queue: asyncio.Queue, bar=None):
        """Worker coroutine that drains the probe queue."""
        while True:
            try:
                identifier = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            await self._probe(identifier)
            if bar is not None:
                bar.update(1)

    async def _dispatch(self, selection: Sequence[PackageIdentifier], bar=None):
        queue: asyncio.Queue = asyncio.Queue()
        for identifier in selection:
            queue.put_nowait(identifier)

        pool_size = max(1, min(self.workers, len(selection)))
        workers = [
            asyncio.create_task(self._worker(queue, bar))
            for _ in range(pool_size)
        ]
        await asyncio.gather(*workers)

    async def run(self):
        """Fetch the index and probe the selected packages."""
        self.errors = []
        self.probed = 0

        if self.limit is not None and self.limit <= 0:
            return

        index = await self.fetcher.fetch()
        selection = select_range(index, self.skip, self.limit)
        if not selection:
            return

        if self.progress:
            with typer.progressbar(length=len(selection), label="Preloading packages") as bar:
                await self._dispatch(selection, bar)
        else:
            await self._dispatch(selection)
