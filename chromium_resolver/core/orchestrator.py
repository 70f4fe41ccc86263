# chromium_resolver/core/orchestrator.py
r"""
Host failover download loop.

    SelectHost -> Check -> Downloading -> Succeeded
                    \           \
                     +-----------+--> advance (after advance_delay) -> SelectHost
    SelectHost past the last host -> wrap to host 0, retry += 1
    retry == options.retry        -> DownloadExhaustedError

The blocking transfer runs in a worker thread; the inactivity timer and all
state live on the event loop.
"""
from __future__ import annotations
import asyncio
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Optional

from . import events
from .errors import DownloadExhaustedError, DownloadStalledError
from .fetcher import BrowserFetcher
from .models import DownloadState, ResolutionOptions, RevisionInfo

logger = logging.getLogger(__name__)

FetcherFactory = Callable[..., BrowserFetcher]


class DownloadOrchestrator:
    def __init__(
        self,
        options: ResolutionOptions,
        revision: str,
        user_folder: Path,
        reporter: Any = None,
        fetcher_factory: FetcherFactory = BrowserFetcher,
    ):
        self.options = options
        self.revision = revision
        self.user_folder = Path(user_folder)
        self.reporter = reporter
        self.fetcher_factory = fetcher_factory
        self.state = DownloadState()

    async def run(self) -> RevisionInfo:
        """Loop over hosts until one download succeeds. Raises DownloadExhaustedError."""
        hosts = self.options.hosts
        state = self.state
        while True:
            if state.index >= len(hosts):
                state.index = 0
                state.retry += 1
                if state.retry >= self.options.retry:
                    raise DownloadExhaustedError(self.revision, state.retry)
                logger.info("Retry Chromium downloading ... (%d/%d)", state.retry, self.options.retry - 1)
                events.emit("retry", state.retry)
                if not hosts:
                    await asyncio.sleep(self.options.advance_delay)
                    continue

            host = hosts[state.index]
            info = await self._attempt(host)
            if info is not None:
                await self._cleanup_other_revisions(host)
                return info

            await asyncio.sleep(self.options.advance_delay)
            state.index += 1

    # ---- one host ----
    async def _attempt(self, host: str) -> Optional[RevisionInfo]:
        state = self.state
        fetcher = self.fetcher_factory(path=self.user_folder, host=host)
        label = "host" if state.index == 0 else "mirror host"
        logger.info("Download from %s: %s ...", label, host)
        events.emit("download", host, state.index)

        can_download = await asyncio.to_thread(fetcher.can_download, self.revision)
        logger.info("Can download %s: %s", self.revision, can_download)
        if not can_download:
            events.emit("download_failed", host, "unavailable")
            return None

        try:
            info = await self._download(fetcher, host)
        except DownloadStalledError as e:
            logger.warning("No data from %s within %.0fs, trying next host (%s)",
                           host, self.options.inactivity_timeout, e)
            events.emit("download_failed", host, "stalled")
            return None
        except Exception as e:
            logger.error("Failed to download Chromium r%s from %s. retry ... (%s)", self.revision, host, e)
            logger.debug("Download error", exc_info=True)
            events.emit("download_failed", host, str(e) or type(e).__name__)
            return None

        logger.info("Chromium downloaded to %s", self.user_folder)
        events.emit("downloaded", info)
        return info

    async def _download(self, fetcher: BrowserFetcher, host: str) -> RevisionInfo:
        loop = asyncio.get_running_loop()
        state = self.state
        state.received = False
        cancel = threading.Event()
        stalled: asyncio.Future = loop.create_future()

        def _on_stall() -> None:
            state.timer = None
            if not stalled.done():
                stalled.set_result(None)
            cancel.set()

        def _on_bytes(downloaded: int, total: int) -> None:
            if cancel.is_set():
                return
            if not state.received:
                # first byte: disarm for good, the timer is never re-armed
                state.received = True
                if state.timer is not None:
                    state.timer.cancel()
                    state.timer = None
                events.emit("start_downloading", host)
            if self.reporter is not None:
                self.reporter.show(downloaded, total)
            events.emit("progress", downloaded, total)

        def on_progress(downloaded: int, total: int) -> None:
            # worker thread -> event loop
            loop.call_soon_threadsafe(_on_bytes, downloaded, total)

        state.timer = loop.call_later(self.options.inactivity_timeout, _on_stall)
        transfer = asyncio.ensure_future(asyncio.to_thread(
            fetcher.download, self.revision, on_progress, cancel, self.options.inactivity_timeout,
        ))
        try:
            done, _ = await asyncio.wait({transfer, stalled}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            if state.timer is not None:
                state.timer.cancel()
                state.timer = None
        if transfer in done:
            stalled.cancel()
            return transfer.result()

        # abandoned: the worker stops at its next chunk or read timeout
        transfer.add_done_callback(_drain)
        raise DownloadStalledError(f"{host} sent no data")

    # ---- after success ----
    async def _cleanup_other_revisions(self, host: str) -> None:
        fetcher = self.fetcher_factory(path=self.user_folder, host=host)
        try:
            revisions = await asyncio.to_thread(fetcher.local_revisions)
            partials = await asyncio.to_thread(fetcher.partial_entries)
        except OSError as e:
            logger.warning("Could not list cached revisions in %s: %s", self.user_folder, e)
            return
        # finished folders plus half-done zips/extractions of other revisions
        jobs = [(f"revision {r}", fetcher.remove, r) for r in revisions if r != self.revision]
        jobs += [(str(p), fetcher.remove_partial, p) for r, p in partials if r != self.revision]
        if not jobs:
            return
        results = await asyncio.gather(
            *(asyncio.to_thread(func, arg) for _, func, arg in jobs),
            return_exceptions=True,
        )
        for (what, _, _), res in zip(jobs, results):
            if isinstance(res, Exception):
                logger.warning("Failed to remove old %s: %s", what, res)
            else:
                logger.info("Removed old chromium %s", what)


def _drain(task: asyncio.Future) -> None:
    # consume the abandoned transfer's outcome so asyncio doesn't warn about it
    if not task.cancelled() and task.exception() is not None:
        logger.debug("Abandoned download ended: %s", task.exception())
