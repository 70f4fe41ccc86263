# chromium_resolver/resolver.py
"""
Entry points: detect -> (download) -> launch check -> emit, strictly in that
order, one RevisionInfo per call.
"""
from __future__ import annotations
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

from playwright.async_api import async_playwright

from .core import events
from .core.config import ensure_user_folder, get_options, resolve_revision, stats_path, user_folder_path
from .core.detect import build_detection_list, detect
from .core.errors import DownloadExhaustedError
from .core.fetcher import BrowserFetcher
from .core.launch import playwright_version, validate_launch
from .core.models import ResolutionOptions, RevisionInfo
from .core.orchestrator import DownloadOrchestrator, FetcherFactory
from .core.stats import read_stats, write_stats
from .ui import ProgressReporter

logger = logging.getLogger(__name__)

OptionsArg = Union[ResolutionOptions, Mapping[str, Any], None]


class Resolver:
    def __init__(
        self,
        options: ResolutionOptions,
        reporter: Optional[ProgressReporter] = None,
        fetcher_factory: FetcherFactory = BrowserFetcher,
    ):
        self.options = options
        self.reporter = reporter if reporter is not None else ProgressReporter()
        self.fetcher_factory = fetcher_factory
        self.revision = ""
        self.user_folder: Optional[Path] = None
        self.detection_list: List[Path] = []
        self.revision_info: Optional[RevisionInfo] = None
        self.user_revision_info: Optional[RevisionInfo] = None
        self._resolved: Optional[asyncio.Future] = None

    async def start(self) -> RevisionInfo:
        self._resolved = asyncio.get_running_loop().create_future()
        events.emit("start", self.options)

        self.revision = resolve_revision(self.options)
        logger.info("Resolve chromium revision: %s", self.revision)

        self.user_folder = await asyncio.to_thread(ensure_user_folder, self.options)
        self.detection_list = build_detection_list(
            self.user_folder, self.options.detection_path, self.options.folder_name
        )
        logger.info("Detecting local chromium ...")
        logger.debug("Detection list:\n%s", "\n".join(str(p) for p in self.detection_list))

        found, self.user_revision_info = await asyncio.to_thread(
            detect, self.detection_list, self.revision, self.user_folder
        )
        if found is not None:
            events.emit("detected", found)
            self.revision_info = found
        else:
            logger.info("Not found local chromium")
            self.revision_info = await self._download()

        if self.options.launch:
            await validate_launch(self.revision_info)
        self._resolve_handler(self.revision_info)
        await asyncio.to_thread(
            write_stats, stats_path(self.options, self.user_folder), self.revision_info
        )
        return await self._resolved

    async def _download(self) -> RevisionInfo:
        orchestrator = DownloadOrchestrator(
            self.options, self.revision, self.user_folder,
            reporter=self.reporter, fetcher_factory=self.fetcher_factory,
        )
        try:
            return await orchestrator.run()
        except DownloadExhaustedError as e:
            logger.error("%s", e)
            sys.exit(1)
        finally:
            self.reporter.close()

    def _resolve_handler(self, info: RevisionInfo) -> None:
        if self._resolved is None or self._resolved.done():
            return
        info.playwright = async_playwright
        info.playwright_version = playwright_version()

        logger.info("Chromium executablePath: %s", info.executable_path)
        logger.info("Chromium launchable: %s", info.launchable)
        logger.info("Chromium version: %s", info.chromium_version)
        logger.info("Playwright version: %s", info.playwright_version)

        self._resolved.set_result(info)
        events.emit("resolve", info)


async def resolve(options: OptionsArg = None, **overrides: Any) -> RevisionInfo:
    """Resolve (detect or download) Chromium and return its RevisionInfo.

    Exits the process with status 1 when every host fails on every retry cycle.
    """
    resolver = Resolver(get_options(options, **overrides))
    return await resolver.start()


def resolve_sync(options: OptionsArg = None, **overrides: Any) -> RevisionInfo:
    return asyncio.run(resolve(options, **overrides))


def get_stats(options: OptionsArg = None, **overrides: Any) -> Optional[RevisionInfo]:
    """
    Synchronous lookup, never downloads: the stats cache written by the last
    resolution, else a local detection pass. None when nothing is found.
    """
    opts = get_options(options, **overrides)
    revision = resolve_revision(opts)
    folder = user_folder_path(opts)
    info = read_stats(stats_path(opts, folder), revision)
    if info is None:
        candidates = build_detection_list(folder, opts.detection_path, opts.folder_name)
        info, _ = detect(candidates, revision, folder)
    if info is not None:
        info.playwright = async_playwright
        info.playwright_version = info.playwright_version or playwright_version()
    return info
