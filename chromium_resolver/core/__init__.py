# chromium_resolver/core/__init__.py
from .config import get_options, load_cfg, config_path, default_revision, user_folder_path
from .detect import build_detection_list, detect
from .errors import ResolverError, DownloadExhaustedError, DownloadStalledError, UnsupportedPlatformError
from .fetcher import BrowserFetcher, current_platform
from .models import ResolutionOptions, RevisionInfo, DownloadState
from .orchestrator import DownloadOrchestrator
from .utils import to_megabytes, progress_fraction
from . import events

__all__ = [
    "get_options", "load_cfg", "config_path", "default_revision", "user_folder_path",
    "build_detection_list", "detect",
    "ResolverError", "DownloadExhaustedError", "DownloadStalledError", "UnsupportedPlatformError",
    "BrowserFetcher", "current_platform",
    "ResolutionOptions", "RevisionInfo", "DownloadState",
    "DownloadOrchestrator",
    "to_megabytes", "progress_fraction",
    "events",
    "setup_logging",
]

# ---- simple logging toggle for the package ----
import logging

from rich.console import Console
from rich.logging import RichHandler

def setup_logging(verbose: bool = False, console: Console = None) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=verbose, markup=False)],
    )
    # quiet down noisy deps
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
