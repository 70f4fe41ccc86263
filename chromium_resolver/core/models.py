from __future__ import annotations
import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

@dataclass(frozen=True)
class ResolutionOptions:
    revision: str = ""
    detection_path: Tuple[str, ...] = ()
    folder_name: str = ".chromium-browser-snapshots"
    download_path: str = ""
    hosts: Tuple[str, ...] = ("https://storage.googleapis.com", "https://cdn.npmmirror.com/binaries")
    retry: int = 3
    inactivity_timeout: float = 30.0
    advance_delay: float = 1.0
    launch: bool = True
    stats_name: str = ".chromium-resolver-stats.json"

@dataclass
class RevisionInfo:
    revision: str
    folder_path: Path
    executable_path: Path
    url: str = ""
    local: bool = False
    # Filled in by launch validation / emission:
    launchable: bool = False
    chromium_version: str = ""
    playwright_version: str = ""
    playwright: Any = field(default=None, repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "revision": self.revision,
            "folder_path": str(self.folder_path),
            "executable_path": str(self.executable_path),
            "url": self.url,
            "local": self.local,
            "launchable": self.launchable,
            "chromium_version": self.chromium_version,
            "playwright_version": self.playwright_version,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "RevisionInfo":
        return cls(
            revision=str(d.get("revision", "")),
            folder_path=Path(d.get("folder_path", "")),
            executable_path=Path(d.get("executable_path", "")),
            url=d.get("url") or "",
            local=bool(d.get("local", False)),
            launchable=bool(d.get("launchable", False)),
            chromium_version=d.get("chromium_version") or "",
            playwright_version=d.get("playwright_version") or "",
        )

@dataclass
class DownloadState:
    index: int = 0
    retry: int = 0
    timer: Optional[asyncio.TimerHandle] = None
    received: bool = False
