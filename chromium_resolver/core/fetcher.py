# chromium_resolver/core/fetcher.py
"""
Chromium snapshot fetcher.

Knows the snapshot bucket layout
(``<host>/chromium-browser-snapshots/<Platform>/<revision>/<archive>.zip``),
where a revision lives on disk (``<path>/<platform>-<revision>/``) and how to
check, download, extract, list and remove revisions. No retry policy here;
the orchestrator owns that.
"""
from __future__ import annotations
import logging
import os
import platform as _platform
import re
import shutil
import stat
import threading
import zipfile
from pathlib import Path
from typing import List, Optional, Tuple

from .download import ProgressCB, download_with_resume
from .errors import UnsupportedPlatformError
from .models import RevisionInfo
from .utils import head_ok

logger = logging.getLogger(__name__)

DEFAULT_HOST = "https://storage.googleapis.com"

DOWNLOAD_URLS = {
    "linux":   "{host}/chromium-browser-snapshots/Linux_x64/{revision}/{archive}.zip",
    "mac":     "{host}/chromium-browser-snapshots/Mac/{revision}/{archive}.zip",
    "mac_arm": "{host}/chromium-browser-snapshots/Mac_Arm/{revision}/{archive}.zip",
    "win32":   "{host}/chromium-browser-snapshots/Win/{revision}/{archive}.zip",
    "win64":   "{host}/chromium-browser-snapshots/Win_x64/{revision}/{archive}.zip",
}

def current_platform() -> str:
    system = _platform.system()
    machine = _platform.machine().lower()
    if system == "Darwin":
        return "mac_arm" if machine in ("arm64", "aarch64") else "mac"
    if system == "Linux":
        return "linux"
    if system == "Windows":
        return "win64" if machine.endswith("64") else "win32"
    raise UnsupportedPlatformError(f"Unsupported platform: {system} ({machine})")

def archive_name(platform: str, revision: str) -> str:
    if platform == "linux":
        return "chrome-linux"
    if platform in ("mac", "mac_arm"):
        return "chrome-mac"
    # Windows archive was renamed at r591479
    try:
        return "chrome-win" if int(revision) > 591479 else "chrome-win32"
    except ValueError:
        return "chrome-win"

def relative_executable(platform: str, revision: str) -> Path:
    archive = archive_name(platform, revision)
    if platform in ("mac", "mac_arm"):
        return Path(archive, "Chromium.app", "Contents", "MacOS", "Chromium")
    if platform == "linux":
        return Path(archive, "chrome")
    return Path(archive, "chrome.exe")


class BrowserFetcher:
    def __init__(self, path: Path, host: str = DEFAULT_HOST, platform: Optional[str] = None):
        self.path = Path(path)
        self.host = host.rstrip("/")
        self.platform = platform or current_platform()

    def __repr__(self) -> str:
        return f"BrowserFetcher(path={str(self.path)!r}, host={self.host!r}, platform={self.platform!r})"

    # ---- layout ----
    def download_url(self, revision: str) -> str:
        return DOWNLOAD_URLS[self.platform].format(
            host=self.host, revision=revision, archive=archive_name(self.platform, revision)
        )

    def folder_path(self, revision: str) -> Path:
        return self.path / f"{self.platform}-{revision}"

    def revision_info(self, revision: str) -> RevisionInfo:
        folder = self.folder_path(revision)
        exe = folder / relative_executable(self.platform, revision)
        return RevisionInfo(
            revision=revision,
            folder_path=folder,
            executable_path=exe,
            url=self.download_url(revision),
            local=folder.is_dir() and exe.is_file(),
        )

    # ---- network ----
    def can_download(self, revision: str) -> bool:
        return head_ok(self.download_url(revision))

    def download(
        self,
        revision: str,
        on_progress: Optional[ProgressCB] = None,
        cancel: Optional[threading.Event] = None,
        timeout: float = 30,
    ) -> RevisionInfo:
        """Download + extract ``revision`` (blocking). Returns its RevisionInfo."""
        existing = self.revision_info(revision)
        if existing.local:
            return existing
        folder = existing.folder_path
        self.path.mkdir(parents=True, exist_ok=True)

        zip_path = folder.with_name(folder.name + ".zip")
        download_with_resume(
            self.download_url(revision), zip_path,
            on_progress=on_progress, cancel=cancel, timeout=timeout,
        )
        staging = folder.with_name(folder.name + ".extracting")
        try:
            if staging.exists():
                shutil.rmtree(staging)
            extract_zip(zip_path, staging)
            if folder.exists():
                shutil.rmtree(folder)
            # only a fully extracted folder ever gets the final name
            staging.replace(folder)
        finally:
            if staging.exists():
                shutil.rmtree(staging, ignore_errors=True)
            zip_path.unlink(missing_ok=True)

        info = self.revision_info(revision)
        if info.executable_path.exists():
            mode = info.executable_path.stat().st_mode
            info.executable_path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return info

    # ---- local cache ----
    def local_revisions(self) -> List[str]:
        if not self.path.is_dir():
            return []
        pattern = re.compile(rf"^{re.escape(self.platform)}-(\S+)$")
        out = []
        for entry in self.path.iterdir():
            m = pattern.match(entry.name)
            if m and entry.is_dir() and not entry.name.endswith(".extracting"):
                out.append(m.group(1))
        return sorted(out)

    def remove(self, revision: str) -> None:
        folder = self.folder_path(revision)
        logger.debug("Removing %s", folder)
        shutil.rmtree(folder)

    def partial_entries(self) -> List[Tuple[str, Path]]:
        """(revision, path) of unfinished downloads: ``.zip``, ``.zip.part``, ``.extracting``."""
        if not self.path.is_dir():
            return []
        pattern = re.compile(rf"^{re.escape(self.platform)}-(\S+?)\.(zip|zip\.part|extracting)$")
        out = []
        for entry in self.path.iterdir():
            m = pattern.match(entry.name)
            if m:
                out.append((m.group(1), entry))
        return sorted(out)

    def remove_partial(self, path: Path) -> None:
        logger.debug("Removing %s", path)
        if path.is_dir():
            shutil.rmtree(path)
        else:
            path.unlink(missing_ok=True)


def extract_zip(zip_path: Path, out_path: Path) -> None:
    """Extract keeping unix permission bits and symlinks (mac app bundles use them)."""
    out_path.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(zip_path, "r") as zf:
        for info in zf.infolist():
            mode = info.external_attr >> 16
            if stat.S_ISLNK(mode):
                target = zf.read(info).decode("utf-8")
                link = out_path / info.filename
                link.parent.mkdir(parents=True, exist_ok=True)
                os.symlink(target, link)
                continue
            extracted = zf.extract(info, path=out_path)
            if mode and not info.is_dir():
                os.chmod(extracted, stat.S_IMODE(mode))
