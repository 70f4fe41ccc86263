# chromium_resolver/core/download.py
from __future__ import annotations
from pathlib import Path
from typing import Callable, Optional
import logging
import threading

from .errors import DownloadStalledError
from .http import SESSION

logger = logging.getLogger(__name__)

ProgressCB = Callable[[int, int], None]  # (downloaded_bytes, total_bytes)

def download_with_resume(
    url: str,
    out_path: Path,
    on_progress: Optional[ProgressCB] = None,
    cancel: Optional[threading.Event] = None,
    timeout: float = 30,
    chunk_size: int = 128 * 1024,
) -> None:
    """
    Blocking downloader, meant to run in a worker thread.
    - Writes to <file>.part and renames at the end
    - Resumes an existing .part with a Range request
    - Calls on_progress(downloaded, total) per chunk (total may be 0)
    - Raises DownloadStalledError as soon as ``cancel`` is set
    """
    tmp = out_path.with_suffix(out_path.suffix + ".part")
    resume = tmp.stat().st_size if tmp.exists() else 0
    headers = {"Range": f"bytes={resume}-"} if resume > 0 else {}

    logger.debug("Starting download %s -> %s (resume=%d)", url, out_path, resume)

    with SESSION.get(url, stream=True, headers=headers, timeout=(10, timeout)) as r:
        if r.status_code == 416:
            # stale .part larger than the file; drop it so the next attempt starts over
            tmp.unlink(missing_ok=True)
        r.raise_for_status()
        if cancel is not None and cancel.is_set():
            raise DownloadStalledError(f"Download abandoned: {url}")
        total = int(r.headers.get("Content-Length", "0"))
        if r.status_code == 206:
            total = resume + total if total else 0
        else:
            # server ignored the Range header; start over
            resume = 0

        mode = "ab" if resume > 0 else "wb"
        downloaded = resume
        with open(tmp, mode) as f:
            for chunk in r.iter_content(chunk_size=chunk_size):
                if cancel is not None and cancel.is_set():
                    raise DownloadStalledError(f"Download abandoned: {url}")
                if not chunk:
                    continue
                f.write(chunk)
                downloaded += len(chunk)
                if on_progress:
                    on_progress(downloaded, total)

    tmp.replace(out_path)
    logger.debug("Download finished: %s (%d bytes)", out_path, out_path.stat().st_size)
