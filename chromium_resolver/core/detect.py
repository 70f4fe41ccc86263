# chromium_resolver/core/detect.py
from __future__ import annotations
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .fetcher import BrowserFetcher
from .models import RevisionInfo

logger = logging.getLogger(__name__)

MAX_LEVEL = 5

def build_detection_list(
    user_folder: Path,
    detection_path: Iterable[str],
    folder_name: str,
    cwd: Optional[Path] = None,
    max_level: int = MAX_LEVEL,
) -> List[Path]:
    """
    Candidate folders in lookup order:
      1) explicit detection paths (as given)
      2) the user cache folder
      3) <dir>/<folder_name> for cwd and its ancestors, nearest first
    """
    out: List[Path] = [Path(p).expanduser().resolve() for p in detection_path]
    out.append(Path(user_folder))

    current: Optional[Path] = Path(cwd or Path.cwd()).resolve()
    level = 0
    while current is not None and level < max_level:
        out.append(current / folder_name)
        parent = current.parent
        current = None if parent == current else parent
        level += 1
    return out

def inspect_folder(folder: Path, revision: str) -> RevisionInfo:
    return BrowserFetcher(path=folder).revision_info(revision)

def detect(
    candidates: Iterable[Path],
    revision: str,
    user_folder: Path,
) -> Tuple[Optional[RevisionInfo], Optional[RevisionInfo]]:
    """
    Returns ``(match, user_info)``: the first local hit (or None) and the
    revision info computed for the user cache folder, when it was reached.
    """
    user_info: Optional[RevisionInfo] = None
    for folder in candidates:
        info = inspect_folder(folder, revision)
        if folder == user_folder:
            user_info = info
        logger.debug("Checked %s -> %s", folder, "hit" if info.local else "miss")
        if info.local:
            logger.info("Detected chromium revision %s is already downloaded: %s", revision, folder)
            return info, user_info
    return None, user_info
