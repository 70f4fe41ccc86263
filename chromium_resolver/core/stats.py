# chromium_resolver/core/stats.py
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Optional

from .models import RevisionInfo

logger = logging.getLogger(__name__)

def write_stats(path: Path, info: RevisionInfo) -> None:
    """Best-effort; a read-only cache folder just means no stats file."""
    tmp = path.with_suffix(".tmp")
    try:
        tmp.write_text(json.dumps(info.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
        tmp.replace(path)
    except OSError as e:
        logger.warning("Could not write stats cache %s: %s", path, e)

def read_stats(path: Path, revision: str) -> Optional[RevisionInfo]:
    """Cached RevisionInfo for ``revision`` if its executable is still there."""
    if not path.exists():
        return None
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable stats cache %s: %s", path, e)
        return None
    if not isinstance(raw, dict) or str(raw.get("revision", "")) != revision:
        return None
    info = RevisionInfo.from_dict(raw)
    if not info.executable_path.is_file():
        logger.debug("Stats cache points at a missing executable: %s", info.executable_path)
        return None
    info.local = True
    return info
