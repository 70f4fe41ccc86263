# chromium_resolver/core/utils.py
from __future__ import annotations
import logging
import math

import requests

from .http import SESSION

logger = logging.getLogger(__name__)

def to_megabytes(n: int) -> str:
    """Bytes -> ``"12.3 Mb"`` (one decimal, rounded half up, no trailing ``.0``)."""
    mb = (n or 0) / 1024 / 1024
    value = math.floor(mb * 10 + 0.5) / 10
    text = f"{value:.1f}".rstrip("0").rstrip(".")
    return f"{text} Mb"

def progress_fraction(downloaded: int, total: int) -> float:
    # total is 0 when the server sends no Content-Length
    if not total:
        return 0.0
    return min(max(downloaded / total, 0.0), 1.0)

def head_ok(url: str, timeout: float = 10) -> bool:
    try:
        r = SESSION.head(url, timeout=timeout, allow_redirects=True)
    except requests.RequestException as e:
        logger.debug("HEAD %s failed: %s", url, e)
        return False
    return r.status_code == 200
