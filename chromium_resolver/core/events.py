# chromium_resolver/core/events.py
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

# ───────────────── Registry ─────────────────
# name -> listeners, called in registration order
_LISTENERS: Dict[str, List[Callable[..., Any]]] = {}

EVENTS = (
    "start",              # (options)
    "detected",           # (revision_info)  local hit
    "download",           # (host, index)    attempt at a host begins
    "start_downloading",  # (host,)          first byte arrived
    "progress",           # (downloaded, total)
    "downloaded",         # (revision_info)
    "download_failed",    # (host, reason)
    "retry",              # (retry,)
    "resolve",            # (revision_info)
)


def on(name: str, func: Callable[..., Any]) -> Callable[..., Any]:
    """Register a listener; returns ``func``."""
    if name not in EVENTS:
        raise ValueError(f"Unknown event: {name}")
    _LISTENERS.setdefault(name, []).append(func)
    return func


def off(name: str, func: Callable[..., Any]) -> None:
    try:
        _LISTENERS.get(name, []).remove(func)
    except ValueError:
        pass


def clear() -> None:
    _LISTENERS.clear()


def listeners(name: str) -> List[Callable[..., Any]]:
    """Return a copy so callers can't mutate the registry."""
    return list(_LISTENERS.get(name, []))


def emit(name: str, *args: Any) -> None:
    for func in listeners(name):
        try:
            func(*args)
        except Exception:
            # a broken listener must not break resolution
            logger.exception("Listener %r for %r failed", func, name)


__all__ = ["EVENTS", "on", "off", "clear", "listeners", "emit"]
