# chromium_resolver/core/config.py
from __future__ import annotations
import dataclasses
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .models import ResolutionOptions

logger = logging.getLogger(__name__)

# ---- defaults ----------------------------------------------------------------
DEFAULT_OPTIONS: Dict[str, Any] = {
    f.name: f.default for f in dataclasses.fields(ResolutionOptions)
}

MANIFEST = Path(__file__).resolve().parent.parent / "revisions.json"

# camelCase spellings accepted from config files and callers
_ALIASES = {
    "detectionPath": "detection_path",
    "folderName": "folder_name",
    "downloadPath": "download_path",
    "statsName": "stats_name",
    "inactivityTimeout": "inactivity_timeout",
    "advanceDelay": "advance_delay",
}

# ---- locations ---------------------------------------------------------------
# You can override location with env vars:
#   CHROMIUM_RESOLVER_CONFIG=<full path to config.json>
#   CHROMIUM_RESOLVER_DIR=<directory to place config.json>
def _windows_roaming_dir() -> Path:
    return Path(os.environ.get("APPDATA", Path.home() / "AppData/Roaming"))

def _xdg_config_home() -> Path:
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))

def config_dir() -> Path:
    env_dir = os.environ.get("CHROMIUM_RESOLVER_DIR")
    if env_dir:
        return Path(env_dir).expanduser().resolve()
    if os.name == "nt":
        return (_windows_roaming_dir() / "chromium_resolver").resolve()
    return (_xdg_config_home() / "chromium_resolver").resolve()

def config_path() -> Path:
    env_path = os.environ.get("CHROMIUM_RESOLVER_CONFIG")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return config_dir() / "config.json"

# ---- load --------------------------------------------------------------------
def load_cfg() -> Dict[str, Any]:
    """User overrides from config.json ({} when absent or unreadable)."""
    p = config_path()
    if not p.exists():
        return {}
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", p, e)
        # keep a .bad copy so the next run starts fresh
        try:
            p.rename(p.with_suffix(".bad.json"))
        except OSError:
            pass
        return {}
    if not isinstance(raw, dict):
        return {}
    return raw

# ---- option merging ----------------------------------------------------------
def normalize_detection_path(value: Any) -> tuple:
    if not value:
        return ()
    if isinstance(value, (list, tuple)):
        items = [str(v) for v in value]
    else:
        items = str(value).split(",")
    return tuple(s.strip() for s in items if s and s.strip())

def _normalize(raw: Mapping[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k, v in raw.items():
        key = _ALIASES.get(k, k)
        if key not in DEFAULT_OPTIONS:
            logger.debug("Unknown option ignored: %s", k)
            continue
        if v is None:
            continue
        out[key] = v
    if "detection_path" in out:
        out["detection_path"] = normalize_detection_path(out["detection_path"])
    if "hosts" in out:
        hosts = out["hosts"]
        if isinstance(hosts, str):
            hosts = hosts.split(",")
        out["hosts"] = tuple(h.strip().rstrip("/") for h in hosts if h and h.strip())
    if "retry" in out:
        out["retry"] = int(out["retry"])
    for key in ("inactivity_timeout", "advance_delay"):
        if key in out:
            out[key] = float(out[key])
    return out

def get_options(
    options: Union[ResolutionOptions, Mapping[str, Any], None] = None,
    **overrides: Any,
) -> ResolutionOptions:
    """Defaults <- user config file <- ``options`` <- keyword overrides."""
    if isinstance(options, ResolutionOptions):
        options = dataclasses.asdict(options)
    merged = dict(DEFAULT_OPTIONS)
    merged.update(_normalize(load_cfg()))
    merged.update(_normalize(options or {}))
    merged.update(_normalize(overrides))
    return ResolutionOptions(**merged)

# ---- revision manifest -------------------------------------------------------
def default_revision() -> str:
    env_rev = os.environ.get("CHROMIUM_RESOLVER_REVISION")
    if env_rev:
        return env_rev.strip()
    data = json.loads(MANIFEST.read_text(encoding="utf-8"))
    return str(data["chromium"])

def resolve_revision(opts: ResolutionOptions) -> str:
    return opts.revision or default_revision()

# ---- cache folder ------------------------------------------------------------
def user_folder_path(opts: ResolutionOptions) -> Path:
    if opts.download_path:
        return Path(opts.download_path).expanduser().resolve()
    return (Path.home() / opts.folder_name).resolve()

def ensure_user_folder(opts: ResolutionOptions) -> Path:
    """Create the cache folder world-writable; failures are logged, not raised."""
    folder = user_folder_path(opts)
    if folder.exists():
        return folder
    try:
        folder.mkdir(mode=0o777, parents=True)
        # umask usually strips group/other write
        folder.chmod(0o777)
    except OSError as e:
        logger.warning("User path is not writable: %s (%s)", folder, e)
    return folder

def stats_path(opts: ResolutionOptions, folder: Optional[Path] = None) -> Path:
    return (folder or user_folder_path(opts)) / opts.stats_name
