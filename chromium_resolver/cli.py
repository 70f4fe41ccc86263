# chromium_resolver/cli.py
from __future__ import annotations
import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from .core import setup_logging
from .resolver import get_stats, resolve_sync
from .ui import console, render_result

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(prog="chromium-resolver", description="Resolve / download a Chromium snapshot")
    ap.add_argument("--revision", help="Chromium snapshot revision (default: bundled manifest)")
    ap.add_argument("--detection-path", action="append", default=None,
                    help="Extra folder to search for downloaded revisions (repeatable, or comma separated)")
    ap.add_argument("--folder-name", help="Cache folder name (default .chromium-browser-snapshots)")
    ap.add_argument("--download-path", help="Cache folder location (default ~/<folder-name>)")
    ap.add_argument("--host", action="append", dest="hosts", default=None,
                    help="Snapshot host base URL, tried in order (repeatable)")
    ap.add_argument("--retry", type=int, help="Full host-list cycles before giving up (default 3)")
    ap.add_argument("--no-launch", action="store_true", help="Skip the headless launch check")
    ap.add_argument("--stats", action="store_true", help="Only report what is already available; never download")
    ap.add_argument("--json", action="store_true", help="Print the result as JSON on stdout")
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return ap.parse_args(argv)

def options_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    opts: Dict[str, Any] = {
        "revision": args.revision,
        "detection_path": ",".join(args.detection_path) if args.detection_path else None,
        "folder_name": args.folder_name,
        "download_path": args.download_path,
        "hosts": args.hosts,
        "retry": args.retry,
    }
    if args.no_launch:
        opts["launch"] = False
    return opts

def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    setup_logging(verbose=args.verbose, console=console)
    opts = options_from_args(args)

    if args.stats:
        info = get_stats(opts)
        if info is None:
            console.print("[yellow]No local Chromium found.[/]")
            sys.exit(2)
    else:
        info = resolve_sync(opts)

    if args.json:
        print(json.dumps(info.to_dict(), indent=2))
    else:
        console.print(render_result(info))
