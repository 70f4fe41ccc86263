#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
UI layer for chromium_resolver

- Shared rich Console (logging goes through it too, see core.setup_logging)
- Download progress bar: "Downloading Chromium - 12.3 Mb / 130.5 Mb"
- Result table for the CLI
"""

from __future__ import annotations
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich import box
from rich.progress import BarColumn, Progress, TaskID, TextColumn, TimeRemainingColumn

from .core.models import RevisionInfo
from .core.utils import progress_fraction, to_megabytes

console = Console(stderr=True)

# ────────────────────────── Progress ──────────────────────────
class ProgressReporter:
    """
    Lazily starts a rich Progress on the first ``show()``.

    While the bar is live, rich prints log records (RichHandler on the same
    console) above it, so the bar and line output never interleave.
    """

    def __init__(self, console: Console = console, enabled: bool = True):
        self.console = console
        self.enabled = enabled
        self._progress: Optional[Progress] = None
        self._task: Optional[TaskID] = None

    @staticmethod
    def describe(downloaded: int, total: int) -> str:
        return f"Downloading Chromium - {to_megabytes(downloaded)} / {to_megabytes(total)}"

    def show(self, downloaded: int, total: int) -> None:
        if not self.enabled:
            return
        if self._progress is None:
            self._progress = Progress(
                TextColumn("{task.description}", justify="left"),
                BarColumn(),
                TextColumn("{task.percentage:>5.1f}%"),
                TimeRemainingColumn(),
                console=self.console,
                transient=False,
            )
            self._progress.start()
            self._task = self._progress.add_task("Downloading Chromium", total=1.0)
        self._progress.update(
            self._task,
            completed=progress_fraction(downloaded, total),
            description=self.describe(downloaded, total),
        )

    def close(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
            self._task = None

# ────────────────────────── Results ──────────────────────────
def render_result(info: RevisionInfo) -> Table:
    tbl = Table(title="Chromium", box=box.SIMPLE_HEAVY, show_header=False)
    tbl.add_column("Field", style="bold cyan", no_wrap=True)
    tbl.add_column("Value")
    tbl.add_row("Revision", info.revision)
    tbl.add_row("Folder", str(info.folder_path))
    tbl.add_row("Executable", str(info.executable_path))
    tbl.add_row("Local", "[green]yes[/]" if info.local else "[red]no[/]")
    tbl.add_row("Launchable", "[green]yes[/]" if info.launchable else "[red]no[/]")
    tbl.add_row("Chromium version", info.chromium_version or "?")
    tbl.add_row("Playwright version", info.playwright_version or "?")
    return tbl
