import time
from dataclasses import dataclass, field
from typing import Dict, List, Set

import pytest

from chromium_resolver.core import events
from chromium_resolver.core.errors import DownloadStalledError
from chromium_resolver.core.fetcher import BrowserFetcher


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Fake HOME, no user config, no env revision, empty event registry."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("CHROMIUM_RESOLVER_CONFIG", str(tmp_path / "cfg" / "config.json"))
    monkeypatch.delenv("CHROMIUM_RESOLVER_REVISION", raising=False)
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    events.clear()
    yield home
    events.clear()


def make_executable(info):
    info.executable_path.parent.mkdir(parents=True, exist_ok=True)
    info.executable_path.write_text("#!/bin/sh\n")
    return info


@dataclass
class FetchScript:
    """Drives FakeFetcher: which hosts answer the availability check and how downloads behave.

    behaviour per host: "ok", "error", "stall", or ("slow", seconds)
    """
    available: Set[str] = field(default_factory=set)
    behaviour: Dict[str, object] = field(default_factory=dict)
    checks: List[str] = field(default_factory=list)
    downloads: List[str] = field(default_factory=list)

    def factory(self, **kwargs):
        return FakeFetcher(script=self, **kwargs)


class FakeFetcher(BrowserFetcher):
    def __init__(self, path, host, script):
        super().__init__(path=path, host=host)
        self.script = script

    def can_download(self, revision):
        self.script.checks.append(self.host)
        return self.host in self.script.available

    def download(self, revision, on_progress=None, cancel=None, timeout=30):
        self.script.downloads.append(self.host)
        behaviour = self.script.behaviour.get(self.host, "ok")
        if behaviour == "error":
            raise RuntimeError("connection reset")
        if behaviour == "stall":
            while not cancel.is_set():
                time.sleep(0.01)
            raise DownloadStalledError("abandoned")
        if isinstance(behaviour, tuple) and behaviour[0] == "slow":
            on_progress(1, 100)
            time.sleep(behaviour[1])
            on_progress(100, 100)
        elif on_progress:
            on_progress(100, 100)
        make_executable(self.revision_info(revision))
        return self.revision_info(revision)


@pytest.fixture
def script():
    return FetchScript()
