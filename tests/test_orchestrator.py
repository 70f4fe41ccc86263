"""Host failover loop: availability check, inactivity timer, retry cycles."""
import asyncio
import warnings
from pathlib import Path

import pytest

from chromium_resolver import events, get_options
from chromium_resolver.core import orchestrator
from chromium_resolver.core.errors import DownloadExhaustedError
from chromium_resolver.core.orchestrator import DownloadOrchestrator

A = "https://a.invalid"
B = "https://b.example"


def orchestrate(tmp_path, script, **kw):
    base = dict(hosts=[A, B], retry=3, advance_delay=0, launch=False)
    base.update(kw)
    orch = DownloadOrchestrator(get_options(**base), "1000", tmp_path / "cache", fetcher_factory=script.factory)
    return orch, asyncio.run(orch.run())


def test_slow_but_progressing_download_is_not_aborted(tmp_path, script):
    script.available = {A}
    script.behaviour[A] = ("slow", 0.4)

    orch, info = orchestrate(tmp_path, script, inactivity_timeout=0.1)

    assert script.downloads == [A]
    assert orch.state.received is True
    assert orch.state.timer is None
    assert info.executable_path.is_file()


def test_stalled_host_advances_to_next(tmp_path, script):
    failures = []
    events.on("download_failed", lambda host, reason: failures.append((host, reason)))
    script.available = {A, B}
    script.behaviour[A] = "stall"

    orch, info = orchestrate(tmp_path, script, inactivity_timeout=0.1)

    assert script.downloads == [A, B]
    assert failures == [(A, "stalled")]
    assert info.executable_path.is_file()


def test_transfer_error_advances_to_next(tmp_path, script):
    failures = []
    events.on("download_failed", lambda host, reason: failures.append((host, reason)))
    script.available = {A, B}
    script.behaviour[A] = "error"

    orch, info = orchestrate(tmp_path, script)

    assert script.downloads == [A, B]
    assert failures == [(A, "connection reset")]


def test_unavailable_host_is_not_downloaded(tmp_path, script):
    script.available = {B}

    orch, info = orchestrate(tmp_path, script)

    assert script.checks == [A, B]
    assert script.downloads == [B]
    assert orch.state.index == 1
    assert orch.state.retry == 0


def test_retry_cycles_then_exhausted(tmp_path, script):
    retries = []
    events.on("retry", retries.append)

    with pytest.raises(DownloadExhaustedError) as exc:
        orchestrate(tmp_path, script, retry=3)

    assert exc.value.retries == 3
    assert retries == [1, 2]
    assert len(script.checks) == 6


def test_success_on_a_later_cycle(tmp_path, script):
    script.available = {B}
    script.behaviour[B] = "error"
    seen = []

    def flip(retry):
        seen.append(retry)
        script.behaviour[B] = "ok"

    events.on("retry", flip)

    orch, info = orchestrate(tmp_path, script)

    assert seen == [1]
    assert script.downloads == [B, B]
    assert orch.state.retry == 1


def test_empty_host_list_is_exhausted(tmp_path, script):
    with pytest.raises(DownloadExhaustedError):
        orchestrate(tmp_path, script, hosts=[], retry=2)
    assert script.checks == []


def test_progress_reaches_reporter(tmp_path, script):
    shown = []

    class Reporter:
        def show(self, downloaded, total):
            shown.append((downloaded, total))

    script.available = {A}
    orch = DownloadOrchestrator(
        get_options(hosts=[A], advance_delay=0), "1000", tmp_path / "cache",
        reporter=Reporter(), fetcher_factory=script.factory,
    )
    asyncio.run(orch.run())

    assert shown == [(100, 100)]


def test_module_source_compiles_without_warnings():
    source = Path(orchestrator.__file__).read_text(encoding="utf-8")
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        compile(source, orchestrator.__file__, "exec")
