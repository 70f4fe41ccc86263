import pytest

from chromium_resolver.core import events


def test_emit_in_order():
    seen = []
    events.on("retry", lambda n: seen.append(("a", n)))
    events.on("retry", lambda n: seen.append(("b", n)))
    events.emit("retry", 1)
    assert seen == [("a", 1), ("b", 1)]


def test_broken_listener_does_not_propagate(caplog):
    seen = []

    def boom(*args):
        raise RuntimeError("listener bug")

    events.on("downloaded", boom)
    events.on("downloaded", seen.append)
    events.emit("downloaded", "info")

    assert seen == ["info"]
    assert "listener bug" in caplog.text


def test_off_and_unknown():
    func = events.on("start", lambda *a: None)
    events.off("start", func)
    events.off("start", func)
    assert events.listeners("start") == []
    with pytest.raises(ValueError):
        events.on("onDownload", func)
