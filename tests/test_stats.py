import json

from chromium_resolver import get_stats
from chromium_resolver.core.fetcher import BrowserFetcher
from chromium_resolver.core.models import RevisionInfo
from chromium_resolver.core.stats import read_stats, write_stats

from conftest import make_executable


def test_stats_round_trip_requires_executable(tmp_path):
    info = make_executable(BrowserFetcher(path=tmp_path).revision_info("10"))
    info.launchable = True
    info.chromium_version = "112"
    path = tmp_path / "stats.json"
    write_stats(path, info)

    back = read_stats(path, "10")
    assert back.executable_path == info.executable_path
    assert back.launchable and back.local
    assert read_stats(path, "11") is None

    info.executable_path.unlink()
    assert read_stats(path, "10") is None


def test_unreadable_stats_ignored(tmp_path):
    path = tmp_path / "stats.json"
    path.write_text("[]")
    assert read_stats(path, "1") is None
    path.write_text("{oops")
    assert read_stats(path, "1") is None


def test_get_stats_prefers_cache(isolated_env):
    folder = isolated_env / ".chromium-browser-snapshots"
    info = make_executable(BrowserFetcher(path=folder).revision_info("10"))
    info.chromium_version = "cached"
    write_stats(folder / ".chromium-resolver-stats.json", info)

    found = get_stats(revision="10")

    assert found.chromium_version == "cached"
    assert found.playwright is not None


def test_get_stats_falls_back_to_detection(tmp_path):
    other = tmp_path / "other"
    make_executable(BrowserFetcher(path=other).revision_info("10"))

    found = get_stats({"revision": "10", "detectionPath": [str(other)]})

    assert found is not None
    assert found.folder_path.parent == other.resolve()


def test_get_stats_nothing_found():
    assert get_stats(revision="10") is None


def test_revision_info_dict_is_json(tmp_path):
    info = RevisionInfo(revision="1", folder_path=tmp_path, executable_path=tmp_path / "c", playwright=object())
    assert json.loads(json.dumps(info.to_dict()))["revision"] == "1"
