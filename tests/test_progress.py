import io

from rich.console import Console

from chromium_resolver.core.utils import progress_fraction, to_megabytes
from chromium_resolver.ui import ProgressReporter


def test_fraction_with_unknown_total():
    assert progress_fraction(5_000, 0) == 0.0
    assert progress_fraction(0, 0) == 0.0


def test_fraction_bounds():
    assert progress_fraction(50, 200) == 0.25
    assert progress_fraction(300, 200) == 1.0


def test_to_megabytes():
    assert to_megabytes(0) == "0 Mb"
    assert to_megabytes(1024 * 1024) == "1 Mb"
    assert to_megabytes(int(2.25 * 1024 * 1024)) == "2.3 Mb"
    assert to_megabytes(int(130.44 * 1024 * 1024)) == "130.4 Mb"


def test_reporter_renders_and_closes():
    out = io.StringIO()
    reporter = ProgressReporter(console=Console(file=out, force_terminal=False, width=120))

    reporter.show(0, 0)
    reporter.show(1024 * 1024, 2 * 1024 * 1024)
    reporter.close()

    assert "Downloading Chromium - 1 Mb / 2 Mb" in out.getvalue()


def test_disabled_reporter_prints_nothing():
    out = io.StringIO()
    reporter = ProgressReporter(console=Console(file=out), enabled=False)
    reporter.show(1, 2)
    reporter.close()
    assert out.getvalue() == ""
