"""chromium_resolver: find, download and validate a Chromium snapshot for automation.

Detects an already downloaded revision in known folders, otherwise downloads
it from a list of snapshot hosts (with failover and bounded retries), checks
that it launches through Playwright and returns a RevisionInfo.
"""
__version__ = "1.0.0"

from .core import events  # noqa: F401
from .core.config import get_options  # noqa: F401
from .core.models import ResolutionOptions, RevisionInfo  # noqa: F401
from .resolver import Resolver, resolve, resolve_sync, get_stats  # noqa: F401
