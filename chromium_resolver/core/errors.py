# chromium_resolver/core/errors.py
from __future__ import annotations


class ResolverError(Exception):
    """Base class for chromium_resolver errors."""


class UnsupportedPlatformError(ResolverError):
    pass


class DownloadStalledError(ResolverError):
    """No bytes arrived before the inactivity timeout (or the attempt was abandoned)."""


class DownloadExhaustedError(ResolverError):
    """Every host failed on every retry cycle."""

    def __init__(self, revision: str, retries: int):
        self.revision = revision
        self.retries = retries
        super().__init__(f"Failed to download Chromium r{revision} after retry {retries} times.")
