# chromium_resolver/core/launch.py
from __future__ import annotations
import logging
from importlib import metadata

from playwright.async_api import async_playwright

from .models import RevisionInfo

logger = logging.getLogger(__name__)

LAUNCH_ARGS = ["--no-sandbox"]  # root / container friendly

def playwright_version() -> str:
    try:
        return metadata.version("playwright")
    except metadata.PackageNotFoundError:
        return ""

async def validate_launch(info: RevisionInfo) -> RevisionInfo:
    """
    Start the executable headless, read its version, close it.
    Failures only flip ``launchable`` to False; nothing is raised.
    """
    info.launchable = False
    try:
        async with async_playwright() as pw:
            browser = await pw.chromium.launch(
                executable_path=str(info.executable_path),
                args=LAUNCH_ARGS,
                headless=True,
            )
            try:
                info.chromium_version = browser.version
            finally:
                await browser.close()
        info.launchable = True
    except Exception as e:
        logger.warning("Chromium is not launchable: %s", e)
        logger.debug("Launch error", exc_info=True)
    return info
