"""
Shared headless browser owned by the application lifespan.

One Chromium process serves every capture in this process; each capture
opens its own BrowserContext so cookies, storage and viewport never leak
between runs. The handle relaunches the browser when it finds it
disconnected.
"""
import asyncio
import logging
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]


class BrowserHandle:
    """
    Lifecycle wrapper around a Playwright Chromium instance.

    acquire()    -> connected Browser (launching or relaunching as needed)
    is_healthy() -> True when a launched browser is still connected
    dispose()    -> close the browser and stop Playwright
    """

    def __init__(self, headless: bool = True, args: Optional[List[str]] = None):
        self.headless = headless
        self.args = args if args is not None else list(DEFAULT_ARGS)
        self._playwright = None
        self._browser = None
        self._launching: Optional[asyncio.Task] = None

    def is_healthy(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def acquire(self):
        """Return a connected browser, launching one on first use or after a crash."""
        if self.is_healthy():
            return self._browser

        # Concurrent callers share one launch instead of racing
        if self._launching is None or self._launching.done():
            self._launching = asyncio.create_task(self._launch())
        return await asyncio.shield(self._launching)

    async def _launch(self):
        from playwright.async_api import async_playwright

        if self._browser is not None:
            logger.warning("Browser disconnected, relaunching")
            await self._close_browser()

        if self._playwright is None:
            self._playwright = await async_playwright().start()

        logger.info(f"Launching Chromium (headless={self.headless})")
        self._browser = await self._playwright.chromium.launch(
            headless=self.headless,
            args=self.args,
        )
        return self._browser

    async def _close_browser(self):
        browser, self._browser = self._browser, None
        if browser is None:
            return
        try:
            await browser.close()
        except Exception as e:
            logger.debug(f"Ignoring error while closing stale browser: {e}")

    async def dispose(self):
        """Clean up browser resources."""
        await self._close_browser()
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
        logger.info("Browser disposed")
