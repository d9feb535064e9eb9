"""
Page Snapshotter - full-page screenshot + self-contained HTML using Playwright.

The DOM is read after JavaScript has rendered and lazy content has been
scrolled into view; normalization (script stripping, URL and CSS inlining)
happens in Python on the serialized document.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from swipe_ai.errors import SnapshotError
from swipe_ai.services.browser import BrowserHandle
from swipe_ai.utils.html_snapshot import CapturedStylesheet, normalize_snapshot

logger = logging.getLogger(__name__)

# Runs in the page: serialized DOM, base URI and the rules of every readable sheet
COLLECT_DOCUMENT_SCRIPT = """() => {
    const stylesheets = [];
    let unreadable = 0;

    for (const sheet of Array.from(document.styleSheets)) {
        if (sheet.disabled) continue;
        let rules;
        try {
            rules = sheet.cssRules;
        } catch (e) {
            // Cross-origin stylesheet, rules not readable
            unreadable += 1;
            continue;
        }
        if (!rules) continue;
        stylesheets.push({
            href: sheet.href,
            media: sheet.media ? sheet.media.mediaText : '',
            cssText: Array.from(rules).map((r) => r.cssText).join('\\n'),
        });
    }

    return {
        html: document.documentElement.outerHTML,
        baseUrl: document.baseURI,
        stylesheets: stylesheets,
        unreadableStylesheets: unreadable,
    };
}"""


@dataclass
class PageSnapshot:
    """A live page captured at one point in time"""
    url: str
    title: str = ""
    html: str = ""
    screenshot: bytes = b""
    screenshot_mime_type: str = "image/jpeg"
    stylesheet_count: int = 0
    skipped_stylesheets: int = 0


@dataclass
class SnapshotOptions:
    """Capture tuning, defaults mirror Settings"""
    viewport_width: int = 1440
    viewport_height: int = 900
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )
    page_load_timeout_ms: int = 25000
    network_idle_timeout_ms: int = 10000
    settle_delay: float = 3.0
    scroll_pause: float = 0.2
    post_scroll_delay: float = 1.5
    screenshot_quality: int = 70
    extra_headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings) -> "SnapshotOptions":
        return cls(
            viewport_width=settings.VIEWPORT_WIDTH,
            viewport_height=settings.VIEWPORT_HEIGHT,
            user_agent=settings.USER_AGENT,
            page_load_timeout_ms=settings.PAGE_LOAD_TIMEOUT_MS,
            network_idle_timeout_ms=settings.NETWORK_IDLE_TIMEOUT_MS,
            settle_delay=settings.SETTLE_DELAY_SECONDS,
            scroll_pause=settings.SCROLL_PAUSE_SECONDS,
            post_scroll_delay=settings.POST_SCROLL_DELAY_SECONDS,
            screenshot_quality=settings.SCREENSHOT_QUALITY,
        )


class PageSnapshotter:
    """
    Captures a URL into a PageSnapshot.

    The browser process comes from an injected BrowserHandle; every call gets
    its own browser context, closed before returning.
    """

    def __init__(self, browser: BrowserHandle, options: SnapshotOptions = None):
        self.browser = browser
        self.options = options or SnapshotOptions()

    async def capture(self, url: str) -> PageSnapshot:
        """
        Capture screenshot and normalized HTML for a URL.

        Raises:
            SnapshotError: the page could not be loaded or read
        """
        opts = self.options
        logger.info(f"Capturing {url}")

        context = None

        try:
            browser = await self.browser.acquire()
            context = await browser.new_context(
                user_agent=opts.user_agent,
                viewport={"width": opts.viewport_width, "height": opts.viewport_height},
                ignore_https_errors=True,
                extra_http_headers=opts.extra_headers or None,
            )
            page = await context.new_page()
            await self._navigate(page, url)
            await self._scroll_through(page)

            screenshot = await page.screenshot(
                full_page=True,
                type="jpeg",
                quality=opts.screenshot_quality,
            )
            logger.info(f"Screenshot captured ({len(screenshot)} bytes)")

            document = await page.evaluate(COLLECT_DOCUMENT_SCRIPT)
            title = await page.title()
        except SnapshotError:
            raise
        except Exception as e:
            logger.error(f"Capture failed for {url}: {e}")
            raise SnapshotError(f"Failed to capture {url}: {e}") from e
        finally:
            if context is not None:
                await self._close_context(context)

        return self._build_snapshot(url, title, screenshot, document)

    async def _close_context(self, context):
        try:
            await context.close()
        except Exception as e:
            logger.debug(f"Ignoring error while closing browser context: {e}")

    async def _navigate(self, page, url: str):
        opts = self.options
        try:
            await page.goto(url, wait_until="load", timeout=opts.page_load_timeout_ms)
        except Exception as e:
            raise SnapshotError(f"Failed to load {url}: {e}") from e

        try:
            await page.wait_for_load_state("networkidle", timeout=opts.network_idle_timeout_ms)
        except Exception as e:
            # Long-polling pages never go idle
            logger.info(f"Network did not go idle for {url}, continuing: {e}")

        await asyncio.sleep(opts.settle_delay)

    async def _scroll_through(self, page):
        """Scroll one viewport at a time to trigger lazy loading, then back to top."""
        opts = self.options
        page_height = await page.evaluate("document.body ? document.body.scrollHeight : 0") or 0
        step = await page.evaluate("window.innerHeight") or opts.viewport_height

        for y in range(0, int(page_height), max(int(step), 1)):
            await page.evaluate(f"window.scrollTo(0, {y})")
            await asyncio.sleep(opts.scroll_pause)

        await page.evaluate("window.scrollTo(0, 0)")
        await asyncio.sleep(opts.post_scroll_delay)

    def _build_snapshot(
        self,
        url: str,
        title: str,
        screenshot: bytes,
        document: Dict[str, Any],
    ) -> PageSnapshot:
        base_url = document.get("baseUrl") or url
        stylesheets: List[CapturedStylesheet] = [
            CapturedStylesheet(
                css_text=sheet.get("cssText") or "",
                href=sheet.get("href"),
                media=sheet.get("media") or "",
            )
            for sheet in document.get("stylesheets", [])
        ]
        skipped = int(document.get("unreadableStylesheets") or 0)
        if skipped:
            logger.info(f"{skipped} cross-origin stylesheet(s) could not be read and were omitted")

        html = normalize_snapshot(document.get("html", ""), base_url, stylesheets)
        logger.info(f"Snapshot ready: {len(html)} chars, {len(stylesheets)} stylesheets inlined")

        return PageSnapshot(
            url=url,
            title=title,
            html=html,
            screenshot=screenshot,
            stylesheet_count=len(stylesheets),
            skipped_stylesheets=skipped,
        )
