"""Playwright browser session: the single page an audit drives."""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType
from typing import Any, Awaitable, Callable, TypeVar

from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    async_playwright,
)

from axefix.errors import BrowserInteractionError, BrowserLaunchError
from axefix.schemas.config import Viewport

logger = logging.getLogger(__name__)

T = TypeVar("T")

NAVIGATION_TIMEOUT_MS = 30_000


class BrowserSession:
    """Owns one headless Chromium page for the lifetime of an audit.

    Every interaction goes through an ``asyncio.Lock`` so concurrent callers
    cannot interleave key presses and script evaluations on the shared page.

    Usage::

        async with BrowserSession(viewport=Viewport(width=1280, height=800)) as session:
            await session.navigate("https://example.com")
            title = await session.evaluate("() => document.title")
    """

    def __init__(self, *, viewport: Viewport | None = None, headless: bool = True) -> None:
        self._viewport = viewport or Viewport()
        self._headless = headless
        self._pw: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> "BrowserSession":
        await self.launch()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def launch(self) -> None:
        """Start Playwright, launch Chromium and open the audit page."""
        try:
            self._pw = await async_playwright().start()
            self._browser = await self._pw.chromium.launch(headless=self._headless)
            self._context = await self._browser.new_context(
                viewport={"width": self._viewport.width, "height": self._viewport.height},
            )
            self._page = await self._context.new_page()
        except Exception as exc:
            await self.close()
            raise BrowserLaunchError(cause=exc) from exc
        logger.info("Browser launched (%dx%d)", self._viewport.width, self._viewport.height)

    async def close(self) -> None:
        """Release the page, browser and driver. Safe to call more than once."""
        if self._browser is None and self._pw is None:
            return
        try:
            if self._browser is not None:
                await self._browser.close()
        except PlaywrightError as exc:
            logger.warning("Error while closing browser: %s", exc)
        finally:
            self._browser = None
            self._context = None
            self._page = None
            if self._pw is not None:
                await self._pw.stop()
                self._pw = None
        logger.info("Browser closed")

    async def _guarded(self, action: str, fn: Callable[[Page], Awaitable[T]]) -> T:
        if self._page is None:
            raise BrowserInteractionError(f"{action}: browser session is not open")
        async with self._lock:
            try:
                return await fn(self._page)
            except PlaywrightError as exc:
                raise BrowserInteractionError(f"{action} failed: {exc}") from exc

    async def navigate(self, url: str, *, timeout_ms: int = NAVIGATION_TIMEOUT_MS) -> None:
        logger.debug("Navigating to %s", url)
        await self._guarded(
            f"navigate to {url}",
            lambda page: page.goto(url, wait_until="load", timeout=timeout_ms),
        )

    async def wait_for(self, selector: str, *, timeout_ms: int = NAVIGATION_TIMEOUT_MS) -> None:
        await self._guarded(
            f"wait for {selector!r}",
            lambda page: page.wait_for_selector(selector, timeout=timeout_ms),
        )

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        return await self._guarded("evaluate script", lambda page: page.evaluate(script, arg))

    async def inject_script(self, *, path: str = "", url: str = "") -> None:
        """Add a ``<script>`` to the page and wait for it to load.

        A local ``path`` takes precedence over ``url``.
        """
        if path:
            await self._guarded(f"inject {path}", lambda page: page.add_script_tag(path=path))
        elif url:
            await self._guarded(f"inject {url}", lambda page: page.add_script_tag(url=url))
        else:
            raise ValueError("inject_script needs a path or a url")

    async def dispatch_key(self, key: str) -> None:
        await self._guarded(f"press {key}", lambda page: page.keyboard.press(key))


async def check_browser_available() -> bool:
    """Return True when Playwright can launch Chromium on this machine."""
    try:
        async with BrowserSession():
            return True
    except BrowserLaunchError as exc:
        logger.warning("Browser unavailable: %s", exc.cause)
        return False


def install_instructions() -> str:
    return """\
axefix browser setup
====================

1. Install the package:
   pip install axefix

2. Download Chromium for Playwright:
   playwright install chromium

3. On minimal Linux images (CI containers) add system libraries:
   playwright install-deps chromium

4. Optional, for offline and reproducible audits: vendor axe-core and point
   axe_script_path (or AXEFIX_AXE_SCRIPT_PATH) at the local axe.min.js.
"""
