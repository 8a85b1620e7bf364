"""
Playwright-based BrowserDriver implementation.

Conforms to io/driver.py's BrowserDriver Protocol:
- start() / stop()
- new_context() / close_context(ctx)
- goto(ctx, url) / current_url(ctx) / title(ctx)
- execute_script(ctx, source, *args) -> ScriptResult
- find_elements(ctx, selector) / is_present(ctx, selector)
- click(ctx, selector)
- type_text(ctx, selector, text)
- text_content(ctx, selector) -> Optional[str]
- screenshot(ctx, path)
"""

from __future__ import annotations

import logging
from typing import Optional, Dict, Any

from pathlib import Path

from playwright.async_api import (
    Browser,
    BrowserContext,
    ElementHandle,
    Page,
    TimeoutError as PwTimeoutError,
    async_playwright,
    Playwright,
)

from .driver import ScriptArg, ScriptResult

logger = logging.getLogger(__name__)

# WebDriver-style script body -> Playwright function expression.
_SCRIPT_WRAPPER = "(args) => (function () {\n%s\n}).apply(window, args)"


class PlaywrightDriver:
    """
    A concrete BrowserDriver based on Playwright Chromium.
    - `ctx` in this implementation is a Playwright `Page`.
    - Each `new_context()` creates an incognito BrowserContext + a new Page.
    - Native dialogs that are not intercepted by the DSL are auto-dismissed
      by Playwright (no `dialog` listener is registered).
    """

    def __init__(
        self,
        *,
        headless: bool = True,
        slow_mo_ms: int = 0,
        default_timeout_ms: int = 30_000,
    ) -> None:
        self.headless = headless
        self.slow_mo_ms = slow_mo_ms
        self.default_timeout_ms = default_timeout_ms

        self._pw: Optional[Playwright] = None  # playwright instance
        self._browser: Optional[Browser] = None
        self._page_to_context: Dict[Page, BrowserContext] = {}

    # ---------------- lifecycle ----------------

    async def start(self) -> None:
        """Launch Playwright and a Chromium browser once."""
        if self._browser is not None:
            return
        pw = await async_playwright().start()
        self._pw = pw
        self._browser = await pw.chromium.launch(headless=self.headless, slow_mo=self.slow_mo_ms)
        logger.debug("chromium launched (headless=%s)", self.headless)

    async def stop(self) -> None:
        """Close all contexts and stop Playwright."""
        try:
            for page, ctx in list(self._page_to_context.items()):
                try:
                    await page.close()
                except Exception:  # noqa: BLE001
                    logger.debug("page already closed", exc_info=True)
                try:
                    await ctx.close()
                except Exception:  # noqa: BLE001
                    logger.debug("context already closed", exc_info=True)
            self._page_to_context.clear()
            if self._browser is not None:
                await self._browser.close()
        finally:
            if self._pw is not None:
                await self._pw.stop()
            self._pw = None
            self._browser = None

    async def new_context(self) -> Page:
        """
        Create a fresh incognito context + page.
        Returns the Page object to be used as `ctx`.
        """
        self._ensure_started()
        assert self._browser is not None
        ctx = await self._browser.new_context()
        ctx.set_default_timeout(self.default_timeout_ms)
        page = await ctx.new_page()
        self._page_to_context[page] = ctx
        return page

    async def close_context(self, ctx: Any) -> None:
        """Close the page and its owning context."""
        page = self._as_page(ctx)
        context = self._page_to_context.pop(page, None)
        try:
            await page.close()
        finally:
            if context is not None:
                await context.close()

    # ---------------- navigation ----------------

    async def goto(self, ctx: Any, url: str, *, timeout_ms: Optional[int] = None) -> None:
        page = self._as_page(ctx)
        await page.goto(url, timeout=timeout_ms or self.default_timeout_ms, wait_until="load")

    async def current_url(self, ctx: Any) -> str:
        return self._as_page(ctx).url

    async def title(self, ctx: Any) -> str:
        return await self._as_page(ctx).title()

    # ---------------- script execution ----------------

    async def execute_script(self, ctx: Any, source: str, *args: ScriptArg) -> ScriptResult:
        """
        Run a script body in the page. A DOM element returned from the script
        comes back as an ElementHandle; everything else is JSON-marshalled.
        """
        page = self._as_page(ctx)
        handle = await page.evaluate_handle(_SCRIPT_WRAPPER % source, list(args))
        element = handle.as_element()
        if element is not None:
            return element
        try:
            return await handle.json_value()
        finally:
            await handle.dispose()

    # ---------------- element queries ----------------

    async def find_elements(self, ctx: Any, selector: str) -> list[ElementHandle]:
        page = self._as_page(ctx)
        return await page.query_selector_all(selector)

    async def is_present(self, ctx: Any, selector: str) -> bool:
        page = self._as_page(ctx)
        return await page.locator(selector).count() > 0

    # ---------------- interactions ----------------

    async def click(self, ctx: Any, selector: str, *, timeout_ms: Optional[int] = None) -> None:
        page = self._as_page(ctx)
        locator = page.locator(selector)
        to = timeout_ms or self.default_timeout_ms
        await locator.wait_for(state="visible", timeout=to)
        await locator.scroll_into_view_if_needed()
        await locator.click(timeout=to)

    async def type_text(
        self,
        ctx: Any,
        selector: str,
        text: str,
        *,
        timeout_ms: Optional[int] = None,
        clear_first: bool = True,
    ) -> None:
        """
        Prefer fill() for determinism; fall back to type() for tricky widgets.
        """
        page = self._as_page(ctx)
        locator = page.locator(selector)
        to = timeout_ms or self.default_timeout_ms
        await locator.wait_for(state="visible", timeout=to)
        await locator.scroll_into_view_if_needed()
        if clear_first:
            try:
                await locator.fill(text, timeout=to)
                return
            except PwTimeoutError:
                logger.debug("fill() timed out on %s, falling back to type()", selector)
        await locator.click(timeout=to)
        await locator.type(text, timeout=to)

    async def text_content(
        self, ctx: Any, selector: str, *, timeout_ms: Optional[int] = None
    ) -> Optional[str]:
        page = self._as_page(ctx)
        locator = page.locator(selector)
        to = timeout_ms or self.default_timeout_ms
        await locator.first.wait_for(state="visible", timeout=to)
        text = await locator.first.text_content(timeout=to)
        return text.strip() if text is not None else None

    async def screenshot(self, ctx: Any, path: str, *, full_page: bool = True) -> None:
        page = self._as_page(ctx)
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        await page.screenshot(path=path, full_page=full_page)

    # ---------------- internals ----------------

    def _ensure_started(self) -> None:
        if self._browser is None:
            raise RuntimeError("Browser not started. Call start() first.")

    @staticmethod
    def _as_page(ctx: Any) -> Page:
        if not isinstance(ctx, Page):
            raise TypeError("ctx must be a Playwright Page (returned by new_context()).")
        return ctx
