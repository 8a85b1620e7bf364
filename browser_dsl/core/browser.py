"""
Browser facade: binds a driver + ctx and exposes the DSL in one place.

    browser = Browser(driver, ctx, base_url="http://localhost:8000")
    page = await browser.to(LoginPage)
    await browser.wait_for(lambda: page.present("banner"), preset="quick")
    result = await browser.with_alert(lambda: driver.click(ctx, "#delete"))
"""
# @file purpose: Browser facade over waiting, dialogs, js and page objects.

from __future__ import annotations

import logging
from typing import Any, Optional, TypeVar
from urllib.parse import urlencode, urljoin

from ..io.driver import BrowserDriver
from .dialogs import Actions, DialogInterceptor, DialogResult
from .errors import UnexpectedPageError
from .js import JavascriptInterface
from .page import Page
from .settings import Settings, settings as default_settings
from .waiting import Condition, WaitingSupport

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=Page)


class Browser:
    def __init__(
        self,
        driver: BrowserDriver,
        ctx: Any,
        *,
        base_url: Optional[str] = None,
        config: Optional[Settings] = None,
        waiting: Optional[WaitingSupport] = None,
    ) -> None:
        cfg = config or default_settings
        self.driver = driver
        self.ctx = ctx
        self.base_url = base_url if base_url is not None else cfg.base_url
        self.waiting = waiting or WaitingSupport(config=cfg)
        self.dialogs = DialogInterceptor(driver, ctx)
        self.js = JavascriptInterface(driver, ctx)
        self.page: Optional[Page] = None

    # ---------------- navigation ----------------

    def resolve_url(self, url: str = "", **params: Any) -> str:
        full = urljoin(self.base_url, url) if self.base_url else url
        if params:
            sep = "&" if "?" in full else "?"
            full = f"{full}{sep}{urlencode(params, doseq=True)}"
        return full

    async def go(self, url: str = "", **params: Any) -> None:
        target = self.resolve_url(url, **params)
        logger.info("go %s", target)
        await self.driver.goto(self.ctx, target)

    async def to(self, page_cls: type[P], *args: Any, **params: Any) -> P:
        """Navigate to page_cls.page_url(*args) and make it the current page."""
        await self.go(page_cls.page_url(*args), **params)
        return self.set_page(page_cls)

    async def at(self, page_cls: type[P]) -> P:
        """Make page_cls current after its at() check passes."""
        page = page_cls(self)
        if not await page.verify_at():
            raise UnexpectedPageError(str(page), await self.current_url())
        self.page = page
        return page

    def set_page(self, page_cls: type[P]) -> P:
        page = page_cls(self)
        self.page = page
        return page

    async def current_url(self) -> str:
        return await self.driver.current_url(self.ctx)

    async def title(self) -> str:
        return await self.driver.title(self.ctx)

    # ---------------- waiting ----------------

    async def wait_for(
        self,
        condition: Condition,
        *,
        timeout: Optional[float] = None,
        interval: Optional[float] = None,
        preset: Optional[str] = None,
    ) -> Any:
        return await self.waiting.wait_for(
            condition, timeout=timeout, interval=interval, preset=preset
        )

    # ---------------- dialogs ----------------

    async def with_alert(self, actions: Actions) -> DialogResult:
        return await self.dialogs.with_alert(actions)

    async def with_no_alert(self, actions: Actions) -> None:
        await self.dialogs.with_no_alert(actions)

    async def with_confirm(self, actions: Actions, ok: bool = True) -> DialogResult:
        return await self.dialogs.with_confirm(actions, ok=ok)

    async def with_no_confirm(self, actions: Actions, ok: bool = True) -> None:
        await self.dialogs.with_no_confirm(actions, ok=ok)
