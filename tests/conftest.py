from __future__ import annotations

import functools
import http.server
import socketserver
import threading
from collections.abc import Iterator
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from browser_dsl.core import dialogs


class FakePage:
    """In-memory stand-in for one page load."""

    def __init__(self, url: str, title: str = "") -> None:
        self.url = url
        self.title = title
        self.elements: dict[str, list[Any]] = {}
        # capture slot written by the install script
        self.dialog_slot: Optional[dict[str, Any]] = None
        self.native_dialogs: list[tuple[str, str]] = []

    def _raise(self, kind: str, message: str) -> Any:
        slot = self.dialog_slot
        if slot is not None and slot["kind"] == kind:
            slot["fired"] = True
            slot["message"] = message
            return slot["ok"] if kind == "confirm" else None
        self.native_dialogs.append((kind, message))
        return True if kind == "confirm" else None

    def alert(self, message: str = "") -> None:
        self._raise("alert", message)

    def confirm(self, message: str = "") -> Any:
        return self._raise("confirm", message)


class FakeDriver:
    """
    BrowserDriver double. The three dialog scripts are interpreted against
    FakePage.dialog_slot; any other script goes to `on_script`.
    """

    def __init__(self) -> None:
        self.page = FakePage("about:blank")
        self.history: list[str] = []
        self.scripts: list[tuple[str, tuple[Any, ...]]] = []
        self.on_script: Callable[[str, tuple[Any, ...]], Any] = lambda source, args: None
        self.clicks: list[str] = []
        self.on_click: dict[str, Callable[[], Any]] = {}
        self.present_calls = 0

    # navigation
    async def goto(self, ctx: Any, url: str, *, timeout_ms: int | None = None) -> None:
        self.navigate(url)

    def navigate(self, url: str) -> None:
        self.history.append(url)
        self.page = FakePage(url)

    async def current_url(self, ctx: Any) -> str:
        return self.page.url

    async def title(self, ctx: Any) -> str:
        return self.page.title

    # scripts
    async def execute_script(self, ctx: Any, source: str, *args: Any) -> Any:
        self.scripts.append((source, args))
        page = self.page
        if source == dialogs.INSTALL_SCRIPT:
            kind, ok, token = args
            if page.dialog_slot is not None:
                return False
            page.dialog_slot = {
                "kind": kind,
                "ok": ok,
                "token": token,
                "fired": False,
                "message": None,
            }
            return True
        if source == dialogs.VERIFY_SCRIPT:
            slot = page.dialog_slot
            if slot is None or slot["token"] != args[0]:
                return None
            return [slot["fired"], slot["message"]]
        if source == dialogs.RESTORE_SCRIPT:
            slot = page.dialog_slot
            if slot is None or slot["token"] != args[0]:
                return False
            page.dialog_slot = None
            return True
        return self.on_script(source, args)

    # queries
    async def find_elements(self, ctx: Any, selector: str) -> list[Any]:
        return list(self.page.elements.get(selector, []))

    async def is_present(self, ctx: Any, selector: str) -> bool:
        self.present_calls += 1
        return bool(self.page.elements.get(selector))

    # interactions
    async def click(self, ctx: Any, selector: str, *, timeout_ms: int | None = None) -> None:
        self.clicks.append(selector)
        if selector in self.on_click:
            self.on_click[selector]()

    async def screenshot(self, ctx: Any, path: str, *, full_page: bool = True) -> None:
        raise RuntimeError("no screenshots in tests")


@pytest.fixture
def fake_driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def ctx() -> object:
    return object()


@pytest.fixture(scope="session")
def web_server() -> Iterator[str]:
    root = Path(__file__).resolve().parent / "fixtures"
    Handler = functools.partial(http.server.SimpleHTTPRequestHandler, directory=str(root))
    httpd = socketserver.TCPServer(("127.0.0.1", 0), Handler)
    port = httpd.server_address[1]
    t = threading.Thread(target=httpd.serve_forever, daemon=True)
    t.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        httpd.shutdown()
        httpd.server_close()
