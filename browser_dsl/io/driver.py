"""
Browser driver protocol (abstraction).

This Protocol defines the minimal browser control surface that the DSL
relies on. Everything in `core` (waiting, dialog interception, the
JavaScript interface and page objects) is built on three capabilities:

- execute_script(): run a script body against the current page
- find_elements() / is_present(): query the DOM with a selector
- goto(): navigate

Notes:
- `ctx` represents an execution context for a sequence of actions.
  In the Playwright implementation it is a `Page` created via `new_context()`.
- Scripts follow the WebDriver convention: `source` is a function *body*,
  positional arguments are available as `arguments[i]`, and the value of a
  `return` statement is marshalled back as a ScriptResult.
- Driver errors (script exceptions, closed pages, ...) are raised as-is.
"""

from __future__ import annotations

from typing import Any, Protocol, Union

# Element handles are driver-specific (Playwright ElementHandle), hence Any.
ElementHandle = Any

ScriptArg = Union[None, bool, int, float, str, ElementHandle, list["ScriptArg"]]
ScriptResult = Union[
    None,
    bool,
    int,
    float,
    str,
    ElementHandle,
    list["ScriptResult"],
    dict[str, "ScriptResult"],
]


class BrowserDriver(Protocol):
    # -------- lifecycle --------
    async def start(self) -> None: ...
    async def stop(self) -> None: ...
    async def new_context(self) -> Any: ...
    async def close_context(self, ctx: Any) -> None: ...

    # -------- navigation --------
    async def goto(self, ctx: Any, url: str, *, timeout_ms: int | None = None) -> None: ...
    async def current_url(self, ctx: Any) -> str: ...
    async def title(self, ctx: Any) -> str: ...

    # -------- script execution boundary --------
    async def execute_script(self, ctx: Any, source: str, *args: ScriptArg) -> ScriptResult: ...

    # -------- element query boundary --------
    async def find_elements(self, ctx: Any, selector: str) -> list[ElementHandle]: ...
    async def is_present(self, ctx: Any, selector: str) -> bool: ...

    # -------- basic interactions --------
    async def click(self, ctx: Any, selector: str, *, timeout_ms: int | None = None) -> None: ...
    async def type_text(
        self,
        ctx: Any,
        selector: str,
        text: str,
        *,
        timeout_ms: int | None = None,
        clear_first: bool = True,
    ) -> None: ...
    async def text_content(
        self, ctx: Any, selector: str, *, timeout_ms: int | None = None
    ) -> str | None: ...

    # -------- utilities --------
    async def screenshot(self, ctx: Any, path: str, *, full_page: bool = True) -> None: ...
