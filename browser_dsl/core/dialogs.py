"""
alert()/confirm() 拦截：在页面中注入桩函数，避免原生对话框阻塞自动化会话。

Lifecycle (three script executions, each visible in logs at DEBUG):
  1) install  - save window[kind], replace it with a capturing stub, stamp a token
  2) verify   - read the capture slot; a missing slot or foreign token means
                the page navigated away during the actions
  3) restore  - put the original function back and clear the slot

If the page navigated, "dialog fired then navigated" and "navigated without
a dialog" cannot be told apart. with_alert/with_confirm then return
NavigatedAway and with_no_alert/with_no_confirm succeed.
prompt() is not intercepted.
"""
# @file purpose: Dialog interception via injected page scripts.

from __future__ import annotations

import inspect
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Literal, Optional, Union

from ..io.driver import BrowserDriver
from .errors import (
    ExpectedDialogNotRaisedError,
    NestedDialogInterceptionError,
    UnexpectedDialogRaisedError,
)

logger = logging.getLogger(__name__)

DialogKind = Literal["alert", "confirm"]
Actions = Callable[[], Union[Any, Awaitable[Any]]]

INSTALL_SCRIPT = """
var kind = arguments[0], ok = arguments[1], token = arguments[2];
if (window.__browserDslDialog) {
    return false;
}
var state = {kind: kind, token: token, fired: false, message: null, original: window[kind]};
window.__browserDslDialog = state;
window[kind] = function (message) {
    state.fired = true;
    state.message = message === undefined ? "" : String(message);
    return kind === "confirm" ? ok : undefined;
};
return true;
"""

VERIFY_SCRIPT = """
var slot = window.__browserDslDialog;
if (!slot || slot.token !== arguments[0]) {
    return null;
}
return [slot.fired, slot.message];
"""

RESTORE_SCRIPT = """
var slot = window.__browserDslDialog;
if (!slot || slot.token !== arguments[0]) {
    return false;
}
window[slot.kind] = slot.original;
delete window.__browserDslDialog;
return true;
"""


@dataclass(frozen=True)
class Captured:
    """A dialog fired with `message`."""

    message: str

    @property
    def value(self) -> str:
        return self.message


@dataclass(frozen=True)
class NavigatedAway:
    """The page changed during the actions; whether a dialog fired is unknown."""

    @property
    def value(self) -> bool:
        # legacy sentinel
        return True


DialogResult = Union[Captured, NavigatedAway]


@dataclass
class DialogSession:
    kind: DialogKind
    token: str
    ok: bool = True
    fired: bool = False
    message: Optional[str] = None
    navigated: bool = False


class DialogInterceptor:
    """Runs caller actions with window.alert / window.confirm stubbed out."""

    def __init__(self, driver: BrowserDriver, ctx: Any) -> None:
        self.driver = driver
        self.ctx = ctx

    # ---------------- public API ----------------

    async def with_alert(self, actions: Actions) -> DialogResult:
        session = await self.intercept("alert", actions)
        return self._expect_raised(session)

    async def with_no_alert(self, actions: Actions) -> None:
        session = await self.intercept("alert", actions)
        self._expect_not_raised(session)

    async def with_confirm(self, actions: Actions, ok: bool = True) -> DialogResult:
        session = await self.intercept("confirm", actions, ok=ok)
        return self._expect_raised(session)

    async def with_no_confirm(self, actions: Actions, ok: bool = True) -> None:
        session = await self.intercept("confirm", actions, ok=ok)
        self._expect_not_raised(session)

    # ---------------- protocol ----------------

    async def intercept(self, kind: DialogKind, actions: Actions, *, ok: bool = True) -> DialogSession:
        """Install, run `actions`, verify, restore. Returns the filled-in session."""
        session = DialogSession(kind=kind, token=uuid.uuid4().hex, ok=ok)
        await self.install(session)
        try:
            result = actions()
            if inspect.isawaitable(result):
                await result
        except Exception:
            await self.restore(session)
            raise
        await self.verify(session)
        if not session.navigated:
            await self.restore(session)
        return session

    async def install(self, session: DialogSession) -> None:
        installed = await self.driver.execute_script(
            self.ctx, INSTALL_SCRIPT, session.kind, session.ok, session.token
        )
        if not installed:
            raise NestedDialogInterceptionError(session.kind)
        logger.debug("%s() stub installed (token=%s)", session.kind, session.token)

    async def verify(self, session: DialogSession) -> None:
        captured = await self.driver.execute_script(self.ctx, VERIFY_SCRIPT, session.token)
        if captured is None:
            session.navigated = True
            logger.debug("page navigated during %s() interception", session.kind)
            return
        fired, message = captured
        session.fired = bool(fired)
        session.message = message

    async def restore(self, session: DialogSession) -> None:
        await self.driver.execute_script(self.ctx, RESTORE_SCRIPT, session.token)

    # ---------------- outcome checks ----------------

    @staticmethod
    def _expect_raised(session: DialogSession) -> DialogResult:
        if session.navigated:
            return NavigatedAway()
        if not session.fired:
            raise ExpectedDialogNotRaisedError(session.kind)
        return Captured(session.message or "")

    @staticmethod
    def _expect_not_raised(session: DialogSession) -> None:
        if session.fired:
            raise UnexpectedDialogRaisedError(session.kind, session.message)
