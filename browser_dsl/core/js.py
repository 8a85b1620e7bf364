"""
JavaScript interface for the current page: read globals, call page functions,
run arbitrary script bodies and trigger jQuery methods.
"""
# @file purpose: Explicit accessors over the execute-script boundary.

from __future__ import annotations

from typing import Any

from ..io.driver import BrowserDriver, ScriptArg, ScriptResult
from .errors import JQueryUnavailableError

# Walks a dotted path from window; undefined segments yield null.
_GET_SCRIPT = """
var target = window;
var parts = arguments[0].split(".");
for (var i = 0; i < parts.length; i++) {
    if (target === null || target === undefined) {
        return null;
    }
    target = target[parts[i]];
}
return target === undefined ? null : target;
"""

_CALL_SCRIPT = """
var owner = window;
var parts = arguments[0].split(".");
var name = parts.pop();
for (var i = 0; i < parts.length; i++) {
    owner = owner[parts[i]];
}
var fn = owner[name];
if (typeof fn !== "function") {
    throw new TypeError(arguments[0] + " is not a function");
}
var result = fn.apply(owner, arguments[1]);
return result === undefined ? null : result;
"""

_JQUERY_SCRIPT = """
if (typeof window.jQuery !== "function") {
    return {available: false};
}
var $el = window.jQuery(arguments[0]);
var result = $el[arguments[1]].apply($el, arguments[2]);
if (result && result.jquery) {
    result = null;
}
return {available: true, result: result === undefined ? null : result};
"""


class JavascriptInterface:
    def __init__(self, driver: BrowserDriver, ctx: Any) -> None:
        self.driver = driver
        self.ctx = ctx

    async def exec(self, script: str, *args: ScriptArg) -> ScriptResult:
        """Run a script body; `arguments[i]` holds args[i]."""
        return await self.driver.execute_script(self.ctx, script, *args)

    async def get(self, name: str) -> ScriptResult:
        """Value of the global `name` (dotted paths allowed), None if undefined."""
        return await self.exec(_GET_SCRIPT, name)

    async def call(self, name: str, *args: ScriptArg) -> ScriptResult:
        """Call the global function `name` with args; `this` is its owner object."""
        return await self.exec(_CALL_SCRIPT, name, list(args))

    async def jquery(self, selector: str, method: str, *args: ScriptArg) -> ScriptResult:
        """
        Call jQuery(selector)[method](*args). Chainable results (jQuery
        objects) come back as None.
        """
        out = await self.exec(_JQUERY_SCRIPT, selector, method, list(args))
        if not out or not out.get("available"):
            raise JQueryUnavailableError("page does not define a global jQuery function")
        return out.get("result")
