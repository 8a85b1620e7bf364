"""
Action implementations bound to BrowserDriver:
- open_url / click / type / extract_text
- wait_for / wait_for_js (attempt-count polling)
- with_alert / with_no_alert / with_confirm / with_no_confirm (nested actions)

Each action:
  1) Expects a BrowserDriver + ctx + validated params (Pydantic v2)
  2) Returns ActionResult
  3) Wraps driver failures into ActionExecutionError (retryable by Runner);
     WaitTimeoutError and dialog assertion errors pass through untouched
"""

# @file purpose: Implement and register actions.
from __future__ import annotations

from typing import Any, Awaitable, Callable

from browser_dsl.core.action import ActionSpec
from browser_dsl.core.browser import Browser
from browser_dsl.core.dialogs import Captured, DialogResult
from browser_dsl.core.errors import (
    ActionExecutionError,
    BrowserDslError,
    DialogAssertionError,
)
from browser_dsl.core.registry import action, execute_spec
from browser_dsl.core.result import ActionResult
from browser_dsl.io.driver import BrowserDriver  # Protocol

from .params import (
    ClickParams,
    ConfirmParams,
    DialogParams,
    ExtractTextParams,
    NoDialogParams,
    OpenUrlParams,
    TypeParams,
    WaitForJsParams,
    WaitForParams,
    WaitParams,
)


@action("open_url", params_model=OpenUrlParams)
async def open_url(driver: BrowserDriver, ctx: Any, params: OpenUrlParams) -> ActionResult:
    browser = Browser(driver, ctx)
    url = browser.resolve_url(params.url, **params.params)
    try:
        await driver.goto(ctx, url)
        return ActionResult.success(step="open_url", url=url)
    except Exception as e:  # noqa: BLE001
        raise ActionExecutionError(
            action="open_url",
            message="failed to open url",
            url=url,
            cause=e,
        ) from e


@action("click", params_model=ClickParams)
async def click(driver: BrowserDriver, ctx: Any, params: ClickParams) -> ActionResult:
    try:
        await driver.click(ctx, params.selector)
        return ActionResult.success(step="click", selector=params.selector)
    except Exception as e:  # noqa: BLE001
        raise ActionExecutionError(
            action="click",
            message="failed to click element",
            selector=params.selector,
            cause=e,
        ) from e


@action("type", params_model=TypeParams)
async def type_action(driver: BrowserDriver, ctx: Any, params: TypeParams) -> ActionResult:
    """
    Named type_action to avoid shadowing Python's built-in `type`.
    Registered name is still "type".
    """
    try:
        await driver.type_text(ctx, params.selector, params.text)
        return ActionResult.success(step="type", selector=params.selector, length=len(params.text))
    except Exception as e:  # noqa: BLE001
        raise ActionExecutionError(
            action="type",
            message="failed to input text",
            selector=params.selector,
            cause=e,
        ) from e


@action("extract_text", params_model=ExtractTextParams)
async def extract_text(driver: BrowserDriver, ctx: Any, params: ExtractTextParams) -> ActionResult:
    try:
        txt = await driver.text_content(ctx, params.selector)
        return ActionResult.extracted(
            txt, step="extract_text", selector=params.selector, empty=txt is None
        )
    except Exception as e:  # noqa: BLE001
        raise ActionExecutionError(
            action="extract_text",
            message="failed to extract text",
            selector=params.selector,
            cause=e,
        ) from e


# ------------------------------------------------------------------------------
# 轮询等待
# ------------------------------------------------------------------------------


async def _poll(
    name: str,
    driver: BrowserDriver,
    ctx: Any,
    params: WaitParams,
    condition: Callable[[], Awaitable[Any]],
    **meta: Any,
) -> Any:
    browser = Browser(driver, ctx)
    try:
        value = await browser.wait_for(
            condition,
            timeout=params.timeout_seconds,
            interval=params.interval_seconds,
            preset=params.preset,
        )
    except BrowserDslError:
        raise
    except Exception as e:  # noqa: BLE001
        raise ActionExecutionError(
            action=name,
            message="condition raised while polling",
            details=meta,
            cause=e,
        ) from e
    return value


@action("wait_for", params_model=WaitForParams)
async def wait_for(driver: BrowserDriver, ctx: Any, params: WaitForParams) -> ActionResult:
    await _poll(
        "wait_for",
        driver,
        ctx,
        params,
        lambda: driver.is_present(ctx, params.selector),
        selector=params.selector,
    )
    return ActionResult.success(step="wait_for", selector=params.selector)


@action("wait_for_js", params_model=WaitForJsParams)
async def wait_for_js(driver: BrowserDriver, ctx: Any, params: WaitForJsParams) -> ActionResult:
    script = f"return ({params.expression});"
    value = await _poll(
        "wait_for_js",
        driver,
        ctx,
        params,
        lambda: driver.execute_script(ctx, script),
        expression=params.expression,
    )
    return ActionResult.extracted(value, step="wait_for_js", expression=params.expression)


# ------------------------------------------------------------------------------
# alert / confirm 拦截：args.actions 为嵌套的 ActionSpec[]
# ------------------------------------------------------------------------------


def _nested(driver: BrowserDriver, ctx: Any, specs: list[ActionSpec]) -> Callable[[], Awaitable[None]]:
    async def run() -> None:
        for spec in specs:
            await execute_spec(driver, ctx, spec)

    return run


def _dialog_result(name: str, kind: str, result: DialogResult, expected: str | None) -> ActionResult:
    if isinstance(result, Captured):
        if expected is not None and result.message != expected:
            raise DialogAssertionError(
                kind, f"expected {kind}() message {expected!r} but got {result.message!r}"
            )
        return ActionResult.extracted(result.message, step=name, navigated=False)
    return ActionResult.extracted(result.value, step=name, navigated=True)


async def _intercept(name: str, interception: Awaitable[Any]) -> Any:
    # nested action errors and dialog assertions are already BrowserDslError
    try:
        return await interception
    except BrowserDslError:
        raise
    except Exception as e:  # noqa: BLE001
        raise ActionExecutionError(
            action=name,
            message="dialog interception failed",
            details={"cause": repr(e)},
            cause=e,
        ) from e


@action("with_alert", params_model=DialogParams)
async def with_alert(driver: BrowserDriver, ctx: Any, params: DialogParams) -> ActionResult:
    result = await _intercept(
        "with_alert", Browser(driver, ctx).with_alert(_nested(driver, ctx, params.actions))
    )
    return _dialog_result("with_alert", "alert", result, params.expected)


@action("with_no_alert", params_model=NoDialogParams)
async def with_no_alert(driver: BrowserDriver, ctx: Any, params: NoDialogParams) -> ActionResult:
    await _intercept(
        "with_no_alert", Browser(driver, ctx).with_no_alert(_nested(driver, ctx, params.actions))
    )
    return ActionResult.success(step="with_no_alert")


@action("with_confirm", params_model=ConfirmParams)
async def with_confirm(driver: BrowserDriver, ctx: Any, params: ConfirmParams) -> ActionResult:
    result = await _intercept(
        "with_confirm",
        Browser(driver, ctx).with_confirm(_nested(driver, ctx, params.actions), ok=params.ok),
    )
    return _dialog_result("with_confirm", "confirm", result, params.expected)


@action("with_no_confirm", params_model=NoDialogParams)
async def with_no_confirm(driver: BrowserDriver, ctx: Any, params: NoDialogParams) -> ActionResult:
    await _intercept(
        "with_no_confirm",
        Browser(driver, ctx).with_no_confirm(_nested(driver, ctx, params.actions)),
    )
    return ActionResult.success(step="with_no_confirm")
