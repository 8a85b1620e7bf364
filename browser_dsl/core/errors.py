"""
定义项目级异常类型，统一错误语义与捕获边界。
- BrowserDslError: 所有自定义异常的基类
- ActionExecutionError: 动作执行期错误（元素缺失、脚本异常等），Runner 唯一会重试的错误
- WaitTimeoutError: 轮询次数耗尽仍未满足条件
- DialogAssertionError: 期望/意外的 alert、confirm 不匹配
- 页面对象相关: UnexpectedPageError / UnknownContentError / RequiredContentMissingError
"""
# @file purpose: Define error taxonomy for browser-dsl.

from typing import Any


class BrowserDslError(Exception):
    """Base class for all custom errors in browser-dsl."""


class ActionExecutionError(BrowserDslError):
    """
    Raised when an action fails to execute.
    动作执行期错误（元素缺失、脚本异常等）。
    统一封装上下文，便于 CLI/编排层打印一致的信息与诊断。
    """

    def __init__(
        self,
        action: str,
        message: str,
        *,
        selector: str | None = None,
        url: str | None = None,
        details: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.action: str = action
        self.selector: str | None = selector
        self.url: str | None = url
        self.details: dict[str, Any] = details or {}
        self.cause: BaseException | None = cause

    def __str__(self) -> str:
        parts = [f"[{self.action}] {super().__str__()}"]
        if self.selector:
            parts.append(f"selector={self.selector}")
        if self.url:
            parts.append(f"url={self.url}")
        if self.details:
            kv = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            parts.append(f"details={{ {kv} }}")
        return " | ".join(parts)


class WaitTimeoutError(BrowserDslError, TimeoutError):
    """Raised when a polled condition stays falsy for the whole attempt budget."""

    def __init__(self, attempts: int, timeout: float, interval: float) -> None:
        super().__init__(
            f"condition not satisfied after {attempts} evaluations "
            f"(timeout={timeout}s, interval={interval}s)"
        )
        self.attempts = attempts
        self.timeout = timeout
        self.interval = interval


class DialogAssertionError(BrowserDslError, AssertionError):
    """Observed dialog activity does not match what the caller expected."""

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class ExpectedDialogNotRaisedError(DialogAssertionError):
    def __init__(self, kind: str) -> None:
        super().__init__(kind, f"expected an {kind}() dialog but none was raised")


class UnexpectedDialogRaisedError(DialogAssertionError):
    def __init__(self, kind: str, dialog_message: str | None) -> None:
        super().__init__(
            kind, f"expected no {kind}() dialog but one was raised: {dialog_message!r}"
        )
        self.dialog_message = dialog_message


class NestedDialogInterceptionError(BrowserDslError):
    """Dialog interception is already active in this browser context."""

    def __init__(self, kind: str) -> None:
        super().__init__(
            f"cannot intercept {kind}(): another dialog interception is active on this page"
        )
        self.kind = kind


class UnexpectedPageError(BrowserDslError):
    """The `at` check of a page object failed."""

    def __init__(self, page: str, url: str | None = None) -> None:
        msg = f"not at page {page}"
        if url:
            msg += f" (current url: {url})"
        super().__init__(msg)
        self.page = page
        self.url = url


class UnknownContentError(BrowserDslError, KeyError):
    def __init__(self, page: str, name: str) -> None:
        super().__init__(f"page {page} declares no content named {name!r}")
        self.page = page
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])


class RequiredContentMissingError(BrowserDslError):
    def __init__(self, page: str, name: str, selector: str) -> None:
        super().__init__(f"required content {name!r} of page {page} not found: {selector}")
        self.page = page
        self.name = name
        self.selector = selector


class JQueryUnavailableError(BrowserDslError):
    """The current page does not expose a global jQuery function."""
