"""
页面对象：用显式的 content 注册表（名称 -> Content）描述页面元素。
- url: 页面路径（相对 Browser.base_url）
- at(): 判断当前页面是否就是本页面
- content: 静态声明，element(name) 时按需解析
- text: 可选的文本匹配器，只保留文本匹配的元素

Example:

    class LoginPage(Page):
        url = "login"
        content = {
            "username": Content(selector="#username"),
            "banner": Content(selector=".banner", required=False, wait="quick"),
            "error": Content(selector=".flash", text=Page.starts_with("Error")),
        }

        async def at(self) -> bool:
            return await self.title() == "Login"
"""
# @file purpose: Page objects with a static content registry.

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Annotated, Any, ClassVar, Optional, Union

from pydantic import BaseModel, PositiveFloat, StringConstraints, field_validator

from ..io.driver import ElementHandle
from . import matching
from .errors import RequiredContentMissingError, UnknownContentError, WaitTimeoutError
from .js import JavascriptInterface
from .matching import TextMatcher

if TYPE_CHECKING:
    from .browser import Browser

logger = logging.getLogger(__name__)

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

TEXT_SCRIPT = (
    "var el = arguments[0];\n"
    "var text = el.innerText === undefined ? el.textContent : el.innerText;\n"
    "return text || '';"
)


class Content(BaseModel):
    """
    One named piece of page content.
    - required: missing content raises instead of resolving to None / []
    - wait: False (no wait), True (default wait), a preset name, or a timeout in seconds
    - many: resolve to all matches instead of the first one
    - text: keep only elements whose text matches (plain str / re.Pattern = exact match)
    """

    selector: NonEmptyStr
    required: bool = True
    wait: Union[bool, NonEmptyStr, PositiveFloat] = False
    many: bool = False
    text: Optional[TextMatcher] = None

    @field_validator("text", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> Any:
        if v is None or isinstance(v, (TextMatcher, dict)):
            return v
        return matching.as_matcher(v)


class Page:
    url: ClassVar[str] = ""
    content: ClassVar[dict[str, Content]] = {}

    # text matchers, usable in content declarations and in at() checks
    equals = staticmethod(matching.equals)
    matches = staticmethod(matching.matches)
    contains = staticmethod(matching.contains)
    not_contains = staticmethod(matching.not_contains)
    starts_with = staticmethod(matching.starts_with)
    not_starts_with = staticmethod(matching.not_starts_with)
    ends_with = staticmethod(matching.ends_with)
    not_ends_with = staticmethod(matching.not_ends_with)
    contains_word = staticmethod(matching.contains_word)
    not_contains_word = staticmethod(matching.not_contains_word)

    def __init__(self, browser: "Browser") -> None:
        self.browser = browser

    def __str__(self) -> str:
        return type(self).__name__

    # ---------------- url ----------------

    @classmethod
    def convert_to_path(cls, *args: Any) -> str:
        return "/".join(str(a) for a in args)

    @classmethod
    def page_url(cls, *args: Any) -> str:
        path = cls.convert_to_path(*args)
        if not path:
            return cls.url
        return f"{cls.url}/{path}" if cls.url else path

    # ---------------- at checking ----------------

    async def at(self) -> bool:
        """Override to check that the browser is really at this page."""
        return True

    async def verify_at(self) -> bool:
        result = self.at()
        if inspect.isawaitable(result):
            result = await result
        return bool(result)

    # ---------------- content ----------------

    def content_spec(self, name: str) -> Content:
        try:
            return type(self).content[name]
        except KeyError as e:
            raise UnknownContentError(str(self), name) from e

    async def element(self, name: str) -> Union[ElementHandle, list[ElementHandle], None]:
        spec = self.content_spec(name)

        if spec.wait is not False:
            try:
                await self._wait_for(spec)
            except WaitTimeoutError:
                if spec.required:
                    raise
                logger.debug("optional content %r of %s did not appear", name, self)

        handles = await self._find(spec)
        if not handles:
            if spec.required:
                raise RequiredContentMissingError(str(self), name, spec.selector)
            return [] if spec.many else None
        return handles if spec.many else handles[0]

    async def present(self, name: str) -> bool:
        return await self._present(self.content_spec(name))

    async def text_of(self, handle: ElementHandle) -> str:
        """Rendered text of an element, stripped."""
        text = await self.browser.js.exec(TEXT_SCRIPT, handle)
        return (text or "").strip()

    async def _find(self, spec: Content) -> list[ElementHandle]:
        handles = await self.browser.driver.find_elements(self.browser.ctx, spec.selector)
        if spec.text is None:
            return handles
        return [h for h in handles if spec.text.matches(await self.text_of(h))]

    async def _present(self, spec: Content) -> bool:
        if spec.text is None:
            return await self.browser.driver.is_present(self.browser.ctx, spec.selector)
        return bool(await self._find(spec))

    async def _wait_for(self, spec: Content) -> None:
        kwargs: dict[str, Any] = {}
        if isinstance(spec.wait, str):
            kwargs["preset"] = spec.wait
        elif spec.wait is not True:
            kwargs["timeout"] = float(spec.wait)
        await self.browser.waiting.wait_for(lambda: self._present(spec), **kwargs)

    # ---------------- misc ----------------

    async def title(self) -> str:
        return await self.browser.driver.title(self.browser.ctx)

    @property
    def js(self) -> JavascriptInterface:
        return self.browser.js
