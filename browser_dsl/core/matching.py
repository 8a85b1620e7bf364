"""
文本匹配器：用于 Content(text=...) 过滤元素，也可直接对字符串断言。
- 普通字符串按字面匹配，re.Pattern 按正则匹配
- 元素文本在匹配前去掉首尾空白

Example:

    contains("Sign")("Sign in")          -> True
    not_starts_with("Err")("OK")         -> True
    matches(re.compile(r"\\d+ items"))   -> exact regex match
"""
# @file purpose: Text matchers shared by page content and callers.

from __future__ import annotations

import re
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict

Kind = Literal["equals", "contains", "starts_with", "ends_with", "contains_word"]
TextLike = Union[str, "re.Pattern[str]"]

_TEMPLATES: dict[str, str] = {
    "equals": r"\A(?:{})\Z",
    "contains": r"(?:{})",
    "starts_with": r"\A(?:{})",
    "ends_with": r"(?:{})\Z",
    "contains_word": r"(?:\A|\s)(?:{})(?=\s|\Z)",
}


class TextMatcher(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Kind
    value: str
    regex: bool = False
    flags: int = 0
    negate: bool = False

    @classmethod
    def of(cls, kind: Kind, value: TextLike, *, negate: bool = False) -> "TextMatcher":
        if isinstance(value, re.Pattern):
            return cls(kind=kind, value=value.pattern, regex=True, flags=value.flags, negate=negate)
        return cls(kind=kind, value=value, negate=negate)

    def compile(self) -> "re.Pattern[str]":
        source = self.value if self.regex else re.escape(self.value)
        return re.compile(_TEMPLATES[self.kind].format(source), self.flags)

    def matches(self, text: str | None) -> bool:
        found = self.compile().search(text or "") is not None
        return found != self.negate

    __call__ = matches

    def __str__(self) -> str:
        prefix = "not " if self.negate else ""
        shown = f"/{self.value}/" if self.regex else repr(self.value)
        return f"{prefix}{self.kind} {shown}"


def equals(value: TextLike) -> TextMatcher:
    return TextMatcher.of("equals", value)


def matches(pattern: TextLike) -> TextMatcher:
    """Whole-text regex match; a plain string is compiled as a regex."""
    if isinstance(pattern, str):
        pattern = re.compile(pattern)
    return TextMatcher.of("equals", pattern)


def contains(value: TextLike) -> TextMatcher:
    return TextMatcher.of("contains", value)


def not_contains(value: TextLike) -> TextMatcher:
    return TextMatcher.of("contains", value, negate=True)


def starts_with(value: TextLike) -> TextMatcher:
    return TextMatcher.of("starts_with", value)


def not_starts_with(value: TextLike) -> TextMatcher:
    return TextMatcher.of("starts_with", value, negate=True)


def ends_with(value: TextLike) -> TextMatcher:
    return TextMatcher.of("ends_with", value)


def not_ends_with(value: TextLike) -> TextMatcher:
    return TextMatcher.of("ends_with", value, negate=True)


def contains_word(value: TextLike) -> TextMatcher:
    """Match value as a whole whitespace-delimited word."""
    return TextMatcher.of("contains_word", value)


def not_contains_word(value: TextLike) -> TextMatcher:
    return TextMatcher.of("contains_word", value, negate=True)


def as_matcher(value: Union[TextMatcher, TextLike]) -> TextMatcher:
    """Plain strings and patterns mean an exact match of the whole text."""
    if isinstance(value, TextMatcher):
        return value
    return equals(value)
