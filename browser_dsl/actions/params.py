"""
入参模型: 定义各动作的 Pydantic v2 参数约束。
Why: 在 JSON 脚本 → 执行器 的边界先做强校验, 拦截坏数据, 统一错误结构。
包含:
- OpenUrlParams { url: NonEmptyStr, params: dict }
- ClickParams / ExtractTextParams { selector }
- TypeParams { selector, text<=4000 }
- WaitForParams { selector, timeout_seconds?, interval_seconds?, preset? }
- WaitForJsParams { expression, timeout_seconds?, interval_seconds?, preset? }
- NoDialogParams { actions: ActionSpec[] } / DialogParams (+ expected?) / ConfirmParams (+ ok)
"""
# @file purpose: Define parameter schemas for actions using Pydantic v2.

from typing import Annotated, Any, Optional

from pydantic import BaseModel, Field, PositiveFloat, StringConstraints, field_validator

from browser_dsl.core.action import ActionSpec
from browser_dsl.core.settings import settings

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
TextLimited = Annotated[str, Field(max_length=4000)]


class OpenUrlParams(BaseModel):
    """Absolute url, or a path resolved against the configured base_url."""

    url: NonEmptyStr
    params: dict[str, Any] = Field(default_factory=dict)


class ClickParams(BaseModel):
    selector: NonEmptyStr


class TypeParams(BaseModel):
    selector: NonEmptyStr
    text: TextLimited


class ExtractTextParams(BaseModel):
    selector: NonEmptyStr


class WaitParams(BaseModel):
    """Unset values fall back to the preset, then to the configured defaults."""

    timeout_seconds: Optional[PositiveFloat] = None
    interval_seconds: Optional[PositiveFloat] = None
    preset: Optional[NonEmptyStr] = None

    @field_validator("preset")
    @classmethod
    def _known_preset(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in settings.wait_presets:
            raise ValueError(f"unknown wait preset: {v!r}")
        return v


class WaitForParams(WaitParams):
    """Poll until at least one element matches selector."""

    selector: NonEmptyStr


class WaitForJsParams(WaitParams):
    """Poll until the JavaScript expression is truthy."""

    expression: NonEmptyStr


class NoDialogParams(BaseModel):
    """Nested actions to run with alert()/confirm() intercepted."""

    actions: list[ActionSpec] = Field(..., min_length=1)


class DialogParams(NoDialogParams):
    expected: Optional[str] = Field(
        default=None, description="Exact dialog message to expect (with_alert/with_confirm)."
    )


class ConfirmParams(DialogParams):
    ok: bool = Field(default=True, description="Value the page's confirm() call returns.")
