"""
动作脚本的数据契约：JSON 脚本中的一步 = ActionSpec(name + args)。
dialog 类动作（with_alert 等）在 args.actions 中嵌套 ActionSpec[]。
"""
# @file purpose: Define action script data contracts.

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, TypeAdapter


class ActionSpec(BaseModel):
    name: str = Field(..., description="Registered action name.")
    args: dict[str, Any] = Field(
        default_factory=dict, description="Validated parameters for the action."
    )


SPEC_LIST = TypeAdapter(list[ActionSpec])


def parse_specs(data: Any) -> list[ActionSpec]:
    """Structure-check a decoded JSON array; raises pydantic ValidationError."""
    return SPEC_LIST.validate_python(data)
