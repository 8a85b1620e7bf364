"""
结构化的动作返回值，用于向上层（Runner/CLI）汇报执行结果。
"""
# @file purpose: Define ActionResult model for action outputs.

from __future__ import annotations

from typing import Any, Optional
from pydantic import BaseModel, Field


class ActionResult(BaseModel):
    """
    统一的动作返回值：
    - ok: 是否成功
    - extracted_content: 动作得到的值（extract_text 的文本、with_alert 捕获的消息、wait_for_js 的结果）
    - meta: 其它诊断信息（selector/URL/轮询参数等），便于日志与回放
    """

    ok: bool = True
    extracted_content: Optional[Any] = None
    meta: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def success(cls, **meta: Any) -> "ActionResult":
        return cls(ok=True, meta=meta)

    @classmethod
    def extracted(cls, content: Any, **meta: Any) -> "ActionResult":
        return cls(ok=True, extracted_content=content, meta=meta)
