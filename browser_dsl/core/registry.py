"""
动作注册表与元数据:
- 以 name 作为键注册动作函数
- 绑定 params_model (Pydantic v2) 用于参数校验
- validate_spec() 在执行前做强校验，execute_spec() 校验后直接执行
"""
# @file purpose: Provide action registry, metadata, and spec validation.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Type

from pydantic import BaseModel, TypeAdapter

from .action import ActionSpec

# 动作函数的标准签名（异步）: fn(driver, ctx, params) -> ActionResult
ActionFn = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class ActionMeta:
    """动作元信息：名称 + 绑定的入参模型（可选）"""

    name: str
    params_model: Optional[Type[BaseModel]] = None


_REGISTRY: Dict[str, ActionFn] = {}
_META: Dict[str, ActionMeta] = {}


def action(
    name: str, *, params_model: Optional[Type[BaseModel]] = None
) -> Callable[[ActionFn], ActionFn]:
    """
    装饰器：注册动作函数及其参数模型。
        @action("with_alert", params_model=DialogParams)
        async def with_alert(driver, ctx, params): ...
    """

    def deco(fn: ActionFn) -> ActionFn:
        register(name, fn, params_model=params_model)
        return fn

    return deco


def register(name: str, fn: ActionFn, *, params_model: Optional[Type[BaseModel]] = None) -> None:
    """非装饰器形式注册，便于动态装配或测试。"""
    _REGISTRY[name] = fn
    _META[name] = ActionMeta(name=name, params_model=params_model)


def get_action(name: str) -> ActionFn:
    try:
        return _REGISTRY[name]
    except KeyError as e:
        raise KeyError(f"Action not registered: {name}") from e


def get_meta(name: str) -> ActionMeta:
    try:
        return _META[name]
    except KeyError as e:
        raise KeyError(f"Action not registered (no metadata): {name}") from e


def list_actions() -> Dict[str, ActionMeta]:
    return dict(_META)


def validate_spec(spec: ActionSpec) -> Tuple[ActionMeta, Optional[BaseModel]]:
    """
    1) 动作是否已注册（否则 KeyError）
    2) 若绑定了 params_model，则用其校验 args（失败抛 ValidationError）
    3) 嵌套动作（args.actions）递归校验
    """
    meta = get_meta(spec.name)
    if meta.params_model is None:
        return meta, None

    params_obj = TypeAdapter(meta.params_model).validate_python(spec.args)
    for nested in getattr(params_obj, "actions", None) or []:
        validate_spec(nested)
    return meta, params_obj


async def execute_spec(driver: Any, ctx: Any, spec: ActionSpec) -> Any:
    """Validate then run one spec; errors propagate to the caller."""
    _meta, params = validate_spec(spec)
    fn = get_action(spec.name)
    return await fn(driver, ctx, params)
