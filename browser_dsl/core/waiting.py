"""
轮询等待：按“次数预算”而不是墙钟时间重复评估条件。
- WaitSpec: timeout/interval 参数约束（Pydantic v2，frozen）
- poll(): 立即评估一次，之后每次 sleep(interval) 再评估，共 attempts 次
- WaitingSupport: 解析显式参数 / 预设 / 全局默认，供 Browser、Page 复用
"""
# @file purpose: Attempt-count based wait-polling.

from __future__ import annotations

import asyncio
import inspect
import logging
import math
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, PositiveFloat

from .errors import WaitTimeoutError
from .settings import Settings, WaitPreset, settings as default_settings

logger = logging.getLogger(__name__)

# A condition is a zero-arg callable; its result may be awaitable.
Condition = Callable[[], Union[Any, Awaitable[Any]]]
Sleep = Callable[[float], Awaitable[Any]]


class WaitSpec(BaseModel):
    """Timeout/interval pair for one wait invocation."""

    model_config = ConfigDict(frozen=True)

    timeout_seconds: PositiveFloat = 5.0
    interval_seconds: PositiveFloat = 0.5

    @property
    def attempts(self) -> int:
        """Number of re-evaluations after the immediate one."""
        return max(1, math.ceil(self.timeout_seconds / self.interval_seconds))


async def evaluate(condition: Condition) -> Any:
    value = condition()
    if inspect.isawaitable(value):
        value = await value
    return value


async def poll(condition: Condition, spec: WaitSpec, *, sleep: Sleep = asyncio.sleep) -> Any:
    """
    Evaluate `condition` until it returns a truthy value (Python truthiness).

    The condition is evaluated once immediately and then once after each of
    `spec.attempts` sleeps, so it runs at most `attempts + 1` times. Elapsed
    time is never measured. Exceptions raised by the condition propagate on
    the spot. Returns the truthy value; raises WaitTimeoutError otherwise.
    """
    evaluations = 1
    value = await evaluate(condition)
    if value:
        return value
    for _ in range(spec.attempts):
        await sleep(spec.interval_seconds)
        evaluations += 1
        value = await evaluate(condition)
        if value:
            logger.debug("wait satisfied after %d evaluations", evaluations)
            return value
    raise WaitTimeoutError(evaluations, spec.timeout_seconds, spec.interval_seconds)


class WaitingSupport:
    """
    Resolves wait parameters and runs poll().

    Precedence: explicit timeout/interval > named preset > configured defaults.
    A preset only fills in what was not passed explicitly.
    """

    def __init__(
        self,
        *,
        config: Optional[Settings] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        cfg = config or default_settings
        self.default_timeout: float = cfg.wait_timeout_seconds
        self.default_interval: float = cfg.wait_interval_seconds
        self.presets: Mapping[str, WaitPreset] = dict(cfg.wait_presets)
        self._sleep = sleep

    def resolve(
        self,
        *,
        timeout: Optional[float] = None,
        interval: Optional[float] = None,
        preset: Optional[str] = None,
    ) -> WaitSpec:
        base_timeout, base_interval = self.default_timeout, self.default_interval
        if preset is not None:
            try:
                p = self.presets[preset]
            except KeyError as e:
                raise ValueError(f"unknown wait preset: {preset!r}") from e
            base_timeout, base_interval = p.timeout, p.interval
        return WaitSpec(
            timeout_seconds=base_timeout if timeout is None else timeout,
            interval_seconds=base_interval if interval is None else interval,
        )

    async def wait_for(
        self,
        condition: Condition,
        *,
        timeout: Optional[float] = None,
        interval: Optional[float] = None,
        preset: Optional[str] = None,
    ) -> Any:
        spec = self.resolve(timeout=timeout, interval=interval, preset=preset)
        return await poll(condition, spec, sleep=self._sleep)


async def wait_for(
    condition: Condition,
    *,
    timeout: Optional[float] = None,
    interval: Optional[float] = None,
    preset: Optional[str] = None,
) -> Any:
    """Module-level shortcut using the global settings."""
    return await WaitingSupport().wait_for(
        condition, timeout=timeout, interval=interval, preset=preset
    )
