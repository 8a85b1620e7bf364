# browser_dsl/core/controller/runner.py
"""
Minimal sequential runner for ActionSpec[].

Responsibilities:
- Validate each spec via registry
- Execute actions, retrying only ActionExecutionError (driver failures)
- Record WaitTimeoutError / dialog assertion errors as failed steps, no retry
- On failure: save screenshot artifact (if artifacts_dir is set)
- Return per-step outcomes for CLI rendering
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .. import registry
from ..action import ActionSpec
from ..errors import ActionExecutionError, BrowserDslError

logger = logging.getLogger(__name__)


@dataclass
class StepOutcome:
    """UI-friendly outcome used by the CLI."""

    index: int
    name: str
    ok: bool
    detail: str = "-"
    artifact_path: str | None = None
    extracted: Any = None
    meta: dict[str, Any] | None = None
    attempts: int = 1


def _detail_for(res: Any) -> str:
    text = getattr(res, "extracted_content", None)
    if text is not None:
        text = str(text)
        return (text[:120] + "…") if len(text) > 120 else text
    m = getattr(res, "meta", None)
    if isinstance(m, dict):
        if "url" in m:
            return str(m["url"])
        if "selector" in m:
            return f'selector="{m["selector"]}"'
    return "-"


class Runner:
    def __init__(
        self,
        *,
        retries: int = 0,
        backoff_seconds: float = 0.5,
        artifacts_dir: Path | None = None,
        stop_on_failure: bool = False,
    ) -> None:
        self.retries = max(0, retries)
        self.backoff_seconds = backoff_seconds
        self.artifacts_dir = artifacts_dir
        self.stop_on_failure = stop_on_failure
        if self.artifacts_dir:
            self.artifacts_dir.mkdir(parents=True, exist_ok=True)

    async def run(self, driver: Any, ctx: Any, specs: list[ActionSpec]) -> list[StepOutcome]:
        outcomes: list[StepOutcome] = []

        for i, spec in enumerate(specs, start=1):
            outcome = await self._run_step(driver, ctx, i, spec)
            outcomes.append(outcome)
            if not outcome.ok and self.stop_on_failure:
                logger.info("stopping after failed step %d (%s)", i, spec.name)
                break

        return outcomes

    async def _run_step(self, driver: Any, ctx: Any, index: int, spec: ActionSpec) -> StepOutcome:
        name = spec.name

        # 1) validate params
        try:
            _meta, params = registry.validate_spec(spec)
        except (ValidationError, KeyError) as e:
            logger.warning("step %d (%s) invalid: %s", index, name, e)
            return StepOutcome(index=index, name=name, ok=False, detail=f"invalid spec: {e}")

        # 2) execute; only driver failures are retried
        fn = registry.get_action(name)
        attempt = 0
        while True:
            attempt += 1
            try:
                res = await fn(driver, ctx, params)
            except ActionExecutionError as e:
                if attempt > self.retries:
                    logger.warning("step %d (%s) failed: %s", index, name, e)
                    return await self._failed(driver, ctx, index, name, str(e), attempt)
                logger.info("step %d (%s) attempt %d failed, retrying", index, name, attempt)
                await asyncio.sleep(self.backoff_seconds * attempt)
                continue
            except BrowserDslError as e:
                logger.warning("step %d (%s) failed: %s", index, name, e)
                return await self._failed(driver, ctx, index, name, str(e), attempt)

            meta = res.meta if isinstance(getattr(res, "meta", None), dict) else None
            return StepOutcome(
                index=index,
                name=name,
                ok=bool(res.ok),
                detail=_detail_for(res),
                extracted=getattr(res, "extracted_content", None),
                meta=meta,
                attempts=attempt,
            )

    async def _failed(
        self, driver: Any, ctx: Any, index: int, name: str, detail: str, attempts: int
    ) -> StepOutcome:
        artifact = await self._on_failure(driver, ctx, index, name)
        return StepOutcome(
            index=index,
            name=name,
            ok=False,
            detail=detail,
            artifact_path=artifact,
            attempts=attempts,
        )

    async def _on_failure(self, driver: Any, ctx: Any, index: int, name: str) -> str | None:
        """Best-effort failure artifact (screenshot)."""
        if not self.artifacts_dir:
            return None
        png = self.artifacts_dir / f"fail-{index:02d}-{name}.png"
        try:
            await driver.screenshot(ctx, str(png), full_page=True)
        except Exception:  # noqa: BLE001
            logger.debug("could not save failure screenshot %s", png, exc_info=True)
            return None
        return str(png)
