"""
CLI entrypoint.

doctor:   print effective settings (headless, wait defaults, presets).
validate: offline check of a JSON ActionSpec[] script (nested actions included).
run:      execute a script in Chromium through the Runner.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..core.settings import settings
from ..core.action import ActionSpec, parse_specs
from ..core import registry
from ..core.controller.runner import Runner, StepOutcome
from ..io.playwright_driver import PlaywrightDriver


app = typer.Typer(help="browser-dsl CLI")
console = Console()


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


def _load_specs(script: Path, cmd: str) -> list[ActionSpec]:
    if not script.exists():
        typer.secho(f"[{cmd}] file not found: {script}", fg=typer.colors.RED)
        raise typer.Exit(code=2)
    try:
        data: Any = json.loads(script.read_text(encoding="utf-8"))
        specs = parse_specs(data)
    except json.JSONDecodeError as je:
        typer.secho(f"[{cmd}] invalid JSON: {je}", fg=typer.colors.RED)
        raise typer.Exit(code=2)
    except ValidationError as ve:
        typer.secho(f"[{cmd}] invalid file format for ActionSpec[]", fg=typer.colors.RED)
        console.print(ve)
        raise typer.Exit(code=2)

    try:
        import browser_dsl.actions.impl  # noqa: F401
    except Exception as e:  # noqa: BLE001
        typer.secho(f"[{cmd}] failed to import actions: {e}", fg=typer.colors.RED)
        raise typer.Exit(code=2)
    return specs


def _results_table(title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("name")
    table.add_column("result", no_wrap=True)
    table.add_column("detail")
    return table


@app.command("doctor")
def doctor() -> None:
    """Environment check: print key settings to confirm CLI is usable."""
    console.print("[bold green]browser-dsl[/] environment")
    console.print(f"- headless: {settings.headless}")
    console.print(f"- timeout:  {settings.request_timeout_seconds}s")
    console.print(f"- base url: {settings.base_url or '-'}")
    console.print(
        f"- wait:     timeout={settings.wait_timeout_seconds}s "
        f"interval={settings.wait_interval_seconds}s"
    )
    for name, preset in settings.wait_presets.items():
        console.print(f"  preset {name}: timeout={preset.timeout}s interval={preset.interval}s")


@app.command("validate")
def validate(script: Path = typer.Argument(..., help="Path to JSON file of ActionSpec[]")) -> None:
    """
    Offline spec validation: read JSON array [{name, args}] and validate each item
    against the params model bound in the registry. Print a table result and exit
    non-zero if any failures.
    """
    specs = _load_specs(script, "validate")
    table = _results_table("Validation Results")

    failures = 0
    for i, spec in enumerate(specs, start=1):
        try:
            registry.validate_spec(spec)
            table.add_row(str(i), spec.name, "[green]OK[/]", "-")
        except KeyError as ke:
            failures += 1
            table.add_row(str(i), spec.name, "[red]Not Registered[/]", str(ke))
        except ValidationError as ve:
            failures += 1
            msg = ve.errors()[0].get("msg", "invalid args")
            table.add_row(str(i), spec.name, "[red]Invalid Args[/]", msg)

    console.print(table)
    if failures:
        raise typer.Exit(code=1)
    typer.secho("[validate] all specs passed", fg=typer.colors.GREEN)


@app.command("run")
def run(
    script: Path = typer.Argument(..., help="Path to JSON file of ActionSpec[]"),
    headless: bool = typer.Option(
        settings.headless, "--headless/--no-headless", help="Run browser headless"
    ),
    slowmo: int = typer.Option(0, "--slowmo", help="Slow motion in ms (debug)"),
    retries: int = typer.Option(0, "--retries", help="Retry times on ActionExecutionError"),
    artifacts_dir: Path = typer.Option(
        Path("artifacts"), "--artifacts-dir", help="Where to save failure screenshots"
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Resolve relative open_url targets against this url"
    ),
    stop_on_failure: bool = typer.Option(False, "--stop-on-failure", help="Stop at first failed step"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """
    Execute a list of actions: read JSON -> structure check -> param check -> run in browser.
    Prints a table of results; returns non-zero on any failure.
    """
    _configure_logging(verbose)
    specs = _load_specs(script, "run")
    if base_url:
        settings.base_url = base_url

    async def _run() -> int:
        driver = PlaywrightDriver(
            headless=headless,
            slow_mo_ms=slowmo,
            default_timeout_ms=settings.request_timeout_seconds * 1000,
        )
        await driver.start()
        ctx = await driver.new_context()
        try:
            runner = Runner(
                retries=retries, artifacts_dir=artifacts_dir, stop_on_failure=stop_on_failure
            )
            rows: list[StepOutcome] = await runner.run(driver, ctx, specs)

            table = _results_table("Run Results")
            failures = 0
            for r in rows:
                result = "[green]OK[/]" if r.ok else "[red]FAIL[/]"
                detail = r.detail
                if (not r.ok) and r.artifact_path:
                    detail = f"{detail} (artifact: {r.artifact_path})"
                if not r.ok:
                    failures += 1
                table.add_row(str(r.index), r.name, result, detail)

            console.print(table)
            return 1 if failures else 0
        finally:
            await driver.close_context(ctx)
            await driver.stop()

    code = asyncio.run(_run())
    if code != 0:
        raise typer.Exit(code=code)
    typer.secho("[run] completed successfully", fg=typer.colors.GREEN)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
