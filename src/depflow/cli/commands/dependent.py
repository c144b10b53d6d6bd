"""
Dependent CLI commands

Commands for evaluating dependency declarations against execution history.

Usage:
    depflow dependent check FILE     # Poll once and show per-item verdicts
    depflow dependent wait FILE      # Poll until the dependencies are decided

Exit codes: 0 success, 1 failed, 2 still waiting, 3 invalid input or
unreachable history store.
"""

import asyncio
import json
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from depflow.core.config import DependentConfig
from depflow.core.config_manager import get_config_manager
from depflow.core.dependency import (
    DateIntervalResolver,
    DependencyItemEvaluator,
    DependentTask,
    DependResult,
    parse_parameters,
)
from depflow.core.execution.errors import DepflowError
from depflow.core.storage.sqlalchemy import ExecutionHistoryRepository, create_session_factory
from depflow.logger import get_logger

logger = get_logger(__name__)
console = Console()

app = typer.Typer(name="dependent", help="Check and wait for task dependencies")

EXIT_CODES = {
    DependResult.success: 0,
    DependResult.failed: 1,
    DependResult.waiting: 2,
}
EXIT_ERROR = 3

RESULT_STYLES = {
    DependResult.success: "green",
    DependResult.failed: "red",
    DependResult.waiting: "yellow",
}


def _resolve_config(
    database_url: Optional[str],
    timezone: Optional[str],
    poll_interval: Optional[float] = None,
    timeout: Optional[float] = None,
) -> DependentConfig:
    config = get_config_manager().get_config()
    overrides = {
        "database_url": database_url,
        "timezone": timezone,
        "poll_interval_seconds": poll_interval,
        "timeout_seconds": timeout,
    }
    config = replace(config, **{k: v for k, v in overrides.items() if v is not None})
    config.validate()
    return config


def _build_task(file: Path, config: DependentConfig, clock=None) -> DependentTask:
    """Parse the declaration file and wire the engine to the history database."""
    parameters = parse_parameters(json.loads(file.read_text(encoding="utf-8")))
    logger.debug("Loaded %d dependent declarations from %s", len(parameters.declarations), file)
    history_store = ExecutionHistoryRepository(create_session_factory(config.database_url))
    evaluator = DependencyItemEvaluator(DateIntervalResolver(config.timezone), history_store)
    return DependentTask.from_parameters(parameters, evaluator, config=config, clock=clock)


def _print_results(task: DependentTask) -> None:
    table = Table(title="Dependent Items")
    table.add_column("#", style="dim")
    table.add_column("Key", style="cyan")
    table.add_column("Definition")
    table.add_column("Target")
    table.add_column("Date")
    table.add_column("Result")

    for index, execute in enumerate(task.executes, start=1):
        resolved = execute.snapshot()
        for item in execute.declaration.items:
            result = resolved.get(item.key, DependResult.waiting)
            style = RESULT_STYLES[result]
            table.add_row(
                str(index),
                item.key,
                str(item.definition_id),
                item.dep_tasks,
                item.date_value,
                f"[{style}]{result.value}[/{style}]",
            )

    console.print(table)
    style = RESULT_STYLES[task.result]
    console.print(f"Overall: [{style}]{task.result.value}[/{style}]")


@app.command("check")
def check(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Dependent parameters JSON"),
    database_url: Optional[str] = typer.Option(
        None, "--database-url", "-d", help="History database URL (default: DEPFLOW_DATABASE_URL)"
    ),
    at: Optional[str] = typer.Option(
        None, "--at", help="Evaluation time as ISO datetime (default: now)"
    ),
    timezone: Optional[str] = typer.Option(
        None, "--timezone", "-z", help="Timezone for date expressions (default: DEPFLOW_TIMEZONE)"
    ),
):
    """
    Evaluate dependencies once.

    Examples:
        depflow dependent check deps.json
        depflow dependent check deps.json --at 2024-05-02T08:00:00
    """
    try:
        evaluation_time = datetime.fromisoformat(at) if at else datetime.now()
        config = _resolve_config(database_url, timezone)
        task = _build_task(file, config, clock=lambda: evaluation_time)
        task.poll_once()
    except (DepflowError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(EXIT_ERROR)

    _print_results(task)
    raise typer.Exit(EXIT_CODES[task.result])


@app.command("wait")
def wait(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Dependent parameters JSON"),
    database_url: Optional[str] = typer.Option(
        None, "--database-url", "-d", help="History database URL (default: DEPFLOW_DATABASE_URL)"
    ),
    poll_interval: Optional[float] = typer.Option(
        None, "--poll-interval", "-i", help="Seconds between polls (default: DEPFLOW_POLL_INTERVAL)"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", help="Give up (failed) after this many seconds"
    ),
    timezone: Optional[str] = typer.Option(
        None, "--timezone", "-z", help="Timezone for date expressions (default: DEPFLOW_TIMEZONE)"
    ),
):
    """
    Poll dependencies until they succeed or fail.

    Examples:
        depflow dependent wait deps.json
        depflow dependent wait deps.json --poll-interval 30 --timeout 3600
    """
    try:
        config = _resolve_config(database_url, timezone, poll_interval, timeout)
        task = _build_task(file, config)
        result = asyncio.run(task.run())
    except (DepflowError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(EXIT_ERROR)
    except KeyboardInterrupt:
        console.print("[yellow]Interrupted[/yellow]")
        raise typer.Exit(EXIT_CODES[DependResult.waiting])

    _print_results(task)
    raise typer.Exit(EXIT_CODES[result])
