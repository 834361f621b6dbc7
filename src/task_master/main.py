"""CLI entrypoint for task-master."""

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import rich_click as click
from rich.console import Console
from rich.logging import RichHandler

from task_master import __version__
from task_master.ai.dispatcher import ProviderCallError
from task_master.ai.routing import UnsupportedProviderError
from task_master.config import SUPPORTED_LOG_LEVELS
from task_master.controllers import (
    ComplexityPromptCommand,
    ExpandTaskCommand,
    ListTasksCommand,
    ParsePrdCommand,
    TaskCliController,
)
from task_master.tasks.models import TaskStatus

click.rich_click.USE_MARKDOWN = True
TASK_CONTROLLER = TaskCliController()

_CLI_ERRORS = (
    ProviderCallError,
    UnsupportedProviderError,
    FileNotFoundError,
    TypeError,
    ValueError,
)


@click.group()
@click.version_option(version=__version__, prog_name="task-master")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging level. Defaults to TASK_MASTER_LOG_LEVEL or INFO.",
)
def task_master(log_level: str | None) -> None:
    """Generate and track implementation tasks from a PRD."""

    _configure_logging(log_level or os.getenv("TASK_MASTER_LOG_LEVEL", "INFO"))


@task_master.command("parse-prd")
@click.argument("prd_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--num-tasks",
    "-n",
    type=click.IntRange(min=1),
    default=None,
    help="Number of tasks to generate. Defaults to TASK_MASTER_DEFAULT_NUM_TASKS.",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Task file to write. Defaults to TASK_MASTER_TASKS_PATH.",
)
@click.option("--provider", default=None, help="Override AI_PROVIDER for this run.")
def parse_prd(
    prd_path: Path,
    num_tasks: int | None,
    output_path: Path | None,
    provider: str | None,
) -> None:
    """Generate a task file from a product requirements document."""

    _emit_lines(
        _run(
            TASK_CONTROLLER.parse_prd,
            ParsePrdCommand(
                prd_path=prd_path,
                num_tasks=num_tasks,
                output_path=output_path,
                provider=provider,
            ),
        ),
    )


@task_master.command("list")
@click.option("--file", "-f", "tasks_path", type=click.Path(path_type=Path), default=None)
@click.option(
    "--status",
    type=click.Choice([status.value for status in TaskStatus]),
    default=None,
    help="Only show tasks with this status.",
)
@click.option(
    "--with-subtasks/--no-with-subtasks",
    default=False,
    show_default=True,
    help="Print subtasks under each task.",
)
def list_tasks(tasks_path: Path | None, status: str | None, with_subtasks: bool) -> None:
    """List tasks from the task file."""

    _emit_lines(
        _run(
            TASK_CONTROLLER.list_tasks,
            ListTasksCommand(tasks_path=tasks_path, status=status, with_subtasks=with_subtasks),
        ),
    )


@task_master.command("expand")
@click.option("--id", "task_id", type=int, required=True, help="Task id to expand.")
@click.option(
    "--num",
    "num_subtasks",
    type=click.IntRange(min=1),
    default=None,
    help="Number of subtasks. Defaults to TASK_MASTER_DEFAULT_SUBTASKS.",
)
@click.option(
    "--research/--no-research",
    default=False,
    show_default=True,
    help="Use the research-backed subtask generator.",
)
@click.option("--prompt", default="", help="Additional context for the subtasks.")
@click.option("--file", "-f", "tasks_path", type=click.Path(path_type=Path), default=None)
def expand(  # noqa: PLR0913
    task_id: int,
    num_subtasks: int | None,
    research: bool,
    prompt: str,
    tasks_path: Path | None,
) -> None:
    """Append subtasks to one task."""

    _emit_lines(
        _run(
            TASK_CONTROLLER.expand_task,
            ExpandTaskCommand(
                tasks_path=tasks_path,
                task_id=task_id,
                num_subtasks=num_subtasks,
                research=research,
                prompt=prompt,
            ),
        ),
    )


@task_master.command("complexity-prompt")
@click.option("--file", "-f", "tasks_path", type=click.Path(path_type=Path), default=None)
def complexity_prompt(tasks_path: Path | None) -> None:
    """Print the complexity-analysis prompt for the current task file."""

    _emit_lines(_run(TASK_CONTROLLER.complexity_prompt, ComplexityPromptCommand(tasks_path)))


@task_master.command("providers")
def providers() -> None:
    """Show registered AI providers."""

    _emit_lines(_run(TASK_CONTROLLER.providers))


def _run(handler: Callable[..., list[str]], *args: Any) -> list[str]:
    try:
        return handler(*args)
    except _CLI_ERRORS as error:
        raise click.ClickException(str(error)) from error


def _configure_logging(level: str) -> None:
    normalized = level.strip().upper()
    if normalized not in SUPPORTED_LOG_LEVELS:
        raise click.UsageError(f"Unsupported log level: {level!r}")
    logging.basicConfig(
        level=normalized,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)
