"""Controllers for task-master CLI commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import httpx
from rich.console import Console

from task_master.ai.backend import ClientRegistry
from task_master.ai.indicator import rich_indicator
from task_master.ai.models import TaskSpecRequest
from task_master.ai.prompts import render_complexity_analysis_prompt
from task_master.ai.routing import InvokerRegistry
from task_master.ai.services import build_dispatcher, build_invoker_registry
from task_master.ai.subtasks import generate_subtasks, generate_subtasks_with_research
from task_master.config import Settings
from task_master.tasks.models import Task, TaskSet, TaskStatus
from task_master.tasks.store import read_task_set, write_task_set

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ParsePrdCommand:
    """CLI input for task generation from a PRD."""

    prd_path: Path
    num_tasks: int | None
    output_path: Path | None
    provider: str | None


@dataclass(slots=True)
class ListTasksCommand:
    """CLI input for task listing."""

    tasks_path: Path | None
    status: str | None
    with_subtasks: bool


@dataclass(slots=True)
class ExpandTaskCommand:
    """CLI input for subtask expansion."""

    tasks_path: Path | None
    task_id: int
    num_subtasks: int | None
    research: bool
    prompt: str


@dataclass(slots=True)
class ComplexityPromptCommand:
    """CLI input for complexity-analysis prompt rendering."""

    tasks_path: Path | None


class TaskCliController:
    """Composition root for provider access and task file operations."""

    def __init__(
        self,
        *,
        console: Console | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.console = console or Console(stderr=True)
        self.transport = transport

    def parse_prd(self, command: ParsePrdCommand) -> list[str]:
        settings = Settings.from_env(tasks_path=command.output_path)
        settings.validate()
        request = TaskSpecRequest(
            source_content=command.prd_path.read_text("utf-8"),
            source_identifier=str(command.prd_path),
            requested_task_count=command.num_tasks or settings.default_num_tasks,
        )
        config = settings.provider_config(command.provider)
        logger.info(
            "Parsing %s into %d tasks",
            command.prd_path,
            request.requested_task_count,
        )

        with self._clients(settings) as clients:
            dispatcher = build_dispatcher(
                settings,
                clients=clients,
                indicator=rich_indicator(self.console),
            )
            report = dispatcher.generate_with_report(config, request)

        task_set = TaskSet.from_payload(
            report.payload,
            project_name=settings.project_name,
            source_file=str(command.prd_path),
        )
        write_task_set(settings.tasks_path, task_set)
        return [
            f"Generated {len(task_set.tasks)} tasks with {report.provider} "
            f"(attempts={report.attempts})",
            f"Task file written: {settings.tasks_path}",
            *(_task_line(task) for task in task_set.tasks),
        ]

    def list_tasks(self, command: ListTasksCommand) -> list[str]:
        settings = Settings.from_env(tasks_path=command.tasks_path)
        task_set = read_task_set(settings.tasks_path)
        status = TaskStatus(command.status) if command.status else None
        tasks = [task for task in task_set.tasks if status is None or task.status is status]
        if not tasks:
            return ["No tasks found."]

        lines: list[str] = []
        for task in tasks:
            lines.append(_task_line(task))
            if command.with_subtasks:
                lines.extend(
                    f"    {task.id}.{subtask.id} [{subtask.status.value}] {subtask.title}"
                    for subtask in task.subtasks
                )
        done = sum(1 for task in task_set.tasks if task.status is TaskStatus.DONE)
        lines.append(f"Progress: {done}/{len(task_set.tasks)} done")
        return lines

    def expand_task(self, command: ExpandTaskCommand) -> list[str]:
        settings = Settings.from_env(tasks_path=command.tasks_path)
        settings.validate()
        task_set = read_task_set(settings.tasks_path)
        task = task_set.find_task(command.task_id)
        if task is None:
            raise ValueError(f"Task {command.task_id} not found in {settings.tasks_path}")

        num_subtasks = command.num_subtasks or settings.default_subtasks
        generator = generate_subtasks_with_research if command.research else generate_subtasks
        subtasks = generator(task, num_subtasks, task.next_subtask_id(), command.prompt)
        task.subtasks.extend(subtasks)
        write_task_set(settings.tasks_path, task_set)
        logger.info("Expanded task %d with %d subtasks", task.id, len(subtasks))
        return [
            f"Added {len(subtasks)} subtasks to task {task.id}: {task.title}",
            *(f"    {task.id}.{subtask.id} {subtask.title}" for subtask in subtasks),
        ]

    def complexity_prompt(self, command: ComplexityPromptCommand) -> list[str]:
        settings = Settings.from_env(tasks_path=command.tasks_path)
        task_set = read_task_set(settings.tasks_path)
        return render_complexity_analysis_prompt(task_set.tasks).splitlines()

    def providers(self) -> list[str]:
        settings = Settings.from_env()
        settings.validate()
        with self._clients(settings) as clients:
            registry = build_invoker_registry(settings.provider, clients=clients)
            return _provider_lines(registry, settings)

    def _clients(self, settings: Settings) -> ClientRegistry:
        return ClientRegistry(
            timeout_seconds=settings.provider.request_timeout_seconds,
            verify_tls=settings.provider.verify_tls,
            transport=self.transport,
        )


def _task_line(task: Task) -> str:
    dependencies = ", ".join(str(dependency) for dependency in task.dependencies) or "none"
    return (
        f"#{task.id} [{task.status.value}] ({task.priority.value}) {task.title} "
        f"deps: {dependencies}"
    )


def _provider_lines(registry: InvokerRegistry, settings: Settings) -> list[str]:
    configured = settings.provider.provider.strip().lower()
    lines = []
    for invoker in registry.invokers():
        markers = []
        if invoker.name == configured:
            markers.append("selected")
        if invoker.name == registry.fallback_provider:
            markers.append("fallback")
        suffix = f" [{', '.join(markers)}]" if markers else ""
        lines.append(f"{invoker.describe()}{suffix}")
    return lines
