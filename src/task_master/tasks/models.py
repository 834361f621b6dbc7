"""Task file domain models and payload conversion."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class TaskStatus(str, Enum):
    """Task lifecycle states."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class TaskPriority(str, Enum):
    """Task priority levels."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(slots=True)
class Subtask:
    """Implementation step nested under a task."""

    id: int
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    dependencies: list[int] = field(default_factory=list)
    details: str = ""
    parent_task_id: int | None = None

    @classmethod
    def from_payload(cls, raw: dict[str, Any]) -> Subtask:
        return cls(
            id=_require_int(raw, "id", "subtask"),
            title=_require_str(raw, "title", "subtask"),
            description=_optional_str(raw, "description", "subtask"),
            status=_parse_status(raw.get("status")),
            dependencies=_parse_dependencies(raw.get("dependencies"), "subtask"),
            details=_optional_str(raw, "details", "subtask"),
            parent_task_id=_optional_int(raw, "parentTaskId", "subtask"),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "dependencies": list(self.dependencies),
            "details": self.details,
        }
        if self.parent_task_id is not None:
            payload["parentTaskId"] = self.parent_task_id
        return payload


@dataclass(slots=True)
class Task:
    """One generated unit of work."""

    id: int
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    dependencies: list[int] = field(default_factory=list)
    details: str = ""
    test_strategy: str = ""
    subtasks: list[Subtask] = field(default_factory=list)

    @classmethod
    def from_payload(cls, raw: dict[str, Any]) -> Task:
        raw_subtasks = raw.get("subtasks", [])
        if not isinstance(raw_subtasks, list):
            raise TypeError("task.subtasks must be an array")
        subtasks: list[Subtask] = []
        for item in raw_subtasks:
            if not isinstance(item, dict):
                raise TypeError("task.subtasks[] must be objects")
            subtasks.append(Subtask.from_payload(item))
        return cls(
            id=_require_int(raw, "id", "task"),
            title=_require_str(raw, "title", "task"),
            description=_optional_str(raw, "description", "task"),
            status=_parse_status(raw.get("status")),
            priority=_parse_priority(raw.get("priority")),
            dependencies=_parse_dependencies(raw.get("dependencies"), "task"),
            details=_optional_str(raw, "details", "task"),
            test_strategy=_optional_str(raw, "testStrategy", "task"),
            subtasks=subtasks,
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "dependencies": list(self.dependencies),
            "priority": self.priority.value,
            "details": self.details,
            "testStrategy": self.test_strategy,
        }
        if self.subtasks:
            payload["subtasks"] = [subtask.to_payload() for subtask in self.subtasks]
        return payload

    def next_subtask_id(self) -> int:
        return max((subtask.id for subtask in self.subtasks), default=0) + 1


@dataclass(slots=True)
class TaskSetMetadata:
    """Provenance of a generated task set."""

    project_name: str
    total_tasks: int
    source_file: str
    generated_at: str


@dataclass(slots=True)
class TaskSet:
    """Generated tasks plus metadata, as stored in the task file."""

    tasks: list[Task]
    metadata: TaskSetMetadata

    @classmethod
    def from_payload(
        cls,
        raw: dict[str, Any],
        *,
        project_name: str = "PRD Implementation",
        source_file: str = "",
    ) -> TaskSet:
        """Build a task set from a normalized payload.

        Missing metadata fields are filled from the arguments; ``total_tasks``
        is always recomputed from the task list.
        """

        raw_tasks = raw.get("tasks")
        if not isinstance(raw_tasks, list):
            raise TypeError("tasks must be an array")
        tasks: list[Task] = []
        for item in raw_tasks:
            if not isinstance(item, dict):
                raise TypeError("tasks[] must be objects")
            tasks.append(Task.from_payload(item))

        raw_metadata = raw.get("metadata", {})
        if not isinstance(raw_metadata, dict):
            raise TypeError("metadata must be an object")
        metadata = TaskSetMetadata(
            project_name=_str_or_default(raw_metadata.get("projectName"), project_name),
            total_tasks=len(tasks),
            source_file=_str_or_default(raw_metadata.get("sourceFile"), source_file),
            generated_at=_str_or_default(
                raw_metadata.get("generatedAt"),
                datetime.now(tz=UTC).date().isoformat(),
            ),
        )
        return cls(tasks=tasks, metadata=metadata)

    def to_payload(self) -> dict[str, Any]:
        return {
            "tasks": [task.to_payload() for task in self.tasks],
            "metadata": {
                "projectName": self.metadata.project_name,
                "totalTasks": len(self.tasks),
                "sourceFile": self.metadata.source_file,
                "generatedAt": self.metadata.generated_at,
            },
        }

    def find_task(self, task_id: int) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None


def _require_int(raw: dict[str, Any], key: str, owner: str) -> int:
    value = raw.get(key)
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{owner}.{key} must be an integer")
    return value


def _optional_int(raw: dict[str, Any], key: str, owner: str) -> int | None:
    if raw.get(key) is None:
        return None
    return _require_int(raw, key, owner)


def _require_str(raw: dict[str, Any], key: str, owner: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{owner}.{key} must be a non-empty string")
    return value


def _optional_str(raw: dict[str, Any], key: str, owner: str) -> str:
    value = raw.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"{owner}.{key} must be a string")
    return value


def _str_or_default(value: object, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return default


def _parse_dependencies(value: object, owner: str) -> list[int]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeError(f"{owner}.dependencies must be an array")
    dependencies: list[int] = []
    for item in value:
        if not isinstance(item, int) or isinstance(item, bool):
            raise TypeError(f"{owner}.dependencies[] must be integers")
        if item not in dependencies:
            dependencies.append(item)
    return dependencies


def _parse_status(value: object) -> TaskStatus:
    if value is None:
        return TaskStatus.PENDING
    try:
        return TaskStatus(str(value).strip().lower())
    except ValueError as error:
        raise ValueError(
            f"Unsupported task status: {value!r}. Use pending, in-progress, or done.",
        ) from error


def _parse_priority(value: object) -> TaskPriority:
    if value is None:
        return TaskPriority.MEDIUM
    try:
        return TaskPriority(str(value).strip().lower())
    except ValueError as error:
        raise ValueError(
            f"Unsupported task priority: {value!r}. Use high, medium, or low.",
        ) from error
