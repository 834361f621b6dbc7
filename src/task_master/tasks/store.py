"""JSON persistence for task files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from task_master.tasks.models import TaskSet


def write_json(path: Path, payload: dict[str, Any]) -> None:
    """Persist JSON payload using deterministic formatting."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2) + "\n", "utf-8")


def load_json(path: Path) -> dict[str, Any]:
    """Load JSON document and validate top-level object type."""

    payload = json.loads(path.read_text("utf-8"))
    if not isinstance(payload, dict):
        raise TypeError(f"Expected JSON object in {path}")
    return payload


def write_task_set(path: Path, task_set: TaskSet) -> None:
    write_json(path, task_set.to_payload())


def read_task_set(path: Path) -> TaskSet:
    """Deserialize and validate a task file."""

    if not path.exists():
        raise FileNotFoundError(f"Task file not found: {path}")
    return TaskSet.from_payload(load_json(path))
