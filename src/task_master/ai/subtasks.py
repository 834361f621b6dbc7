"""Local subtask scaffolding for task expansion."""

from __future__ import annotations

from task_master.tasks.models import Subtask, Task, TaskStatus

DEFAULT_RESEARCH_SUBTASKS = 3


def generate_subtasks(
    task: Task,
    num_subtasks: int,
    next_subtask_id: int,
    additional_context: str = "",
) -> list[Subtask]:
    """Build ``num_subtasks`` sequential steps, each depending on the previous one."""

    if num_subtasks < 1:
        raise ValueError(f"num_subtasks must be >= 1, got {num_subtasks}")
    context = additional_context.strip()
    subtasks: list[Subtask] = []
    for offset in range(num_subtasks):
        subtask_id = next_subtask_id + offset
        details = f"Implementation details for subtask {offset + 1}"
        if context:
            details = f"{details}\nContext: {context}"
        subtasks.append(
            Subtask(
                id=subtask_id,
                title=f"Subtask {offset + 1} for {task.title}",
                description=f"Implementation step {offset + 1}",
                status=TaskStatus.PENDING,
                dependencies=[subtask_id - 1] if offset > 0 else [],
                details=details,
                parent_task_id=task.id,
            ),
        )
    return subtasks


def generate_subtasks_with_research(
    task: Task,
    num_subtasks: int = DEFAULT_RESEARCH_SUBTASKS,
    next_subtask_id: int = 1,
    additional_context: str = "",
) -> list[Subtask]:
    """Research-mode entry point; currently delegates to :func:`generate_subtasks`."""
    return generate_subtasks(task, num_subtasks, next_subtask_id, additional_context)
