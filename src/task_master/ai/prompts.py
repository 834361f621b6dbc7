"""Prompt templates for task generation and complexity analysis."""

from __future__ import annotations

import json
from collections.abc import Iterable

from task_master.tasks.models import Task

TASK_GENERATION_PROMPT = """\
You are an experienced technical lead breaking a product requirements document
into an implementation plan for a development team.

1. Create exactly {num_tasks} tasks, numbered from 1 to {num_tasks}
2. Each task should be atomic and focused on a single responsibility
3. Order tasks logically - consider dependencies and implementation sequence
4. Early tasks should focus on setup, core functionality first, then advanced features
5. Include clear validation/testing approach for each task
6. Set appropriate dependency IDs (a task can only depend on tasks with lower IDs)
7. Assign priority (high/medium/low) based on criticality and dependency order
8. Include detailed implementation guidance in the "details" field

Expected output format:
{{
  "tasks": [
    {{
      "id": 1,
      "title": "Setup Project Repository",
      "description": "...",
      "status": "pending",
      "dependencies": [],
      "priority": "high",
      "details": "...",
      "testStrategy": "..."
    }},
    ...
  ],
  "metadata": {{
    "projectName": "PRD Implementation",
    "totalTasks": {num_tasks},
    "sourceFile": "{source_identifier}",
    "generatedAt": "YYYY-MM-DD"
  }}
}}

Important: Your response must be valid JSON only, with no additional explanation or comments.
"""

COMPLEXITY_ANALYSIS_PROMPT = """\
Analyze the complexity of the following tasks and provide recommendations for subtask breakdown:

{task_blocks}

Analyze each task and return a JSON array with the following structure for each task:
[
  {{
    "taskId": number,
    "taskTitle": string,
    "complexityScore": number (1-10),
    "recommendedSubtasks": number (3-5),
    "expansionPrompt": string (a specific prompt for generating good subtasks),
    "reasoning": string (brief explanation of your assessment)
  }},
  ...
]

IMPORTANT: Make sure to include an analysis for EVERY task listed above, \
with the correct taskId matching each task's ID.
"""

_TASK_BLOCK = """\
Task ID: {id}
Title: {title}
Description: {description}
Details: {details}
Dependencies: {dependencies}
Priority: {priority}"""


def render_task_generation_prompt(*, num_tasks: int, source_identifier: str) -> str:
    return TASK_GENERATION_PROMPT.format(
        num_tasks=num_tasks,
        source_identifier=source_identifier,
    )


def render_complexity_analysis_prompt(tasks: Iterable[Task]) -> str:
    """Build the prompt asking a provider to score every task's complexity."""

    blocks = [
        _TASK_BLOCK.format(
            id=task.id,
            title=task.title,
            description=task.description or "No description",
            details=task.details or "No details",
            dependencies=json.dumps(task.dependencies),
            priority=task.priority.value,
        )
        for task in tasks
    ]
    return COMPLEXITY_ANALYSIS_PROMPT.format(task_blocks="\n---\n".join(blocks))
