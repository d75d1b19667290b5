# src/devspace_client/tasks/task_models.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """
    Board column a task lives in.

    Notes:
    - The server has been seen to store "pending" for fresh tasks; anything
      unknown is read back as TODO.
    """

    TODO = "todo"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def from_api(cls, raw: Any) -> TaskStatus:
        if not raw:
            return cls.TODO
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.TODO


def _text(data: dict[str, Any], *keys: str) -> str:
    for key in keys:
        val = data.get(key)
        if val is not None:
            return str(val)
    return ""


@dataclass(slots=True, frozen=True)
class TaskDraft:
    """What the user fills in before the server assigns an id."""

    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    assignee: str = ""
    due_date: str = ""

    def to_api(self) -> dict[str, str]:
        return {
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "assignee": self.assignee,
            "dueDate": self.due_date,
        }


@dataclass(slots=True, frozen=True)
class Task:
    id: str
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    assignee: str = ""
    due_date: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Task:
        task_id = _text(data, "id", "_id")
        if not task_id:
            raise ValueError("task record without id")
        return cls(
            id=task_id,
            title=_text(data, "title"),
            description=_text(data, "description"),
            status=TaskStatus.from_api(data.get("status")),
            assignee=_text(data, "assignee", "assignee_id"),
            due_date=_text(data, "dueDate", "due_date"),
        )

    def to_api(self) -> dict[str, str]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "assignee": self.assignee,
            "dueDate": self.due_date,
        }


def partition_by_status(tasks: Iterable[Task]) -> dict[TaskStatus, list[Task]]:
    """
    Split tasks into board columns.

    Every status gets a column (possibly empty), in TaskStatus order.
    Within a column tasks keep their sequence order.
    """
    columns: dict[TaskStatus, list[Task]] = {status: [] for status in TaskStatus}
    for task in tasks:
        columns[task.status].append(task)
    return columns
