# tests/test_task_models.py

from __future__ import annotations

import pytest

from devspace_client.tasks.task_models import Task, TaskDraft, TaskStatus, partition_by_status


def test_task_from_api_accepts_server_field_names() -> None:
    task = Task.from_api(
        {
            "_id": "65f0c0ffee",
            "title": "Ship it",
            "description": "",
            "status": "pending",
            "assignee_id": "u42",
            "due_date": "2025-03-01",
        }
    )
    assert task.id == "65f0c0ffee"
    assert task.status is TaskStatus.TODO  # unknown status reads back as todo
    assert task.assignee == "u42"
    assert task.due_date == "2025-03-01"


def test_task_from_api_requires_id() -> None:
    with pytest.raises(ValueError):
        Task.from_api({"title": "no id"})


def test_draft_wire_format_uses_client_names() -> None:
    draft = TaskDraft(title="T1", due_date="2025-01-31", status=TaskStatus.IN_PROGRESS)
    assert draft.to_api() == {
        "title": "T1",
        "description": "",
        "status": "in-progress",
        "assignee": "",
        "dueDate": "2025-01-31",
    }


def test_partition_is_disjoint_complete_and_ordered() -> None:
    statuses = [TaskStatus.TODO, TaskStatus.COMPLETED, TaskStatus.TODO, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED]
    tasks = [Task(id=str(i), title=f"t{i}", status=s) for i, s in enumerate(statuses)]

    columns = partition_by_status(tasks)

    assert list(columns) == [TaskStatus.TODO, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED]
    seen = [t.id for col in columns.values() for t in col]
    assert sorted(seen) == sorted(t.id for t in tasks)
    assert len(seen) == len(set(seen))
    assert [t.id for t in columns[TaskStatus.TODO]] == ["0", "2"]
    assert [t.id for t in columns[TaskStatus.COMPLETED]] == ["1", "4"]
    for status, col in columns.items():
        assert all(t.status is status for t in col)


def test_partition_of_empty_collection_has_three_empty_columns() -> None:
    columns = partition_by_status([])
    assert len(columns) == 3
    assert all(col == [] for col in columns.values())
