# src/devspace_client/api/task_api.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.errors import RequestFailed, TransportFailure
from ..core.ports import Transport
from ..tasks.task_models import Task, TaskDraft, TaskStatus

logger = logging.getLogger(__name__)


class TaskApi:
    """
    Remote task API under a base path (default /api).

    Every failure (no response, non-2xx, unreadable body) is raised as
    RequestFailed so callers deal with a single error type.
    """

    def __init__(self, transport: Transport, *, base_path: str = "/api") -> None:
        self._transport = transport
        self._base = base_path.rstrip("/")

    async def _call(self, method: str, path: str, *, what: str, json: Any = None) -> httpx.Response:
        try:
            resp = await self._transport.request(method, f"{self._base}{path}", json=json)
        except TransportFailure as exc:
            raise RequestFailed(f"Failed to {what}") from exc
        if not resp.is_success:
            logger.info("%s %s -> HTTP %s", method, path, resp.status_code)
            raise RequestFailed(f"Failed to {what}", status_code=resp.status_code)
        return resp

    async def list_tasks(self) -> list[Task]:
        resp = await self._call("GET", "/gettasks", what="fetch tasks")
        try:
            data = resp.json()
        except ValueError as exc:
            raise RequestFailed("Failed to fetch tasks: malformed response", status_code=resp.status_code) from exc

        # An empty collection may come back as null.
        if data is None:
            return []
        if not isinstance(data, list):
            raise RequestFailed("Failed to fetch tasks: expected a list", status_code=resp.status_code)

        out: list[Task] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            try:
                out.append(Task.from_api(item))
            except ValueError:
                logger.warning("Skipping task record without id")
        return out

    async def create_task(self, draft: TaskDraft) -> Task:
        resp = await self._call("POST", "/tasks", what="create task", json=draft.to_api())
        try:
            data = resp.json()
            if not isinstance(data, dict):
                raise ValueError("expected an object")
            return Task.from_api(data)
        except ValueError as exc:
            raise RequestFailed("Failed to create task: malformed response", status_code=resp.status_code) from exc

    async def update_status(self, task_id: str, status: TaskStatus) -> None:
        await self._call("PUT", f"/tasks/{task_id}", what="update task", json={"status": status.value})

    async def delete_task(self, task_id: str) -> None:
        await self._call("DELETE", f"/tasks/{task_id}", what="delete task")
