# src/devspace_client/tasks/task_sync.py

from __future__ import annotations

"""
Task sync controller.

Owns the in-memory task collection and reconciles it with the remote task
API. Every operation requires an authenticated Session and fails fast with
NotAuthenticated (no request sent) otherwise.

- load_all / create round-trip before touching local state.
- set_status / remove are optimistic: local state first, then the outbox.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace

from ..core.errors import NotAuthenticated, RequestFailed
from ..core.ports import TaskGateway
from ..session.models import Session
from .outbox import MutationKind, Outbox, PendingMutation
from .task_models import Task, TaskDraft, TaskStatus, partition_by_status

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class SyncFailure:
    """A status change or deletion the server never accepted (already reverted locally)."""

    task_id: str
    kind: MutationKind
    error: RequestFailed


class TaskSyncController:
    def __init__(
        self,
        session: Session,
        api: TaskGateway,
        *,
        max_attempts: int = 3,
        retry_delay_seconds: float = 2.0,
        on_failure: Callable[[SyncFailure], None] | None = None,
    ) -> None:
        self._session = session
        self._api = api
        self._tasks: list[Task] = []
        self._outbox = Outbox(
            self._send,
            self._give_up,
            max_attempts=max_attempts,
            retry_delay_seconds=retry_delay_seconds,
        )
        self.on_failure = on_failure
        self.failures: list[SyncFailure] = []
        # Bumped by reset(); replies started under an older epoch are dropped.
        self._epoch = 0

    # ---- read side ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def outbox(self) -> Outbox:
        return self._outbox

    def columns(self) -> dict[TaskStatus, list[Task]]:
        return partition_by_status(self._tasks)

    def get(self, task_id: str) -> Task | None:
        idx = self._index_of(task_id)
        return None if idx is None else self._tasks[idx]

    def _index_of(self, task_id: str) -> int | None:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        return None

    def _require_session(self) -> None:
        if not self._session.authenticated:
            raise NotAuthenticated()

    # ---- session hook ----

    def on_session_changed(self, session: Session) -> None:
        """Session listener: nothing survives the end of a session."""
        if not session.authenticated:
            self.reset()

    def reset(self) -> None:
        self._epoch += 1
        self._outbox.clear()
        self._tasks = []
        self.failures = []

    def _require_same_session(self, epoch: int) -> None:
        """A reply that outlived its session is dropped."""
        if epoch != self._epoch:
            logger.info("Discarding task reply received after the session ended")
            raise NotAuthenticated()

    # ---- remote round-trips ----

    async def load_all(self) -> list[Task]:
        self._require_session()
        epoch = self._epoch
        tasks = await self._api.list_tasks()
        self._require_same_session(epoch)
        self._tasks = list(tasks)
        logger.info("Loaded %d task(s)", len(self._tasks))
        return list(self._tasks)

    async def create(self, draft: TaskDraft) -> Task:
        self._require_session()
        epoch = self._epoch
        task = await self._api.create_task(draft)
        self._require_same_session(epoch)
        self._tasks.append(task)
        logger.info("Created task %s", task.id)
        return task

    # ---- optimistic mutations ----

    def set_status(self, task_id: str, status: TaskStatus) -> None:
        self._require_session()
        idx = self._index_of(task_id)
        if idx is None:
            logger.warning("set_status: unknown task %s (ignored)", task_id)
            return

        previous = self._tasks[idx].status
        self._tasks[idx] = replace(self._tasks[idx], status=status)

        def _undo() -> None:
            i = self._index_of(task_id)
            # Only revert if nothing newer has touched the status since.
            if i is not None and self._tasks[i].status == status:
                self._tasks[i] = replace(self._tasks[i], status=previous)

        self._outbox.submit(PendingMutation(task_id, MutationKind.SET_STATUS, status=status, undo=_undo))

    def remove(self, task_id: str) -> None:
        self._require_session()
        idx = self._index_of(task_id)
        if idx is None:
            logger.warning("remove: unknown task %s (ignored)", task_id)
            return

        removed = self._tasks.pop(idx)

        def _undo() -> None:
            if self._index_of(task_id) is None:
                self._tasks.insert(min(idx, len(self._tasks)), removed)

        self._outbox.submit(PendingMutation(task_id, MutationKind.DELETE, undo=_undo))

    async def flush(self) -> None:
        await self._outbox.flush()

    # ---- outbox callbacks ----

    async def _send(self, mutation: PendingMutation) -> None:
        if mutation.kind is MutationKind.SET_STATUS:
            assert mutation.status is not None
            await self._api.update_status(mutation.task_id, mutation.status)
        else:
            await self._api.delete_task(mutation.task_id)

    def _give_up(self, mutation: PendingMutation, error: RequestFailed) -> None:
        if mutation.undo is not None:
            mutation.undo()
        failure = SyncFailure(task_id=mutation.task_id, kind=mutation.kind, error=error)
        self.failures.append(failure)
        if self.on_failure is not None:
            self.on_failure(failure)
