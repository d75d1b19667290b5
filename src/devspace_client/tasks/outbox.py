# src/devspace_client/tasks/outbox.py

from __future__ import annotations

"""
Outbox for optimistic task mutations.

Status changes and deletions are applied locally first and then queued here.
A single drain task sends them in FIFO order:
- success -> entry dropped
- transient failure (no response / 5xx) -> retried after retry_delay_seconds,
  up to max_attempts
- permanent failure (4xx) or attempts exhausted -> entry given up on and
  handed to on_give_up (which reverts the local mutation and surfaces it)

clear() drops everything pending. A request that is already on the wire runs
to completion, but its result is ignored.
"""

import asyncio
import logging
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum

from ..core.errors import RequestFailed
from .task_models import TaskStatus

logger = logging.getLogger(__name__)


class MutationKind(StrEnum):
    SET_STATUS = "set_status"
    DELETE = "delete"


@dataclass(slots=True)
class PendingMutation:
    task_id: str
    kind: MutationKind
    status: TaskStatus | None = None
    attempts: int = 0
    undo: Callable[[], None] | None = None


SendMutation = Callable[[PendingMutation], Awaitable[None]]
GiveUp = Callable[[PendingMutation, RequestFailed], None]


class Outbox:
    def __init__(
        self,
        send: SendMutation,
        on_give_up: GiveUp,
        *,
        max_attempts: int = 3,
        retry_delay_seconds: float = 2.0,
    ) -> None:
        self._send = send
        self._on_give_up = on_give_up
        self._max_attempts = max(1, int(max_attempts))
        self._retry_delay = max(0.0, float(retry_delay_seconds))
        self._queue: deque[PendingMutation] = deque()
        self._drain: asyncio.Task[None] | None = None
        self._epoch = 0

    def __len__(self) -> int:
        return len(self._queue)

    @property
    def pending(self) -> tuple[PendingMutation, ...]:
        return tuple(self._queue)

    def submit(self, mutation: PendingMutation) -> None:
        """Queue a mutation and make sure the drain task is running."""
        self._queue.append(mutation)
        if self._drain is None or self._drain.done():
            self._drain = asyncio.get_running_loop().create_task(self._run(), name="devspace-outbox")

    async def flush(self) -> None:
        """Wait until everything queued so far has been sent or given up on."""
        while self._drain is not None and not self._drain.done():
            await asyncio.shield(self._drain)

    def clear(self) -> None:
        dropped = len(self._queue)
        self._queue.clear()
        self._epoch += 1
        if dropped:
            logger.info("Outbox cleared, %d pending mutation(s) dropped", dropped)

    async def _run(self) -> None:
        while self._queue:
            mutation = self._queue[0]
            epoch = self._epoch
            mutation.attempts += 1

            try:
                await self._send(mutation)
                failure = None
            except RequestFailed as exc:
                failure = exc

            if epoch != self._epoch:
                # Cleared while the request was out; nothing left to reconcile.
                continue

            if failure is None:
                self._queue.popleft()
                logger.debug("Outbox: %s %s sent", mutation.kind.value, mutation.task_id)
                continue

            if failure.transient and mutation.attempts < self._max_attempts:
                logger.info(
                    "Outbox: %s %s failed (attempt %d/%d), retrying",
                    mutation.kind.value,
                    mutation.task_id,
                    mutation.attempts,
                    self._max_attempts,
                )
                await asyncio.sleep(self._retry_delay)
                continue

            self._queue.popleft()
            logger.warning(
                "Outbox: giving up on %s %s after %d attempt(s): %s",
                mutation.kind.value,
                mutation.task_id,
                mutation.attempts,
                failure.message,
            )
            try:
                self._on_give_up(mutation, failure)
            except Exception:
                logger.exception("Outbox give-up handler failed task_id=%s", mutation.task_id)
