# tests/test_outbox.py

from __future__ import annotations

import asyncio

import pytest

from devspace_client.core.errors import RequestFailed
from devspace_client.tasks.outbox import MutationKind, Outbox, PendingMutation
from devspace_client.tasks.task_models import TaskStatus


class RecordingSender:
    """Fake send callback: records calls, optionally fails per task id."""

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay
        self.sent: list[tuple[str, MutationKind]] = []
        self.fail_with: dict[str, RequestFailed] = {}

    async def __call__(self, mutation: PendingMutation) -> None:
        self.sent.append((mutation.task_id, mutation.kind))
        if self.delay:
            await asyncio.sleep(self.delay)
        err = self.fail_with.get(mutation.task_id)
        if err is not None:
            raise err


@pytest.mark.asyncio
async def test_mutations_are_sent_in_submission_order() -> None:
    sender = RecordingSender(delay=0.01)
    outbox = Outbox(sender, lambda m, e: None)

    outbox.submit(PendingMutation("1", MutationKind.SET_STATUS, status=TaskStatus.COMPLETED))
    outbox.submit(PendingMutation("1", MutationKind.DELETE))
    outbox.submit(PendingMutation("2", MutationKind.DELETE))
    await outbox.flush()

    assert sender.sent == [
        ("1", MutationKind.SET_STATUS),
        ("1", MutationKind.DELETE),
        ("2", MutationKind.DELETE),
    ]
    assert len(outbox) == 0


@pytest.mark.asyncio
async def test_give_up_reports_attempts_and_keeps_draining() -> None:
    sender = RecordingSender()
    sender.fail_with["bad"] = RequestFailed("Failed to update task")
    given_up: list[tuple[PendingMutation, RequestFailed]] = []
    outbox = Outbox(sender, lambda m, e: given_up.append((m, e)), max_attempts=2, retry_delay_seconds=0)

    outbox.submit(PendingMutation("bad", MutationKind.DELETE))
    outbox.submit(PendingMutation("good", MutationKind.DELETE))
    await outbox.flush()

    assert [m.task_id for m, _ in given_up] == ["bad"]
    assert given_up[0][0].attempts == 2
    assert sender.sent[-1] == ("good", MutationKind.DELETE)


@pytest.mark.asyncio
async def test_clear_drops_pending_and_ignores_in_flight_result() -> None:
    sender = RecordingSender(delay=0.05)
    sender.fail_with["a"] = RequestFailed("Failed to delete task", status_code=404)
    given_up: list[PendingMutation] = []
    outbox = Outbox(sender, lambda m, e: given_up.append(m))

    outbox.submit(PendingMutation("a", MutationKind.DELETE))
    outbox.submit(PendingMutation("b", MutationKind.DELETE))
    await asyncio.sleep(0.01)  # "a" is on the wire
    outbox.clear()
    await outbox.flush()

    assert sender.sent == [("a", MutationKind.DELETE)]
    assert given_up == []
