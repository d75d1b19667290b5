# src/devspace_client/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..api.transport import HttpTransport
    from ..session.manager import SessionLifecycleManager
    from ..tasks.task_sync import SyncFailure, TaskSyncController


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    transport: HttpTransport
    sessions: SessionLifecycleManager
    tasks: TaskSyncController

    # Outbox failures not yet shown to the user.
    unseen_failures: list[SyncFailure] = field(default_factory=list)

    async def aclose(self) -> None:
        await self.sessions.aclose()
        await self.transport.aclose()
