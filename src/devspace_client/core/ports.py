# src/devspace_client/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The session manager and the task sync controller depend on Protocols instead
of concrete HTTP wrappers. This keeps the transport swappable and makes
testing easier.
"""

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    import httpx

    from ..api.auth_api import AuthReply
    from ..tasks.task_models import Task, TaskDraft, TaskStatus


class Transport(Protocol):
    """Carries requests together with the opaque session credential."""

    async def request(self, method: str, path: str, *, json: Any = None) -> httpx.Response: ...

    def clear_credentials(self) -> None: ...


class AuthGateway(Protocol):
    """
    Remote auth API.

    Every call returns an AuthReply for any HTTP status and raises
    TransportFailure when no response arrived.
    """

    async def register(self, email: str, password: str) -> AuthReply: ...
    async def login(self, email: str, password: str) -> AuthReply: ...
    async def logout(self) -> AuthReply: ...
    async def refresh(self) -> AuthReply: ...
    async def check(self) -> AuthReply: ...

    def clear_credentials(self) -> None: ...


class TaskGateway(Protocol):
    """Remote task API. Failures raise RequestFailed."""

    async def list_tasks(self) -> list[Task]: ...
    async def create_task(self, draft: TaskDraft) -> Task: ...
    async def update_status(self, task_id: str, status: TaskStatus) -> None: ...
    async def delete_task(self, task_id: str) -> None: ...
