# src/devspace_client/session/models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class SessionPhase(StrEnum):
    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    REFRESHING = "refreshing"


@dataclass(slots=True)
class Session:
    """
    The client's belief about whether it holds a server-recognized session.

    Owned by SessionLifecycleManager; everyone else only reads it.
    A session stays authenticated while a renewal is in flight.
    """

    phase: SessionPhase = SessionPhase.ANONYMOUS
    last_error: str | None = None

    @property
    def authenticated(self) -> bool:
        return self.phase in (SessionPhase.AUTHENTICATED, SessionPhase.REFRESHING)
