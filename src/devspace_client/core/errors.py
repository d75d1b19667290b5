# src/devspace_client/core/errors.py

"""
Error taxonomy shared by the session manager, task sync and presentation.

Auth errors always reach the caller. Sync errors reach the caller for
create/load_all; status changes and deletions report them through the outbox.
"""

from __future__ import annotations


class DevSpaceError(Exception):
    """Base class for every error the client raises on purpose."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TransportFailure(DevSpaceError):
    """The request never produced an HTTP response (DNS, connect, timeout...)."""


# ---- Auth ----


class AuthError(DevSpaceError):
    pass


class InvalidCredentials(AuthError):
    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class NetworkFailure(AuthError):
    def __init__(self, message: str = "Network error. Please try again later.") -> None:
        super().__init__(message)


class NotAuthenticated(AuthError):
    def __init__(self, message: str = "You are not logged in.") -> None:
        super().__init__(message)


class RegistrationRejected(AuthError):
    def __init__(self, message: str = "Registration failed") -> None:
        super().__init__(message)


class SessionExpired(AuthError):
    def __init__(self, message: str = "Your session has expired. Please log in again.") -> None:
        super().__init__(message)


# ---- Task sync ----


class SyncError(DevSpaceError):
    pass


class RequestFailed(SyncError):
    """A task API call failed; status_code is None when no response arrived."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def transient(self) -> bool:
        # No response, or the server broke: worth another attempt.
        return self.status_code is None or self.status_code >= 500


def friendly_error_message(err: Exception) -> str:
    """Message suitable for printing in front of the user."""
    if isinstance(err, RequestFailed):
        if err.status_code is None:
            return f"{err.message} (server unreachable, try again later)"
        if err.status_code == 401:
            return "The server rejected the request: you are not logged in."
        return f"{err.message} (HTTP {err.status_code})"
    if isinstance(err, DevSpaceError):
        return err.message
    return str(err).strip() or err.__class__.__name__
