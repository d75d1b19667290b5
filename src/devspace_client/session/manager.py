# src/devspace_client/session/manager.py

from __future__ import annotations

"""
Session lifecycle manager.

Owns the Session object and every transition of it:

    anonymous -> authenticating -> authenticated -> refreshing -> authenticated | anonymous

The server is the only authority on validity: the client never inspects the
credential and never decides expiry from a local clock. Renewal is a round
trip driven by RenewalTimer.
"""

import asyncio
import logging
from collections.abc import Callable

from ..core.errors import (
    AuthError,
    InvalidCredentials,
    NetworkFailure,
    NotAuthenticated,
    RegistrationRejected,
    SessionExpired,
    TransportFailure,
)
from ..core.ports import AuthGateway
from .models import Session, SessionPhase
from .renewal import RenewalTimer

logger = logging.getLogger(__name__)

SessionListener = Callable[[Session], None]

LOGIN_REJECTED_MESSAGE = "Invalid credentials"
LOGIN_NETWORK_MESSAGE = "An error occurred during login. Please try again later."
REGISTER_NETWORK_MESSAGE = "An error occurred during registration. Please try again later."


class SessionLifecycleManager:
    def __init__(
        self,
        auth: AuthGateway,
        *,
        renew_interval_seconds: float,
        session: Session | None = None,
    ) -> None:
        self._auth = auth
        self.session = session if session is not None else Session()
        self.timer = RenewalTimer(self.renew, interval_seconds=renew_interval_seconds)
        self._listeners: list[SessionListener] = []
        self._write_lock = asyncio.Lock()
        # Bumped on every establish/reset; late replies from an older generation are dropped.
        self._generation = 0
        self._renewal: asyncio.Future[AuthError | None] | None = None

    # ---- read side ----

    def is_session_active(self) -> bool:
        return self.session.authenticated

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Call listener(session) after every transition. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ---- transitions ----

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.session)
            except Exception:
                logger.exception("Session listener failed")

    def _enter(self, phase: SessionPhase, *, error: str | None = None) -> None:
        self.session.phase = phase
        self.session.last_error = error
        logger.debug("Session -> %s", phase.value)
        self._notify()

    def _establish(self) -> None:
        self._generation += 1
        self._enter(SessionPhase.AUTHENTICATED)
        self.timer.arm()

    def _begin(self) -> None:
        """Enter authenticating; any renewal still on the wire becomes stale."""
        self._generation += 1
        self.timer.disarm()
        self._enter(SessionPhase.AUTHENTICATING)

    def _drop(self, error: str | None) -> None:
        """Back to anonymous; the renewal timer stops with it."""
        self._generation += 1
        self.timer.disarm()
        self._enter(SessionPhase.ANONYMOUS, error=error)

    def _require_current(self, generation: int) -> None:
        """A logout landed while an auth request was out; its reply no longer counts."""
        if generation == self._generation:
            return
        logger.info("Discarding auth reply received after logout")
        # The late reply may have set a cookie after logout cleared the jar.
        self._auth.clear_credentials()
        raise NotAuthenticated()

    # ---- operations ----

    async def login(self, email: str, password: str) -> None:
        async with self._write_lock:
            await self._login(email, password)

    async def _login(self, email: str, password: str) -> None:
        self._begin()
        generation = self._generation
        try:
            reply = await self._auth.login(email, password)
        except TransportFailure as exc:
            self._require_current(generation)
            logger.warning("Login failed: transport error")
            self._drop(LOGIN_NETWORK_MESSAGE)
            raise NetworkFailure(LOGIN_NETWORK_MESSAGE) from exc

        self._require_current(generation)
        if reply.ok:
            logger.info("Login succeeded")
            self._establish()
            return

        if reply.status_code >= 500:
            logger.warning("Login failed: server error %s", reply.status_code)
            self._drop(LOGIN_NETWORK_MESSAGE)
            raise NetworkFailure(LOGIN_NETWORK_MESSAGE)

        logger.info("Login rejected (HTTP %s)", reply.status_code)
        self._drop(LOGIN_REJECTED_MESSAGE)
        raise InvalidCredentials(LOGIN_REJECTED_MESSAGE)

    async def register(self, email: str, password: str) -> None:
        """
        Create an account and end up logged in.

        The follow-up login makes the cookie transport carry the session
        whether or not the server already set it on registration.
        """
        async with self._write_lock:
            self._begin()
            generation = self._generation
            try:
                reply = await self._auth.register(email, password)
            except TransportFailure as exc:
                self._require_current(generation)
                logger.warning("Registration failed: transport error")
                self._drop(REGISTER_NETWORK_MESSAGE)
                raise NetworkFailure(REGISTER_NETWORK_MESSAGE) from exc

            self._require_current(generation)
            if not reply.ok:
                if reply.status_code >= 500 and not reply.message:
                    msg = REGISTER_NETWORK_MESSAGE
                else:
                    msg = reply.message or "Registration failed"
                logger.info("Registration rejected (HTTP %s)", reply.status_code)
                self._drop(msg)
                raise RegistrationRejected(msg)

            logger.info("Registration succeeded, establishing session")
            await self._login(email, password)

    async def logout(self) -> None:
        """
        Always ends anonymous, whatever the server says.

        Local state is reset before the network call so nothing can observe
        a half-logged-out client.
        """
        was_authenticated = self.session.authenticated
        self._drop(None)
        generation = self._generation

        try:
            reply = await self._auth.logout()
            if not reply.ok:
                logger.info("Remote logout returned HTTP %s (ignored)", reply.status_code)
        except TransportFailure:
            logger.info("Remote logout failed (ignored)")
        except Exception:
            logger.exception("Remote logout crashed (ignored)")

        # A login may have started while the logout request was out.
        if generation == self._generation:
            self._auth.clear_credentials()

        if was_authenticated:
            logger.info("Logged out")

    async def renew(self) -> None:
        """
        Silently extend the session.

        Only one renewal request is ever on the wire; concurrent callers
        wait for it and share its outcome.
        """
        if not self.session.authenticated:
            raise NotAuthenticated()

        if self._renewal is not None:
            outcome = await asyncio.shield(self._renewal)
            if outcome is not None:
                raise outcome
            if not self.session.authenticated:
                raise SessionExpired()
            return

        pending: asyncio.Future[AuthError | None] = asyncio.get_running_loop().create_future()
        self._renewal = pending
        outcome: AuthError | None = None
        try:
            outcome = await self._renew_once()
        finally:
            self._renewal = None
            if not pending.done():
                pending.set_result(outcome)

        if outcome is not None:
            raise outcome

    async def _renew_once(self) -> AuthError | None:
        generation = self._generation
        self._enter(SessionPhase.REFRESHING)

        try:
            reply = await self._auth.refresh()
            failure = None if reply.ok else f"HTTP {reply.status_code}"
        except TransportFailure as exc:
            failure = exc.message

        if generation != self._generation:
            # Logged out or logged in again while we waited; this reply is stale.
            logger.debug("Discarding stale renewal result")
            return None

        if failure is None:
            self._enter(SessionPhase.AUTHENTICATED)
            return None

        logger.warning("Session renewal failed (%s); session expired", failure)
        err = SessionExpired()
        self._drop(err.message)
        return err

    async def verify(self) -> None:
        """Ask the server whether the current credential is still good."""
        async with self._write_lock:
            try:
                reply = await self._auth.check()
            except TransportFailure as exc:
                # Keep whatever we believed before; we simply could not ask.
                raise NetworkFailure() from exc

            if reply.ok:
                if not self.session.authenticated:
                    self._establish()
                return

            if self.session.authenticated:
                self._drop(SessionExpired().message)
            raise NotAuthenticated()

    async def aclose(self) -> None:
        self.timer.disarm()
