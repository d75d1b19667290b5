# tests/test_renewal.py

from __future__ import annotations

import asyncio

import pytest

from devspace_client.api.offline import DEMO_EMAIL, DEMO_PASSWORD
from devspace_client.core.errors import SessionExpired
from devspace_client.session.renewal import RenewalTimer

from .fakes import build_state


@pytest.fixture()
def fast_settings(settings):
    settings.renew_interval_seconds = 0.02
    return settings


@pytest.mark.asyncio
async def test_timer_renews_periodically_while_authenticated(fast_settings, backend) -> None:
    state = build_state(fast_settings, backend)
    try:
        await state.sessions.login(DEMO_EMAIL, DEMO_PASSWORD)
        await asyncio.sleep(0.15)

        assert backend.count("POST", "/auth/refresh") >= 2
        assert state.sessions.is_session_active()
    finally:
        await state.aclose()


@pytest.mark.asyncio
async def test_timer_stops_after_failed_renewal(fast_settings, backend) -> None:
    state = build_state(fast_settings, backend)
    try:
        await state.sessions.login(DEMO_EMAIL, DEMO_PASSWORD)
        backend.revoke_all_sessions()
        await asyncio.sleep(0.1)

        assert not state.sessions.is_session_active()
        assert state.sessions.session.last_error == SessionExpired().message
        assert not state.sessions.timer.armed

        refreshes = backend.count("POST", "/auth/refresh")
        await asyncio.sleep(0.1)
        assert backend.count("POST", "/auth/refresh") == refreshes
    finally:
        await state.aclose()


@pytest.mark.asyncio
async def test_logout_disarms_and_login_rearms(fast_settings, backend) -> None:
    state = build_state(fast_settings, backend)
    try:
        await state.sessions.login(DEMO_EMAIL, DEMO_PASSWORD)
        await state.sessions.logout()
        assert not state.sessions.timer.armed

        before = backend.count("POST", "/auth/refresh")
        await asyncio.sleep(0.08)
        assert backend.count("POST", "/auth/refresh") == before

        await state.sessions.login(DEMO_EMAIL, DEMO_PASSWORD)
        assert state.sessions.timer.armed
    finally:
        await state.aclose()


@pytest.mark.asyncio
async def test_arming_twice_keeps_a_single_timer() -> None:
    calls = 0

    async def renew() -> None:
        nonlocal calls
        calls += 1

    timer = RenewalTimer(renew, interval_seconds=0.1)
    timer.arm()
    timer.arm()
    timer.arm()
    await asyncio.sleep(0.15)
    timer.disarm()

    assert calls == 1
    assert not timer.armed


@pytest.mark.asyncio
async def test_disarm_lets_an_in_flight_renewal_finish() -> None:
    started = finished = 0

    async def renew() -> None:
        nonlocal started, finished
        started += 1
        await asyncio.sleep(0.05)
        finished += 1

    timer = RenewalTimer(renew, interval_seconds=0.01)
    timer.arm()
    await asyncio.sleep(0.03)  # first renewal is on the wire
    timer.disarm()
    await asyncio.sleep(0.08)

    assert (started, finished) == (1, 1)
    assert not timer.armed
