# src/devspace_client/api/auth_api.py

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from ..core.ports import Transport

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class AuthReply:
    ok: bool
    status_code: int
    message: str | None = None


def _server_message(resp: httpx.Response) -> str | None:
    """Pull {"error": "..."} / {"message": "..."} out of a JSON body, if any."""
    try:
        data = resp.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    for key in ("error", "message"):
        val = data.get(key)
        if isinstance(val, str) and val.strip():
            return val.strip()
    return None


class AuthApi:
    """
    Remote auth API under a base path (default /auth).

    Credentials travel only in JSON bodies. Session cookies set by the
    server stay inside the transport.
    """

    def __init__(self, transport: Transport, *, base_path: str = "/auth") -> None:
        self._transport = transport
        self._base = base_path.rstrip("/")

    async def _post(self, endpoint: str, body: dict[str, str] | None = None) -> AuthReply:
        resp = await self._transport.request("POST", f"{self._base}{endpoint}", json=body)
        return AuthReply(ok=resp.is_success, status_code=resp.status_code, message=_server_message(resp))

    async def register(self, email: str, password: str) -> AuthReply:
        return await self._post("/register", {"email": email, "password": password})

    async def login(self, email: str, password: str) -> AuthReply:
        return await self._post("/login", {"email": email, "password": password})

    async def logout(self) -> AuthReply:
        return await self._post("/logout")

    async def refresh(self) -> AuthReply:
        return await self._post("/refresh")

    async def check(self) -> AuthReply:
        resp = await self._transport.request("GET", f"{self._base}/protected")
        return AuthReply(ok=resp.is_success, status_code=resp.status_code, message=_server_message(resp))

    def clear_credentials(self) -> None:
        self._transport.clear_credentials()
