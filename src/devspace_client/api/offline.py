# src/devspace_client/api/offline.py

from __future__ import annotations

import asyncio
import json
import logging
import secrets
import uuid
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)

OFFLINE_BASE_URL = "http://devspace.offline"
SESSION_COOKIE = "token"

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo123"


@dataclass(slots=True)
class _User:
    id: str
    email: str
    password: str
    tasks: list[dict[str, str]] = field(default_factory=list)


def _json(status: int, body: Any, *, cookie: str | None = None) -> httpx.Response:
    headers = {}
    if cookie is not None:
        headers["set-cookie"] = cookie
    if body is None:
        headers["content-type"] = "application/json"
        return httpx.Response(status, content=b"null", headers=headers)
    return httpx.Response(status, json=body, headers=headers)


def _error(status: int, message: str) -> httpx.Response:
    return _json(status, {"error": message})


class OfflineBackend:
    """
    In-process stand-in for the DevSpace server, served through httpx.MockTransport.

    Used for demos when no server is running and as the remote side in tests.
    Behavior mirrors the real API:
    - register does not log in (the client follows up with /login)
    - sessions are opaque cookie tokens; /refresh rotates them
    - tasks are scoped to the logged-in user; unknown ids are 404
    """

    def __init__(
        self,
        *,
        auth_path: str = "/auth",
        tasks_path: str = "/api",
        latency_seconds: float = 0.0,
        seed_demo_user: bool = True,
    ) -> None:
        self.auth_path = auth_path.rstrip("/")
        self.tasks_path = tasks_path.rstrip("/")
        self.latency_seconds = max(0.0, float(latency_seconds))
        self._users: dict[str, _User] = {}
        self._sessions: dict[str, str] = {}  # token -> user id
        # (method, path) of every request received, in order.
        self.calls: list[tuple[str, str]] = []
        if seed_demo_user:
            self.add_user(DEMO_EMAIL, DEMO_PASSWORD)

    # ---- admin helpers ----

    def add_user(self, email: str, password: str) -> str:
        user = _User(id=uuid.uuid4().hex[:24], email=email, password=password)
        self._users[email] = user
        return user.id

    def revoke_all_sessions(self) -> None:
        """Forget every issued token, as if they all expired server-side."""
        self._sessions.clear()

    def tasks_of(self, email: str) -> list[dict[str, str]]:
        user = self._users.get(email)
        return [dict(t) for t in user.tasks] if user else []

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    # ---- request handling ----

    async def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append((request.method, path))
        if self.latency_seconds:
            await asyncio.sleep(self.latency_seconds)

        if path.startswith(self.auth_path + "/"):
            return self._handle_auth(request, path[len(self.auth_path):])
        if path.startswith(self.tasks_path + "/"):
            return self._handle_tasks(request, path[len(self.tasks_path):])
        return _error(404, "Not found")

    def _body(self, request: httpx.Request) -> dict[str, Any] | None:
        try:
            data = json.loads(request.content or b"null")
        except ValueError:
            return None
        return data if isinstance(data, dict) else None

    def _current_user(self, request: httpx.Request) -> _User | None:
        token = _cookie_from_header(request.headers.get("cookie", ""))
        if not token:
            return None
        user_id = self._sessions.get(token)
        if user_id is None:
            return None
        for user in self._users.values():
            if user.id == user_id:
                return user
        return None

    def _issue(self, user: _User) -> str:
        token = secrets.token_hex(16)
        self._sessions[token] = user.id
        return f"{SESSION_COOKIE}={token}; Path=/; HttpOnly; Max-Age=900"

    def _handle_auth(self, request: httpx.Request, endpoint: str) -> httpx.Response:
        method = request.method

        if method == "POST" and endpoint in ("/register", "/login"):
            body = self._body(request)
            email = str((body or {}).get("email") or "").strip()
            password = str((body or {}).get("password") or "")
            if not email or not password:
                return _error(400, "Invalid JSON format")

            if endpoint == "/register":
                if email in self._users:
                    return _error(409, "Email already registered")
                user_id = self.add_user(email, password)
                return _json(201, {"message": "User created successfully", "id": user_id})

            user = self._users.get(email)
            if user is None or user.password != password:
                return _error(401, "Invalid credentials")
            return _json(200, {"message": "Login successful"}, cookie=self._issue(user))

        if method == "POST" and endpoint == "/logout":
            token = _cookie_from_header(request.headers.get("cookie", ""))
            if token:
                self._sessions.pop(token, None)
            return _json(
                200,
                {"message": "Logged out successfully"},
                cookie=f"{SESSION_COOKIE}=; Path=/; HttpOnly; Max-Age=0",
            )

        if method == "POST" and endpoint == "/refresh":
            user = self._current_user(request)
            if user is None:
                return _error(401, "Invalid token")
            old = _cookie_from_header(request.headers.get("cookie", ""))
            self._sessions.pop(old, None)
            return _json(200, {"message": "Token refreshed"}, cookie=self._issue(user))

        if method == "GET" and endpoint == "/protected":
            user = self._current_user(request)
            if user is None:
                return _error(401, "Unauthorized")
            return _json(200, {"message": "You are authenticated!", "userID": user.id})

        return _error(404, "Not found")

    def _handle_tasks(self, request: httpx.Request, endpoint: str) -> httpx.Response:
        user = self._current_user(request)
        if user is None:
            return _error(401, "Unauthorized")

        method = request.method

        if method == "GET" and endpoint == "/gettasks":
            # The real server answers null for a user without tasks.
            return _json(200, [dict(t) for t in user.tasks] or None)

        if method == "POST" and endpoint == "/tasks":
            body = self._body(request)
            if body is None or not str(body.get("title") or "").strip():
                return _error(400, "title is required")
            task = {
                "id": uuid.uuid4().hex[:24],
                "title": str(body.get("title") or ""),
                "description": str(body.get("description") or ""),
                "status": str(body.get("status") or "todo"),
                "assignee": str(body.get("assignee") or ""),
                "dueDate": str(body.get("dueDate") or ""),
            }
            user.tasks.append(task)
            return _json(201, task)

        if endpoint.startswith("/tasks/"):
            task_id = endpoint[len("/tasks/"):]
            idx = next((i for i, t in enumerate(user.tasks) if t["id"] == task_id), None)
            if idx is None:
                return _error(404, "Task not found")

            if method == "PUT":
                body = self._body(request)
                if body is None:
                    return _error(400, "Invalid JSON format")
                if "status" in body:
                    user.tasks[idx]["status"] = str(body["status"])
                return _json(200, dict(user.tasks[idx]))

            if method == "DELETE":
                del user.tasks[idx]
                return _json(200, {"message": "Task deleted successfully"})

        return _error(404, "Not found")


def _cookie_from_header(header: str) -> str:
    for part in header.split(";"):
        name, _, value = part.strip().partition("=")
        if name == SESSION_COOKIE:
            return value
    return ""
