# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass

import httpx

from devspace_client.api.offline import OfflineBackend
from devspace_client.cli.bootstrap import create_initial_state
from devspace_client.core.state import AppState


@dataclass(slots=True)
class FailureRule:
    method: str
    path_prefix: str
    status: int | None  # None -> connection error
    times: int | None  # None -> forever


class FlakyBackend(OfflineBackend):
    """
    OfflineBackend with failure injection.

    Matching requests are still recorded in .calls but never reach the
    real handlers, so server state is left untouched.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.rules: list[FailureRule] = []

    def fail(self, method: str, path_prefix: str, *, status: int | None = 503, times: int | None = 1) -> None:
        self.rules.append(FailureRule(method.upper(), path_prefix, status, times))

    def count(self, method: str, path_prefix: str = "") -> int:
        return sum(1 for m, p in self.calls if m == method.upper() and p.startswith(path_prefix))

    async def handle(self, request: httpx.Request) -> httpx.Response:
        for rule in self.rules:
            if request.method != rule.method or not request.url.path.startswith(rule.path_prefix):
                continue
            if rule.times is not None:
                rule.times -= 1
                if rule.times <= 0:
                    self.rules.remove(rule)
            self.calls.append((request.method, request.url.path))
            if rule.status is None:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(rule.status, json={"error": "injected failure"})
        return await super().handle(request)


def build_state(settings, backend: OfflineBackend) -> AppState:
    """AppState wired to an in-process backend instead of the network."""
    return create_initial_state(settings=settings, transport=backend.transport())
