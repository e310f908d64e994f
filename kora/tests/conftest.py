"""Shared fixtures: an in-process fake Kora server behind httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from kora.client import Client

RPC_URL = "http://kora.test/"


class FakeKora:
    """Records every request and answers each RPC method from ``results``.

    A value that is an ``httpx.Response`` is returned as-is, anything else
    is wrapped in a JSON-RPC success envelope.
    """

    def __init__(self) -> None:
        self.results: dict[str, Any] = {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = json.loads(request.content)
        reply = self.results[body["method"]]
        if isinstance(reply, httpx.Response):
            return reply
        return httpx.Response(
            200, json={"jsonrpc": "2.0", "id": body["id"], "result": reply}
        )

    def bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]

    def methods(self) -> list[str]:
        return [b["method"] for b in self.bodies()]

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))

    def fail(self, method: str, code: Any, message: Any) -> None:
        self.results[method] = httpx.Response(
            200,
            json={"jsonrpc": "2.0", "id": 1, "error": {"code": code, "message": message}},
        )

    def client(self, **kwargs: Any) -> Client:
        return Client(RPC_URL, http_client=self.http_client(), **kwargs)


@pytest.fixture
def fake_kora() -> FakeKora:
    return FakeKora()
