"""Test doubles shared across the suite.

FakeOllamaBackend answers httpx.MockTransport requests the way an Ollama
server would and records every request so tests can assert on outbound calls.
"""

import json
from typing import Callable, Union

import httpx

Responder = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


def generate_response(text: str, model: str = "mistral:7b-instruct", **extra) -> httpx.Response:
    """Non-streaming /api/generate reply as Ollama sends it."""
    body = {
        "model": model,
        "created_at": "2026-10-19T09:00:00Z",
        "response": text,
        "done": True,
        "total_duration": 1_500_000_000,
        "prompt_eval_count": 42,
        "eval_count": 17,
    }
    body.update(extra)
    return httpx.Response(200, json=body)


def refuse_connection(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("Connection refused", request=request)


class FakeOllamaBackend:
    """Stands in for the Ollama server behind httpx.MockTransport.

    Usage:
        backend.on("POST", "/api/generate", generate_response("hi"))
        backend.on("GET", "/api/tags", lambda request: httpx.Response(500))
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Responder] = {}

    def on(self, method: str, path: str, responder: Responder) -> None:
        self.routes[(method, path)] = responder

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes.get((request.method, request.url.path))
        if responder is None:
            return httpx.Response(404, text="404 page not found")
        if callable(responder):
            return responder(request)
        return responder

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def payloads(self, path: str) -> list[dict]:
        return [json.loads(r.content) for r in self.calls(path)]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)
