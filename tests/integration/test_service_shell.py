"""Integration tests for the service shell: real listener, real shutdown."""

import asyncio
import os
import signal
import socket
import threading
import time

import httpx
import pytest

from inboxai_api.llm.ollama_client import OllamaClient
from inboxai_api.main import create_app
from inboxai_api.server import EXIT_OK, EXIT_STARTUP_FAILURE, ServerStartupError, ServiceShell
from tests.fixtures import generate_response

pytestmark = pytest.mark.integration


@pytest.fixture
def app(shell_settings, backend):
    app = create_app(shell_settings, llm_client=OllamaClient(transport=backend.transport))
    app.state.slow_request_started = threading.Event()

    @app.get("/slow")
    async def slow():
        app.state.slow_request_started.set()
        await asyncio.sleep(0.5)
        return {"done": True}

    return app


@pytest.fixture
def shell(shell_settings, app):
    shell = ServiceShell(shell_settings, app=app)
    yield shell
    shell.server.should_exit = True


def get(url, **kwargs):
    with httpx.Client(trust_env=False) as http:
        return http.get(url, **kwargs)


def post(url, **kwargs):
    with httpx.Client(trust_env=False) as http:
        return http.post(url, **kwargs)


def url(shell, path):
    return f"http://127.0.0.1:{shell.port}{path}"


def test_serves_until_shutdown(shell, backend):
    backend.on("POST", "/api/generate", generate_response("work"))
    shell.start()
    port = shell.port

    assert get(url(shell, "/health"), timeout=5).json() == {"status": "ok"}
    response = post(url(shell, "/ollama/test"), json={"text": "hi"}, timeout=5)
    assert response.status_code == 200
    assert response.json()["category"] == "work"

    assert shell.shutdown() is True
    with pytest.raises(httpx.ConnectError):
        get(f"http://127.0.0.1:{port}/health", timeout=1)


def test_in_flight_request_completes_during_shutdown(shell, app):
    shell.start()
    port = shell.port
    result = {}

    def call_slow():
        result["response"] = get(f"http://127.0.0.1:{port}/slow", timeout=5)

    caller = threading.Thread(target=call_slow)
    caller.start()
    assert app.state.slow_request_started.wait(timeout=5)

    assert shell.shutdown() is True
    caller.join(timeout=5)

    assert result["response"].status_code == 200
    assert result["response"].json() == {"done": True}


def test_bind_failure_fails_startup(shell_settings, app):
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
        blocker.bind(("127.0.0.1", 0))
        blocker.listen()
        taken = blocker.getsockname()[1]

        settings = shell_settings.model_copy(update={"PORT": taken})
        shell = ServiceShell(settings, app=app)

        with pytest.raises(ServerStartupError):
            shell.start()
        assert ServiceShell(settings, app=app).run() == EXIT_STARTUP_FAILURE


def test_run_returns_after_shutdown_request(shell):
    def stop_when_listening():
        while not shell.server.started:
            time.sleep(0.05)
        shell.request_shutdown()

    threading.Thread(target=stop_when_listening, daemon=True).start()

    assert shell.run() == EXIT_OK
    assert not shell._thread.is_alive()


def test_sigint_triggers_graceful_shutdown(shell):
    def interrupt_when_listening():
        while not shell.server.started:
            time.sleep(0.05)
        time.sleep(0.2)
        os.kill(os.getpid(), signal.SIGINT)

    previous = signal.getsignal(signal.SIGINT)
    threading.Thread(target=interrupt_when_listening, daemon=True).start()

    assert shell.run() == EXIT_OK
    assert not shell._thread.is_alive()
    # handlers restored after the shell returns
    assert signal.getsignal(signal.SIGINT) is previous


def test_hanging_ollama_does_not_delay_listening(shell_settings):
    async def hang(request):
        await asyncio.sleep(30)
        return httpx.Response(200, json={"models": []})

    app = create_app(shell_settings, llm_client=OllamaClient(transport=httpx.MockTransport(hang)))
    shell = ServiceShell(shell_settings, app=app)
    try:
        shell.start(startup_timeout=2.0)
        assert get(url(shell, "/health"), timeout=5).json() == {"status": "ok"}
    finally:
        assert shell.shutdown() is True
