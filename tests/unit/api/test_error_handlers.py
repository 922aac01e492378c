"""
Unit tests for exception-to-response mapping.
"""

from fastapi.testclient import TestClient

from inboxai_api.api.exceptions import ClientDisconnectedError, InvalidInputError
from inboxai_api.llm.exceptions import LLMTimeoutError


def add_failing_route(app, path, exc):
    @app.get(path)
    async def fail():
        raise exc


def test_invalid_input_is_400(app):
    add_failing_route(app, "/bad", InvalidInputError("Invalid JSON body"))

    response = TestClient(app).get("/bad")

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid JSON body"}


def test_unmapped_llm_error_is_500_with_message(app):
    add_failing_route(app, "/llm", LLMTimeoutError("Request timeout after 60s"))

    response = TestClient(app).get("/llm")

    assert response.status_code == 500
    assert response.json() == {"error": "Request timeout after 60s"}


def test_client_disconnect_is_499(app):
    add_failing_route(app, "/gone", ClientDisconnectedError("Client disconnected during /gone"))

    response = TestClient(app).get("/gone")

    assert response.status_code == 499


def test_unexpected_error_hides_details(app):
    add_failing_route(app, "/boom", KeyError("secret"))

    response = TestClient(app, raise_server_exceptions=False).get("/boom")

    assert response.status_code == 500
    assert response.json() == {"error": "internal server error"}
    assert "secret" not in response.text
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
