"""
FastAPI dependency injection for the InboxAI API service.

The application factory builds one settings object, one LLM client and one
EmailOperations instance and parks them on ``app.state``; these dependencies
hand them to handlers. Nothing is constructed per request.
"""

import asyncio
from typing import Awaitable, TypeVar

import structlog
from fastapi import Request

from inboxai_api.api.exceptions import ClientDisconnectedError
from inboxai_api.config import Settings
from inboxai_api.llm.base_client import BaseLLMClient
from inboxai_api.llm.email_operations import EmailOperations

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DISCONNECT_POLL_INTERVAL = 0.5  # seconds


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


def get_llm_client(request: Request) -> BaseLLMClient:
    """Shared LLM client (safe for concurrent use)."""
    return request.app.state.llm_client


def get_email_operations(request: Request) -> EmailOperations:
    """Shared summarize/classify operations bound to the configured model."""
    return request.app.state.email_operations


async def cancel_on_disconnect(
    request: Request,
    awaitable: Awaitable[T],
    poll_interval: float = DISCONNECT_POLL_INTERVAL,
) -> T:
    """
    Await an outbound call, cancelling it if the inbound client disconnects.
    
    The call runs as its own task while this coroutine polls the connection.
    Results and exceptions of the call are passed through unchanged.
    
    Raises:
        ClientDisconnectedError: the client disconnected first
    """
    task = asyncio.ensure_future(awaitable)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=poll_interval)
            if done:
                return task.result()
            if await request.is_disconnected():
                task.cancel()
                logger.info(
                    "Client disconnected, outbound call cancelled",
                    path=request.url.path,
                )
                raise ClientDisconnectedError(f"Client disconnected during {request.url.path}")
    finally:
        if not task.done():
            task.cancel()
