"""
Product routes for threads, search and chat.

These are placeholders with fixed response shapes so the web client can be
built against them.
"""

from fastapi import APIRouter

from inboxai_api.api.models import (
    ChatResponse,
    SearchResponse,
    ThreadDetailResponse,
    ThreadListResponse,
)

router = APIRouter()


@router.get("/threads", response_model=ThreadListResponse)
async def list_threads() -> ThreadListResponse:
    # TODO: query threads from Postgres once the mail sync job writes them
    return ThreadListResponse(threads=[])


@router.get("/threads/{thread_id}", response_model=ThreadDetailResponse)
async def get_thread(thread_id: str) -> ThreadDetailResponse:
    return ThreadDetailResponse(id=thread_id, subject="stub")


@router.post("/search", response_model=SearchResponse)
async def search() -> SearchResponse:
    # TODO: embed the query with OllamaClient.embed and run a pgvector KNN
    return SearchResponse(results=[])


@router.post("/chat", response_model=ChatResponse)
async def chat() -> ChatResponse:
    return ChatResponse(answer="stub", citations=[])
