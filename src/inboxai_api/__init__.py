"""
InboxAI API service.

Backend for the email-intelligence product:
- LLM gateway to a local Ollama inference server (generate, embed, health)
- Email summarization and classification on top of the gateway
- Placeholder product endpoints (threads, search, chat)

Architecture: FastAPI + uvicorn, httpx towards Ollama, structlog for logs
"""

__version__ = "0.1.0"
