"""
Unit tests for EmailOperations (summarize and classify).
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from structlog.testing import capture_logs

from inboxai_api.llm.base_client import BaseLLMClient
from inboxai_api.llm.email_operations import (
    CLASSIFY_SYSTEM_PROMPT,
    DEFAULT_EMAIL_MODEL,
    SUMMARIZE_SYSTEM_PROMPT,
    EmailOperations,
)
from inboxai_api.llm.exceptions import LLMConnectionError
from inboxai_api.models.enums import EmailCategory


@pytest.fixture
def mock_llm_client():
    client = MagicMock(spec=BaseLLMClient)
    client.generate_text = AsyncMock(return_value="")
    return client


def test_classify_prompt_lists_every_category():
    for category in EmailCategory:
        assert f"- {category.value}" in CLASSIFY_SYSTEM_PROMPT
    assert "ONLY ONE" in CLASSIFY_SYSTEM_PROMPT


def test_default_model():
    operations = EmailOperations(MagicMock(spec=BaseLLMClient))
    assert operations.model == DEFAULT_EMAIL_MODEL == "mistral:7b-instruct"


class TestSummarize:
    @pytest.mark.asyncio
    async def test_sends_email_with_summary_instruction(self, mock_llm_client):
        mock_llm_client.generate_text.return_value = "Lunch is moved to Friday."
        operations = EmailOperations(mock_llm_client, model="llama3:8b")

        summary = await operations.summarize("Hi team, lunch is moved to Friday.")

        assert summary == "Lunch is moved to Friday."
        mock_llm_client.generate_text.assert_awaited_once_with(
            "llama3:8b", "Hi team, lunch is moved to Friday.", SUMMARIZE_SYSTEM_PROMPT
        )

    @pytest.mark.asyncio
    async def test_output_not_trimmed(self, mock_llm_client):
        mock_llm_client.generate_text.return_value = "\n Summary. \n"
        operations = EmailOperations(mock_llm_client)

        assert await operations.summarize("text") == "\n Summary. \n"

    @pytest.mark.asyncio
    async def test_client_errors_propagate(self, mock_llm_client):
        mock_llm_client.generate_text.side_effect = LLMConnectionError("Failed to send request: refused")
        operations = EmailOperations(mock_llm_client)

        with pytest.raises(LLMConnectionError):
            await operations.summarize("text")


class TestClassify:
    @pytest.mark.asyncio
    async def test_sends_email_with_classification_instruction(self, mock_llm_client):
        mock_llm_client.generate_text.return_value = "work"
        operations = EmailOperations(mock_llm_client)

        label = await operations.classify("Quarterly numbers attached.")

        assert label == "work"
        mock_llm_client.generate_text.assert_awaited_once_with(
            "mistral:7b-instruct", "Quarterly numbers attached.", CLASSIFY_SYSTEM_PROMPT
        )

    @pytest.mark.asyncio
    async def test_canonical_label_returned_as_produced(self, mock_llm_client):
        mock_llm_client.generate_text.return_value = " Work\n"
        operations = EmailOperations(mock_llm_client)

        assert await operations.classify("text") == " Work\n"

    @pytest.mark.asyncio
    async def test_noncanonical_label_passed_through(self, mock_llm_client):
        mock_llm_client.generate_text.return_value = "Category: urgent-ish"
        operations = EmailOperations(mock_llm_client)

        with capture_logs() as logs:
            label = await operations.classify("text")

        assert label == "Category: urgent-ish"
        warnings = [entry for entry in logs if entry["log_level"] == "warning"]
        assert warnings[0]["event"] == "Model returned a non-canonical category"
        assert warnings[0]["label"] == "Category: urgent-ish"
