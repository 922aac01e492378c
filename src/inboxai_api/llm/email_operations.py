"""
Email summarization and classification built on text generation.

Both operations are fixed-prompt specializations of generate_text(): the
email body becomes the prompt, a constant system instruction steers the
model, and the model's text comes back untouched.
"""

import structlog

from inboxai_api.llm.base_client import BaseLLMClient
from inboxai_api.models.enums import EmailCategory
from inboxai_api.monitoring.metrics import email_classifications_total


logger = structlog.get_logger(__name__)

DEFAULT_EMAIL_MODEL = "mistral:7b-instruct"

SUMMARIZE_SYSTEM_PROMPT = """You are an AI assistant that summarizes emails.
Provide a concise, professional summary in 2-3 sentences.
Focus on the main points, action items, and key information."""

CLASSIFY_SYSTEM_PROMPT = """You are an AI assistant that classifies emails.
Analyze the email content and return ONLY ONE of these categories:
{categories}

Return only the category name, nothing else.""".format(
    categories="\n".join(f"- {category.value}" for category in EmailCategory)
)


class EmailOperations:
    """
    Named email capabilities over an LLM client.

    The model is fixed per instance; callers needing another model use the
    client's generate_text() directly.
    """

    def __init__(self, llm_client: BaseLLMClient, model: str = DEFAULT_EMAIL_MODEL):
        self.llm_client = llm_client
        self.model = model

    async def summarize(self, email_text: str) -> str:
        """Summarize an email in 2-3 sentences, returned verbatim."""
        summary = await self.llm_client.generate_text(
            self.model, email_text, SUMMARIZE_SYSTEM_PROMPT
        )
        logger.info("Email summarized", model=self.model, summary_length=len(summary))
        return summary

    async def classify(self, email_text: str) -> str:
        """
        Classify an email into one of the EmailCategory labels.

        The label is returned exactly as the model produced it. A label
        outside the known set is logged and counted, not corrected.
        """
        label = await self.llm_client.generate_text(
            self.model, email_text, CLASSIFY_SYSTEM_PROMPT
        )

        category = EmailCategory.from_label(label)
        if category is None:
            logger.warning("Model returned a non-canonical category", model=self.model, label=label)
            email_classifications_total.labels(category="noncanonical", canonical="false").inc()
        else:
            logger.info("Email classified", model=self.model, category=category.value)
            email_classifications_total.labels(category=category.value, canonical="true").inc()
        return label
