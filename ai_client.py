"""
Text generation client for the teacher notepad assistant.

generate() always resolves to display text: a missing credential or any
service failure comes back as an explanatory message instead of an exception.
"""

from typing import Optional, Protocol

import httpx
from anthropic import AsyncAnthropic

from config import Settings
from logging_config import get_logger

logger = get_logger(__name__)

SYSTEM_INSTRUCTION = (
    "You are an assistant for a teacher. Your goal is to provide helpful, concise, "
    "and classroom-appropriate content. This could include lesson plan ideas, summaries "
    "of topics, quiz questions, or positive feedback for students."
)
TEMPERATURE = 0.7
TOP_P = 0.9

NOT_CONFIGURED_MESSAGE = "AI service is not configured. Please set the API_KEY environment variable."
EMPTY_RESPONSE_MESSAGE = "No content generated. The response was empty."
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred while contacting the AI service."


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str:
        ...


class AssistantClient:
    """Anthropic Messages API wrapper used by the notepad."""

    def __init__(
        self,
        api_key: str = "",
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 1024,
        client: Optional[AsyncAnthropic] = None,
    ):
        if client is None and api_key:
            # one request per prompt, no retries and no client-side timeout
            client = AsyncAnthropic(api_key=api_key, max_retries=0, timeout=httpx.Timeout(None))
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

        if self.client is None:
            logger.warning("ai_client_not_configured", hint="set API_KEY to enable the notepad assistant")
        else:
            logger.info("ai_client_initialized", model=model, max_tokens=max_tokens)

    @property
    def configured(self) -> bool:
        return self.client is not None

    async def generate(self, prompt: str) -> str:
        if self.client is None:
            return NOT_CONFIGURED_MESSAGE

        logger.info("ai_generation_requested", model=self.model, prompt_len=len(prompt))
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=SYSTEM_INSTRUCTION,
                temperature=TEMPERATURE,
                top_p=TOP_P,
                messages=[{"role": "user", "content": prompt}],
            )
            text = "".join(
                block.text for block in (response.content or []) if getattr(block, "type", None) == "text"
            )
        except Exception as e:
            logger.error("ai_generation_failed", error_type=type(e).__name__, error=str(e))
            message = str(e)
            if message:
                return f"An error occurred while contacting the AI service: {message}"
            return UNKNOWN_ERROR_MESSAGE

        logger.info("ai_generation_finished", text_len=len(text))
        if text:
            return text
        return EMPTY_RESPONSE_MESSAGE


def build_text_generator(settings: Settings) -> AssistantClient:
    """Construct the process-wide generator from configuration."""
    return AssistantClient(
        api_key=settings.api_key,
        model=settings.ai_model,
        max_tokens=settings.ai_max_tokens,
    )
