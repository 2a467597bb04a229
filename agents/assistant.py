# =============================================================================
# agents/assistant.py - Gisabo Support Assistant
# =============================================================================
# A single-turn chat agent: the client keeps the conversation and resends it
# with every message, the server keeps no chat state.
#
# Usage:
#   from agents.assistant import Assistant
#   assistant = Assistant()
#   reply = assistant.chat("Quels sont vos frais ?", history=[...])
# =============================================================================

from __future__ import annotations

import logging

from openai import OpenAI, OpenAIError

from app.config import settings
from app.exceptions import AssistantUnavailableError
from agents.prompts.assistant_system import (
    ASSISTANT_SYSTEM_PROMPT,
    CHAT_SUGGESTIONS,
    FALLBACK_REPLY,
)
from core.models.chat import ChatMessage

# Set up logging for this module
logger = logging.getLogger(__name__)


class Assistant:
    """
    Customer support chatbot backed by the OpenAI chat completions API.

    Example:
        assistant = Assistant()
        assistant.chat("Comment envoyer de l'argent au Burundi ?")

    Attributes:
        model: OpenAI model to use (default from settings)
        temperature: Generation temperature
        max_tokens: Reply length cap
        max_history: Max prior messages forwarded to the model
    """

    def __init__(
        self,
        client: OpenAI | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        max_history: int | None = None,
    ):
        """
        Initialize the assistant.

        Args:
            client: Preconfigured OpenAI client (default: built from OPENAI_API_KEY)
            model: OpenAI model ID (default: settings.OPENAI_MODEL)
            temperature: Default settings.ASSISTANT_TEMPERATURE
            max_tokens: Default settings.ASSISTANT_MAX_TOKENS
            max_history: Default settings.ASSISTANT_MAX_HISTORY
        """
        self._client = client
        self.model = model or settings.OPENAI_MODEL
        self.temperature = temperature if temperature is not None else settings.ASSISTANT_TEMPERATURE
        self.max_tokens = max_tokens or settings.ASSISTANT_MAX_TOKENS
        self.max_history = max_history if max_history is not None else settings.ASSISTANT_MAX_HISTORY

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not settings.OPENAI_API_KEY:
                raise AssistantUnavailableError("OPENAI_API_KEY is not configured")
            self._client = OpenAI(api_key=settings.OPENAI_API_KEY)
        return self._client

    # -------------------------------------------------------------------------
    # Main Entry Point
    # -------------------------------------------------------------------------

    def chat(self, message: str, history: list[ChatMessage] | None = None) -> str:
        """
        Answer a user message in the context of the prior conversation.

        Args:
            message: The new user message
            history: Earlier turns, oldest first

        Returns:
            The assistant's reply text

        Raises:
            AssistantUnavailableError: Missing API key or OpenAI failure
        """
        messages = self._build_messages(message, history or [])
        logger.info(f"Assistant request with {len(messages) - 2} history messages: '{message[:50]}'")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except OpenAIError as e:
            logger.error(f"OpenAI API call failed: {e}")
            raise AssistantUnavailableError(str(e))

        reply = response.choices[0].message.content if response.choices else None
        return reply or FALLBACK_REPLY

    def suggestions(self) -> list[str]:
        """Starter questions shown before the first message."""
        return list(CHAT_SUGGESTIONS)

    # -------------------------------------------------------------------------
    # Message Building
    # -------------------------------------------------------------------------

    def _build_messages(self, message: str, history: list[ChatMessage]) -> list[dict[str, str]]:
        """System prompt, then the most recent history, then the new message."""
        recent = history[-self.max_history:] if self.max_history else []

        messages = [{"role": "system", "content": ASSISTANT_SYSTEM_PROMPT}]
        messages.extend({"role": turn.role.value, "content": turn.content} for turn in recent)
        messages.append({"role": "user", "content": message})
        return messages
