# =============================================================================
# core/models/chat.py - Chat Assistant Schemas
# =============================================================================
# These models define the API contract for the support chatbot:
# - ChatRequest: The new user message plus the prior conversation
# - ChatResponse: The assistant's reply
# - ChatMessage: Individual message in conversation history
#
# The server is stateless: the client keeps the history and resends it.
# =============================================================================

from enum import Enum

from pydantic import Field

from .base import CamelModel


class MessageRole(str, Enum):
    """
    Who sent the message in a conversation.

    - user: The human user
    - assistant: The AI assistant
    """
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(CamelModel):
    role: MessageRole
    content: str = Field(..., max_length=4000)


class ChatRequest(CamelModel):
    """
    Example:
        {
            "message": "Quels sont vos frais de transfert ?",
            "conversationHistory": [
                {"role": "user", "content": "Bonjour"},
                {"role": "assistant", "content": "Bonjour ! Comment puis-je vous aider ?"}
            ]
        }
    """
    message: str = Field(..., min_length=1, max_length=2000)
    conversation_history: list[ChatMessage] = Field(default_factory=list)


class ChatResponse(CamelModel):
    response: str


class SuggestionsResponse(CamelModel):
    suggestions: list[str]
