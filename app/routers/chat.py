# =============================================================================
# app/routers/chat.py - Support Chat Endpoints
# =============================================================================
# Endpoints:
#   POST /api/chat              - Send a message to the assistant
#   GET  /api/chat/suggestions  - Starter questions
#
# The conversation lives on the client; each request carries its history.
# =============================================================================

import logging

from fastapi import APIRouter

from app.dependencies import AssistantDep
from core.models.chat import ChatRequest, ChatResponse, SuggestionsResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=ChatResponse)
def chat(request: ChatRequest, assistant: AssistantDep) -> ChatResponse:
    """
    Ask the Gisabo assistant a question.

    Raises:
        422: Empty message
        503: Assistant not configured or OpenAI unreachable
    """
    reply = assistant.chat(request.message, request.conversation_history)
    return ChatResponse(response=reply)


@router.get("/suggestions", response_model=SuggestionsResponse)
def suggestions(assistant: AssistantDep) -> SuggestionsResponse:
    return SuggestionsResponse(suggestions=assistant.suggestions())
