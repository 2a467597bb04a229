# =============================================================================
# agents/prompts/ - System Prompts for AI Agents
# =============================================================================
# This package contains system prompts for each agent:
# - assistant_system.py: Gisabo support assistant prompt + chat suggestions
#
# Organized with XML tags for clear structure.
# =============================================================================

from agents.prompts.assistant_system import (
    ASSISTANT_SYSTEM_PROMPT,
    CHAT_SUGGESTIONS,
    FALLBACK_REPLY,
)

__all__ = [
    "ASSISTANT_SYSTEM_PROMPT",
    "CHAT_SUGGESTIONS",
    "FALLBACK_REPLY",
]
