# =============================================================================
# agents/ - AI Agent Definitions
# =============================================================================
# This package contains the AI agents of the platform:
# - assistant.py: Gisabo support chatbot (OpenAI chat completions)
#
# Prompts:
# - prompts/assistant_system.py: System prompt and chat suggestions
# =============================================================================

from agents.assistant import Assistant

__all__ = [
    "Assistant",
]
