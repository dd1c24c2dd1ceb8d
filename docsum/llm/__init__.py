"""LLM (Large Language Model) integration package.

This package provides utilities to work with OpenAI-compatible chat
completion APIs, including request helpers and the retrying summarizer.
"""

from .client import (
    get_picked_model,
    get_client,
    chat_completion,
    check_model_health,
)
from .summarize import (
    SYSTEM_PROMPT,
    SummarizationClient,
    build_messages,
    is_retryable,
)

__all__ = [
    "get_picked_model",
    "get_client",
    "chat_completion",
    "check_model_health",
    "SYSTEM_PROMPT",
    "SummarizationClient",
    "build_messages",
    "is_retryable",
]
