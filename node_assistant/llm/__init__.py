"""OpenAI-compatible LLM client."""

from .client import (LLMClient, LLMPrompt, OpenAICompatibleClient,
                     build_endpoint_url, extract_first_choice)

__all__ = [
    "LLMClient",
    "LLMPrompt",
    "OpenAICompatibleClient",
    "build_endpoint_url",
    "extract_first_choice",
]
