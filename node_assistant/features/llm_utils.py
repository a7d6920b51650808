"""Helpers to interact with the LLM client."""
from __future__ import annotations

from typing import List

from ..llm import LLMClient, LLMPrompt


def build_conversation(*, system_prompt: str, user_prompt: str) -> List[LLMPrompt]:
    return [
        LLMPrompt(role="system", content=system_prompt),
        LLMPrompt(role="user", content=user_prompt),
    ]


def request_text_response(
    llm: LLMClient,
    *,
    system_prompt: str,
    user_prompt: str,
) -> str:
    """Send a system/user pair and return the reply text untouched."""
    return llm.generate(build_conversation(system_prompt=system_prompt, user_prompt=user_prompt))
