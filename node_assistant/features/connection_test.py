"""Connection test feature."""
from __future__ import annotations

from dataclasses import dataclass

from ..errors import EmptyResultError
from ..llm import LLMPrompt
from .base import FeatureContext

PING_MESSAGE = "Reply with ok"


@dataclass
class ConnectionTestFeature:
    """Check that the configured API answers a one-line prompt."""

    context: FeatureContext

    def run(self) -> str:
        reply = self.context.llm.generate([LLMPrompt(role="user", content=PING_MESSAGE)])
        if not reply:
            raise EmptyResultError("LLM API returned an empty result")
        return reply
