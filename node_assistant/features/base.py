"""Feature base classes."""
from __future__ import annotations

from dataclasses import dataclass

from ..llm import LLMClient


@dataclass
class FeatureContext:
    """Runtime context passed to features when invoked."""

    llm: LLMClient


@dataclass
class FeatureResult:
    """Raw LLM reply produced by a feature, returned uninterpreted."""

    title: str
    content: str
