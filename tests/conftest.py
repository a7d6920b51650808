"""Shared fixtures."""

from typing import List, Optional

import pytest

from node_assistant.config import LLMConfig
from node_assistant.llm import LLMClient, LLMPrompt
from node_assistant.nodes import NodeSummary


class RecordingClient(LLMClient):
    """LLM client double that records conversations and replays a fixed reply."""

    def __init__(self, reply: str = '{"groups": []}', error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[List[LLMPrompt]] = []
        self.configs: List[LLMConfig] = []

    def generate(self, messages, *, temperature=0.7, max_tokens=None):
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def recording_client():
    return RecordingClient()


@pytest.fixture
def sample_nodes():
    return [
        NodeSummary(id=1, name="HK 01", protocol="vmess", country="HK", group="default"),
        NodeSummary(id=7, name="日本 Tokyo", protocol="trojan", country="JP", group="premium"),
    ]


@pytest.fixture
def make_recording_client():
    return RecordingClient
