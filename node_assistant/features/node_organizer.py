"""Node Organizer feature."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..log import get_logger
from ..nodes import NodeSummary, nodes_to_json
from .base import FeatureContext, FeatureResult
from .llm_utils import request_text_response

logger = get_logger(__name__)

SYSTEM_PROMPT = """You are a proxy node organising assistant. Following the user's instruction, \
classify, organise and make suggestions about the proxy nodes provided.
Return the result as JSON.

Required format:
{
  "groups": [
    {
      "name": "group name",
      "nodeIds": [1, 2, 3],
      "description": "what the group is for"
    }
  ],
  "suggestions": "organising advice and notes"
}

Notes:
- nodeIds must use the ids of the original nodes
- return only JSON, nothing else
- group names should be short and clear"""

DEFAULT_INSTRUCTION = "Group the nodes by region and protocol."


@dataclass
class NodeOrganizerFeature:
    """Ask the LLM to group nodes into named groups."""

    context: FeatureContext

    def run(
        self,
        nodes: Sequence[NodeSummary],
        instruction: str = "",
    ) -> FeatureResult:
        nodes_json = nodes_to_json(nodes)
        if instruction:
            prompt = (
                f"Here is the list of nodes to organise:\n{nodes_json}\n\n"
                f"User instruction: {instruction}"
            )
        else:
            prompt = f"Here is the list of nodes to organise:\n{nodes_json}\n\n{DEFAULT_INSTRUCTION}"
        content = request_text_response(
            self.context.llm, system_prompt=SYSTEM_PROMPT, user_prompt=prompt
        )
        logger.info("LLM node organisation completed (%d nodes)", len(nodes))
        return FeatureResult(title="Node Organisation", content=content)
