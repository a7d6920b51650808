"""Rule Generator feature."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from ..errors import UnsupportedClientFormatError
from ..log import get_logger
from ..nodes import NodeSummary, nodes_to_json
from .base import FeatureContext, FeatureResult
from .llm_utils import request_text_response

logger = get_logger(__name__)


class ClientFormat(str, Enum):
    clash = "clash"
    surge = "surge"
    generic = "generic"

    @classmethod
    def parse(cls, value: str | None) -> "ClientFormat":
        """Map a client tag to a format; an empty tag selects Clash."""
        normalised = (value or "").strip().lower()
        if not normalised:
            return cls.clash
        try:
            return cls(normalised)
        except ValueError:
            raise UnsupportedClientFormatError(value or "") from None


_FORMAT_DESCRIPTIONS = {
    ClientFormat.clash: """the rules section of a Clash/Mihomo YAML config. Example:
rules:
  - DOMAIN-SUFFIX,google.com,GroupName
  - GEOIP,CN,DIRECT
  - MATCH,GroupName""",
    ClientFormat.surge: """Surge rule syntax. Example:
[Rule]
DOMAIN-SUFFIX,google.com,GroupName
GEOIP,CN,DIRECT
FINAL,GroupName""",
    ClientFormat.generic: "generic proxy rule syntax",
}


def format_description(client_format: ClientFormat) -> str:
    try:
        return _FORMAT_DESCRIPTIONS[client_format]
    except KeyError:
        raise UnsupportedClientFormatError(str(client_format)) from None


def build_system_prompt(client_format: ClientFormat) -> str:
    return f"""You are a proxy subscription rule generation assistant. Using the nodes and \
requirements supplied by the user, generate suitable {client_format.value} subscription rules.

Rule format: {format_description(client_format)}

Return the result as JSON:
{{
  "rules": "the generated rules, as a single string",
  "proxyGroups": [
    {{
      "name": "group name",
      "type": "select/url-test/fallback",
      "nodeIds": [1, 2, 3]
    }}
  ],
  "description": "explanation of the rules"
}}

Notes:
- return only JSON, nothing else
- include the usual routing rules (direct for domestic traffic, proxy for foreign traffic, etc.)
- proxy group names should be short and clear
- nodeIds must use the ids of the original nodes"""


DEFAULT_INSTRUCTION = (
    "Based on the region and type of each node, generate suitable routing rules. "
    "Include the usual rules: direct for domestic traffic, proxy for foreign traffic, "
    "and separate routing for streaming services."
)


@dataclass
class RuleGeneratorFeature:
    """Ask the LLM for client routing rules and proxy groups."""

    context: FeatureContext

    def run(
        self,
        nodes: Sequence[NodeSummary],
        client_format: ClientFormat = ClientFormat.clash,
        instruction: str = "",
    ) -> FeatureResult:
        nodes_json = nodes_to_json(nodes)
        system_prompt = build_system_prompt(client_format)
        prompt = f"Here is the list of available nodes:\n{nodes_json}\n\n"
        if instruction:
            prompt += f"User requirements: {instruction}"
        else:
            prompt += DEFAULT_INSTRUCTION
        content = request_text_response(
            self.context.llm, system_prompt=system_prompt, user_prompt=prompt
        )
        logger.info("LLM rule generation completed (%s, %d nodes)", client_format.value, len(nodes))
        return FeatureResult(title="Rule Generation", content=content)
