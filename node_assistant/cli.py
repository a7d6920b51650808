"""Console harness for the node assistant operations.

Runs the same operations as the FastAPI routes without an HTTP server:

    python -m node_assistant.cli organize --nodes nodes.json
    python -m node_assistant.cli rules --nodes nodes.json --client-type surge
    python -m node_assistant.cli --api-url https://api.deepseek.com --api-key sk-... test

Node files hold a JSON array of objects with ``id``, ``name``, ``link``,
``country`` and ``group``. Credentials come from the settings file unless
overridden on the command line.
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Sequence

from .config import LLMConfig, get_log_level, get_settings_path, load_llm_config
from .errors import LLMError
from .features import (ClientFormat, ConnectionTestFeature, FeatureContext,
                       NodeOrganizerFeature, RuleGeneratorFeature)
from .llm import OpenAICompatibleClient
from .log import setup_logging
from .nodes import NodeRecord, NodeSummary, summarise_nodes
from .settings import JsonFileSettingsStore


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Use the LLM node assistant without running the API server."
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Settings JSON file (defaults to NODE_ASSISTANT_SETTINGS_PATH or data/settings.json).",
    )
    parser.add_argument("--api-url", default=None, help="Override the configured API URL.")
    parser.add_argument("--api-key", default=None, help="Override the configured API key.")
    parser.add_argument("--model", default=None, help="Override the configured model.")
    commands = parser.add_subparsers(dest="command", required=True)

    organize = commands.add_parser("organize", help="Group nodes with the LLM.")
    organize.add_argument("--nodes", type=Path, required=True, help="JSON file with nodes.")
    organize.add_argument("--instruction", default="", help="Optional instruction.")

    rules = commands.add_parser("rules", help="Generate subscription rules.")
    rules.add_argument("--nodes", type=Path, required=True, help="JSON file with nodes.")
    rules.add_argument(
        "--client-type",
        default=ClientFormat.clash.value,
        choices=[fmt.value for fmt in ClientFormat],
    )
    rules.add_argument("--instruction", default="", help="Optional instruction.")

    commands.add_parser("test", help="Test the API connection.")
    return parser.parse_args(argv)


def load_nodes(path: Path) -> List[NodeSummary]:
    with path.open("r", encoding="utf-8") as handle:
        raw = json.load(handle)
    if not isinstance(raw, list):
        raise ValueError(f"{path} must contain a JSON array of nodes")
    records = [
        NodeRecord(
            id=int(entry["id"]),
            name=str(entry.get("name", "")),
            link=str(entry.get("link", "")),
            country=str(entry.get("country", "")),
            group=str(entry.get("group", "")),
        )
        for entry in raw
    ]
    return summarise_nodes(records)


def resolve_config(args: argparse.Namespace) -> LLMConfig:
    store = JsonFileSettingsStore(args.settings or get_settings_path())
    config = load_llm_config(store)
    if args.api_url is not None:
        config.api_url = args.api_url
    if args.api_key is not None:
        config.api_key = args.api_key
    if args.model:
        config.model = args.model
    return config


def run(args: argparse.Namespace) -> str:
    config = resolve_config(args)
    config.validate()
    ctx = FeatureContext(llm=OpenAICompatibleClient(config))
    if args.command == "test":
        ConnectionTestFeature(ctx).run()
        return "LLM API connection succeeded"
    nodes = load_nodes(args.nodes)
    if not nodes:
        raise ValueError("Node list must not be empty")
    if args.command == "organize":
        return NodeOrganizerFeature(ctx).run(nodes, args.instruction).content
    return RuleGeneratorFeature(ctx).run(
        nodes, ClientFormat.parse(args.client_type), args.instruction
    ).content


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(get_log_level())
    try:
        output = run(args)
    except (LLMError, KeyError, ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
