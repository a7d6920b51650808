"""Proxy node records and the sanitised summaries sent to the LLM."""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Iterable, List, Sequence

from .errors import SerializationError

UNKNOWN_PROTOCOL = "unknown"

_SCHEME_ALIASES = {
    "hy2": "hysteria2",
    "hy": "hysteria",
    "socks": "socks5",
    "wg": "wireguard",
    "shadowsocks": "ss",
}

KNOWN_PROTOCOLS = frozenset(
    {
        "vmess",
        "vless",
        "trojan",
        "ss",
        "ssr",
        "hysteria",
        "hysteria2",
        "tuic",
        "socks5",
        "http",
        "https",
        "anytls",
        "wireguard",
        "naive",
        "snell",
    }
)


@dataclass
class NodeRecord:
    """Node as submitted by the web client; ``link`` carries credentials."""

    id: int
    name: str = ""
    link: str = ""
    country: str = ""
    group: str = ""


@dataclass
class NodeSummary:
    """Non-secret projection of a node that may leave the trust boundary."""

    id: int
    name: str
    protocol: str
    country: str
    group: str

    def as_dict(self) -> dict:
        return asdict(self)


def protocol_from_link(link: str) -> str:
    """Return the protocol tag encoded in a share link's scheme."""
    scheme, sep, _ = (link or "").strip().partition("://")
    if not sep:
        return UNKNOWN_PROTOCOL
    scheme = scheme.lower()
    # naive+https://, naive+quic://
    if scheme.startswith("naive+"):
        scheme = "naive"
    scheme = _SCHEME_ALIASES.get(scheme, scheme)
    if scheme not in KNOWN_PROTOCOLS:
        return UNKNOWN_PROTOCOL
    return scheme


def summarise(record: NodeRecord) -> NodeSummary:
    return NodeSummary(
        id=record.id,
        name=record.name,
        protocol=protocol_from_link(record.link),
        country=record.country,
        group=record.group,
    )


def summarise_nodes(records: Iterable[NodeRecord]) -> List[NodeSummary]:
    return [summarise(record) for record in records]


def nodes_to_json(nodes: Sequence[NodeSummary]) -> str:
    """Encode node summaries as the JSON array embedded in prompts."""
    try:
        return json.dumps([node.as_dict() for node in nodes], ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Failed to serialise node list: {exc}") from exc
