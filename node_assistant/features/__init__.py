"""LLM-backed operations exposed by the node assistant."""

from .base import FeatureContext, FeatureResult
from .connection_test import ConnectionTestFeature
from .node_organizer import NodeOrganizerFeature
from .rule_generator import ClientFormat, RuleGeneratorFeature

__all__ = [
    "ClientFormat",
    "ConnectionTestFeature",
    "FeatureContext",
    "FeatureResult",
    "NodeOrganizerFeature",
    "RuleGeneratorFeature",
]
