"""LLM helpers for organising proxy nodes and generating subscription rules."""

__version__ = "0.1.0"
