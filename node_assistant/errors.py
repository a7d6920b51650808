"""Error types raised by LLM operations."""
from __future__ import annotations


class LLMError(RuntimeError):
    """Base class for every failure surfaced by an LLM operation."""


class MissingConfigurationError(LLMError):
    """The API URL or API key has not been configured."""


class SerializationError(LLMError):
    """The request body or the embedded node list could not be encoded."""


class RequestConstructionError(LLMError):
    """The HTTP request could not be built from the configured endpoint."""


class NetworkError(LLMError):
    """The upstream API could not be reached."""


class LLMTimeoutError(NetworkError):
    """The upstream API did not answer within the request timeout."""


class UpstreamError(LLMError):
    """The upstream API answered with a non-200 status."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"LLM API returned an error (HTTP {status_code}): {body}")
        self.status_code = status_code
        self.body = body


class ResponseParseError(LLMError):
    """The upstream response is not a chat-completion JSON document."""


class EmptyResultError(LLMError):
    """The upstream response did not contain a usable result."""


class UnsupportedClientFormatError(LLMError, ValueError):
    """Rule generation was asked for a client format it does not know."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Unsupported client format '{value}'")
        self.value = value


class SettingsError(LLMError):
    """The settings file exists but cannot be read as a JSON object."""
