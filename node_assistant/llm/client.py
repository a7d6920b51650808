"""OpenAI-compatible chat-completion client."""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Literal, Optional

import requests

from ..config import DEFAULT_TEMPERATURE, LLMConfig, REQUEST_TIMEOUT_SECONDS
from ..errors import (EmptyResultError, LLMTimeoutError, NetworkError,
                      RequestConstructionError, ResponseParseError,
                      SerializationError, UpstreamError)
from ..log import get_logger

logger = get_logger(__name__)

Role = Literal["system", "user", "assistant"]

CHAT_COMPLETIONS_SUFFIX = "/chat/completions"


@dataclass
class LLMPrompt:
    """Container for a prompt block sent to the LLM."""

    role: Role
    content: str

    def as_dict(self) -> dict:
        return {"role": self.role, "content": self.content}


def build_endpoint_url(api_url: str) -> str:
    """Derive the chat-completions endpoint from a configured base URL.

    ``https://api.openai.com`` and ``https://api.openai.com/v1`` both map to
    ``https://api.openai.com/v1/chat/completions``; a URL that already ends
    with ``/chat/completions`` is returned as-is.
    """
    if api_url.endswith(CHAT_COMPLETIONS_SUFFIX):
        return api_url
    if api_url.endswith("/v1"):
        return api_url + CHAT_COMPLETIONS_SUFFIX
    return api_url.rstrip("/") + "/v1" + CHAT_COMPLETIONS_SUFFIX


class LLMClient:
    """Abstract base class for chat-completion providers."""

    def generate(
        self,
        messages: Iterable[LLMPrompt],
        *,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: Optional[int] = None,
    ) -> str:
        raise NotImplementedError


class OpenAICompatibleClient(LLMClient):
    """Client for any API that speaks the OpenAI chat-completions protocol.

    The configuration is supplied by the caller and is not re-read; build a
    new client for every operation so that settings changes take effect.
    Each call performs exactly one POST and never retries.
    """

    def __init__(
        self,
        config: LLMConfig,
        *,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self.config = config
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return build_endpoint_url(self.config.api_url)

    def build_payload(
        self,
        messages: Iterable[LLMPrompt],
        *,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: Optional[int] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.config.model,
            "messages": [message.as_dict() for message in messages],
            "temperature": temperature,
        }
        if max_tokens:
            payload["max_tokens"] = max_tokens
        return payload

    def generate(
        self,
        messages: Iterable[LLMPrompt],
        *,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: Optional[int] = None,
    ) -> str:
        self.config.validate()
        payload = self.build_payload(messages, temperature=temperature, max_tokens=max_tokens)
        try:
            body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Failed to serialise request: {exc}") from exc

        endpoint = self.endpoint
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }
        try:
            headers["Authorization"].encode("latin-1")
        except UnicodeEncodeError as exc:
            raise RequestConstructionError(
                f"Failed to build request: API key is not a valid header value ({exc.reason})"
            ) from exc
        logger.debug(
            "POST %s (model=%s, messages=%d)", endpoint, self.config.model, len(payload["messages"])
        )
        try:
            response = requests.post(endpoint, data=body, headers=headers, timeout=self.timeout)
        except (
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
            requests.exceptions.InvalidURL,
            requests.exceptions.InvalidHeader,
        ) as exc:
            raise RequestConstructionError(f"Failed to build request: {exc}") from exc
        except requests.exceptions.Timeout as exc:
            raise LLMTimeoutError(
                f"LLM API did not respond within {self.timeout:g}s: {exc}"
            ) from exc
        except requests.exceptions.RequestException as exc:
            raise NetworkError(f"Request to LLM API failed: {exc}") from exc

        if response.status_code != 200:
            logger.warning("LLM API answered HTTP %d", response.status_code)
            raise UpstreamError(response.status_code, response.text)

        return extract_first_choice(response.content)


def extract_first_choice(raw: bytes | str) -> str:
    """Return the content of the first choice of a chat-completion body."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise ResponseParseError(f"Failed to parse response: {exc}") from exc
    if not isinstance(data, dict):
        raise ResponseParseError("Failed to parse response: expected a JSON object")

    choices: Any = data.get("choices")
    if choices is None:
        choices = []
    if not isinstance(choices, list):
        raise ResponseParseError("Failed to parse response: 'choices' is not a list")
    if not choices:
        raise EmptyResultError("LLM API returned no valid result")

    first = choices[0]
    if not isinstance(first, dict):
        raise ResponseParseError("Failed to parse response: malformed choice")
    message: Any = first.get("message")
    if message is None:
        message = {}
    if not isinstance(message, dict):
        raise ResponseParseError("Failed to parse response: malformed message")
    content: Any = message.get("content")
    if content is None:
        content = ""
    if not isinstance(content, str):
        raise ResponseParseError("Failed to parse response: content is not text")
    return content
