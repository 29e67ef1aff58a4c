"""
Provider adapters for decision tree generation.
Normalizes OpenAI chat-completions, Anthropic messages and a generic
OpenAI-shaped custom endpoint into one contract: send() -> reply text.

Each send() performs exactly one outbound request on a client it closes
before returning. SDK-level retries are disabled; fallback policy lives in
the orchestrator. Every failure is
translated into the engine's error taxonomy at this seam:
- non-2xx status      -> ProviderHttpError(status, message)
- 401 / missing key   -> ProviderAuthError
- transport failure   -> ProviderConnectionError
- empty/odd payload   -> MalformedResponse / UnrecognizedResponseShape
"""

import logging
from typing import Any, Optional

import aiohttp
import anthropic
import openai

from treegen.shared.config import ProviderConfig, ProviderName
from treegen.shared.constants import (
    ANTHROPIC_BASE_URL,
    ANTHROPIC_FAILURE_MESSAGE,
    ANTHROPIC_MAX_TOKENS,
    CUSTOM_FAILURE_MESSAGE,
    DEFAULT_ANTHROPIC_MODEL,
    DEFAULT_OPENAI_MODEL,
    DEFAULT_TEMPERATURE,
    LLM_CALL_TIMEOUT_SECONDS,
    OPENAI_BASE_URL,
    OPENAI_FAILURE_MESSAGE,
    UNRECOGNIZED_RESPONSE_MESSAGE,
)
from treegen.shared.exceptions import (
    MalformedResponse,
    ProviderAuthError,
    ProviderConnectionError,
    ProviderHttpError,
    UnrecognizedResponseShape,
    UnsupportedProvider,
)
from treegen.shared.interfaces import IProviderAdapter

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _temperature(config: ProviderConfig) -> float:
    return DEFAULT_TEMPERATURE if config.temperature is None else config.temperature


def _chat_messages(question: str, system_prompt: str) -> list:
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": question},
    ]


def _error_message(body: Any, fallback: str) -> str:
    """Pull ``error.message`` out of a provider error body.

    Anthropic bodies are ``{"type": "error", "error": {...}}``; the OpenAI
    SDK already unwraps to the inner ``{"message": ...}`` object.
    """
    if isinstance(body, dict):
        inner = body.get("error", body)
        if isinstance(inner, dict) and inner.get("message"):
            return str(inner["message"])
        if isinstance(inner, str) and inner:
            return inner
    return fallback


def _status_error(status: int, message: str) -> ProviderHttpError:
    if status in (401, 403):
        return ProviderAuthError(message, status=status)
    return ProviderHttpError(status, message)


def _require_api_key(config: ProviderConfig, provider: str) -> None:
    if not config.api_key:
        raise ProviderAuthError(f"{provider} API key is not configured")


# ---------------------------------------------------------------------------
# OpenAI-style adapter
# ---------------------------------------------------------------------------

class OpenAIAdapter(IProviderAdapter):
    """Chat completions with JSON-mode output requested."""

    def _make_client(self, config: ProviderConfig) -> openai.AsyncOpenAI:
        return openai.AsyncOpenAI(
            api_key=config.api_key,
            base_url=OPENAI_BASE_URL,
            max_retries=0,
            timeout=LLM_CALL_TIMEOUT_SECONDS,
        )

    async def send(self, question: str, system_prompt: str, config: ProviderConfig) -> str:
        _require_api_key(config, "OpenAI")
        client = self._make_client(config)
        model = config.model or DEFAULT_OPENAI_MODEL
        logger.debug(f"OpenAI request (model: {model})")
        try:
            response = await client.chat.completions.create(
                model=model,
                messages=_chat_messages(question, system_prompt),
                temperature=_temperature(config),
                response_format={"type": "json_object"},
            )
        except openai.APIStatusError as e:
            raise _status_error(e.status_code, _error_message(e.body, OPENAI_FAILURE_MESSAGE)) from e
        except openai.APIConnectionError as e:
            raise ProviderConnectionError(f"OpenAI connection failed: {e}") from e
        finally:
            await client.close()

        choice = response.choices[0] if response.choices else None
        if choice is None or not choice.message.content:
            raise MalformedResponse("OpenAI returned an empty response")
        return choice.message.content


# ---------------------------------------------------------------------------
# Anthropic-style adapter
# ---------------------------------------------------------------------------

class AnthropicAdapter(IProviderAdapter):
    """Messages API; the system prompt travels outside the messages array."""

    def _make_client(self, config: ProviderConfig) -> anthropic.AsyncAnthropic:
        # The SDK sends the x-api-key and anthropic-version headers
        return anthropic.AsyncAnthropic(
            api_key=config.api_key,
            base_url=ANTHROPIC_BASE_URL,
            max_retries=0,
            timeout=LLM_CALL_TIMEOUT_SECONDS,
        )

    async def send(self, question: str, system_prompt: str, config: ProviderConfig) -> str:
        _require_api_key(config, "Anthropic")
        client = self._make_client(config)
        model = config.model or DEFAULT_ANTHROPIC_MODEL
        logger.debug(f"Anthropic request (model: {model})")
        try:
            response = await client.messages.create(
                model=model,
                max_tokens=ANTHROPIC_MAX_TOKENS,
                temperature=_temperature(config),
                system=system_prompt,
                messages=[{"role": "user", "content": question}],
            )
        except anthropic.APIStatusError as e:
            raise _status_error(e.status_code, _error_message(e.body, ANTHROPIC_FAILURE_MESSAGE)) from e
        except anthropic.APIConnectionError as e:
            raise ProviderConnectionError(f"Anthropic connection failed: {e}") from e
        finally:
            await client.close()

        if not response.content:
            raise MalformedResponse("Anthropic returned an empty response")
        text = getattr(response.content[0], "text", None)
        if not text:
            raise MalformedResponse("Anthropic response has no text block")
        return text


# ---------------------------------------------------------------------------
# Generic custom endpoint
# ---------------------------------------------------------------------------

def _dig(data: Any, *path) -> Optional[Any]:
    """Follow dict keys / list indexes, returning None on any miss."""
    current = data
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or len(current) <= step:
                return None
        elif not isinstance(current, dict):
            return None
        current = current[step] if isinstance(step, int) else current.get(step)
        if current is None:
            return None
    return current


# Tried in order; first non-empty string wins
_CONTENT_PATHS = (
    ("choices", 0, "message", "content"),
    ("content", 0, "text"),
    ("response",),
    ("text",),
)


def resolve_content(data: Any) -> str:
    """Find the reply text in an unknown response shape."""
    for path in _CONTENT_PATHS:
        value = _dig(data, *path)
        if isinstance(value, str) and value:
            return value
    raise UnrecognizedResponseShape(UNRECOGNIZED_RESPONSE_MESSAGE)


class CustomEndpointAdapter(IProviderAdapter):
    """POST an OpenAI-shaped body to a user-supplied URL."""

    async def send(self, question: str, system_prompt: str, config: ProviderConfig) -> str:
        if not config.endpoint:
            raise ProviderAuthError("Custom endpoint URL is not configured", status=0)

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {config.api_key}",
        }
        body = {
            "model": config.model,
            "messages": _chat_messages(question, system_prompt),
            "temperature": _temperature(config),
        }
        logger.debug(f"Custom endpoint request: {config.endpoint}")
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    config.endpoint,
                    json=body,
                    headers=headers,
                    timeout=aiohttp.ClientTimeout(total=LLM_CALL_TIMEOUT_SECONDS),
                ) as resp:
                    if not 200 <= resp.status < 300:
                        raise _status_error(resp.status, CUSTOM_FAILURE_MESSAGE)
                    try:
                        data = await resp.json(content_type=None)
                    except ValueError as e:
                        raise MalformedResponse(f"Custom endpoint returned non-JSON body: {e}") from e
        except aiohttp.ClientError as e:
            raise ProviderConnectionError(f"Custom endpoint connection failed: {e}") from e

        return resolve_content(data)


# ---------------------------------------------------------------------------
# Factory function (Open/Closed Principle - extend without modifying callers)
# ---------------------------------------------------------------------------

_ADAPTERS = {
    ProviderName.OPENAI.value: OpenAIAdapter,
    ProviderName.ANTHROPIC.value: AnthropicAdapter,
    ProviderName.CUSTOM.value: CustomEndpointAdapter,
}


def create_provider_adapter(provider: str) -> IProviderAdapter:
    """
    Factory: create the adapter for a live provider name.

    ``mock`` has no adapter; the orchestrator handles it before calling
    this. Unknown names raise UnsupportedProvider.
    """
    adapter_cls = _ADAPTERS.get(provider)
    if adapter_cls is None:
        raise UnsupportedProvider(provider)
    return adapter_cls()
