"""Client for outfit selection via the configured LLM provider."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Protocol

from openai import APIError, AsyncOpenAI

from wardrobe_api.config.settings import Settings, get_settings
from wardrobe_api.services.errors import GenerationUnavailableError

logger = logging.getLogger(__name__)


class CompletionClient(Protocol):
    """Prompt in, reply text out. The outfit matcher depends only on this."""

    async def complete(self, messages: Sequence[Mapping[str, str]]) -> str:
        ...

    async def close(self) -> None:
        ...


class ChatGPTClient:
    """Thin client that talks to an OpenAI-compatible chat completions API.

    The underlying SDK client is created on first use, so a missing API key
    only fails requests that actually reach the model.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._client: AsyncOpenAI | None = None

    @property
    def model(self) -> str:
        return self._settings.openai_chat_model

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self._settings.openai_api_key:
                raise GenerationUnavailableError("OpenAI API key not configured")
            self._client = AsyncOpenAI(
                api_key=self._settings.openai_api_key,
                base_url=self._settings.openai_base_url.rstrip("/"),
                timeout=self._settings.openai_request_timeout,
                max_retries=0,
            )
        return self._client

    async def complete(self, messages: Sequence[Mapping[str, str]]) -> str:
        """Send the messages to the chat model and return the raw reply text."""

        client = self._get_client()
        try:
            response = await client.chat.completions.create(
                model=self._settings.openai_chat_model,
                messages=list(messages),  # type: ignore[arg-type]
                temperature=self._settings.openai_temperature,
                max_tokens=self._settings.openai_max_tokens,
                response_format={"type": "json_object"},
            )
        except APIError as exc:
            logger.error("Chat completion failed: %s", exc)
            raise GenerationUnavailableError(f"Failed to get AI recommendation: {exc}") from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def ping(self) -> bool:
        """Return ``True`` if the upstream service responds to a model listing call."""

        models = await self._get_client().models.list()
        return bool(models.data)

    async def close(self) -> None:
        """Release HTTP resources."""

        if self._client is not None:
            await self._client.close()
            self._client = None
