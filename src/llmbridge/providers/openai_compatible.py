"""OpenAICompatibleLlm — providers speaking the chat-completions dialect.

Requests go through LiteLLM's ``acompletion`` routed to its generic
OpenAI-compatible client, so any endpoint implementing ``/chat/completions``
works given a base URL and key. The completion callable is injectable so
tests (or callers with their own transport) can replace it.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import aclosing, nullcontext
from typing import Any

import litellm

from llmbridge.core.converters.openai import (
    build_chat_request,
    convert_request,
    convert_response,
    convert_stream_chunk,
    create_stream_accumulator,
)
from llmbridge.core.models import LlmRequest, LlmResponse
from llmbridge.providers.base import BaseProviderLlm
from llmbridge.providers.config import ClientSettings, ProviderConfig

logger = logging.getLogger(__name__)

CompletionFn = Callable[..., Awaitable[Any]]


class OpenAICompatibleLlm(BaseProviderLlm):
    """Base class for providers with an OpenAI-compatible API.

    Subclasses resolve their :class:`ClientSettings` and pass them to this
    constructor, and may override :meth:`provider_request_options` to add
    vendor-specific body fields.
    """

    dialect = "openai"

    def __init__(
        self,
        config: ProviderConfig,
        settings: ClientSettings,
        *,
        defaults: dict[str, Any] | None = None,
        completion: CompletionFn | None = None,
    ) -> None:
        super().__init__(config, defaults=defaults)
        self.settings = settings
        self._completion: CompletionFn = completion or litellm.acompletion

    def provider_request_options(self) -> dict[str, Any]:
        """Extra fields merged verbatim into every request body."""
        return {}

    def build_request(self, request: LlmRequest, *, stream: bool = False) -> dict[str, Any]:
        """Convert *request* into the chat-completion body for this provider."""
        return build_chat_request(
            self.model,
            convert_request(request),
            stream=stream,
            extra=self.provider_request_options(),
        )

    def transport_options(self) -> dict[str, Any]:
        """Connection settings passed to the completion call beside the body."""
        options: dict[str, Any] = {
            "custom_llm_provider": "openai",
            "api_base": self.settings.base_url,
            "api_key": self.settings.api_key,
            "timeout": self.settings.timeout,
            "num_retries": self.settings.max_retries,
        }
        if self.settings.headers:
            options["extra_headers"] = dict(self.settings.headers)
        return options

    async def _generate_single(self, request: LlmRequest) -> LlmResponse:
        body = self.build_request(request)
        response = await self._completion(**body, **self.transport_options())
        return convert_response(response)

    async def _generate_stream(self, request: LlmRequest) -> AsyncIterator[LlmResponse]:
        body = self.build_request(request, stream=True)
        stream = await self._completion(**body, **self.transport_options())

        acc = create_stream_accumulator()
        # wrappers without aclose release the connection themselves
        closing = aclosing(stream) if hasattr(stream, "aclose") else nullcontext(stream)
        async with closing:
            async for chunk in stream:
                result = convert_stream_chunk(chunk, acc)
                if result.response is not None:
                    yield result.response
                if result.is_complete:
                    break
            else:
                if acc.text or acc.tool_calls:
                    logger.debug(
                        "%s stream for %s ended without a finish reason",
                        self.provider_name,
                        self.model,
                    )
