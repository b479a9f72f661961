"""BaseProviderLlm — the async generation interface every provider implements.

A provider converts a framework :class:`~llmbridge.core.models.LlmRequest`
into its vendor's wire format, hands it to an injected transport, and
converts what comes back. Failures never escape the generator: they are
yielded as error responses so the host framework handles every outcome the
same way.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Mapping
from typing import Any, ClassVar

from llmbridge.core.models import LlmRequest, LlmResponse
from llmbridge.core.wire import ensure_request
from llmbridge.providers.config import ProviderConfig
from llmbridge.utils.telemetry import (
    ATTR_CHUNKS,
    ATTR_DIALECT,
    ATTR_ERROR_CODE,
    ATTR_MODEL,
    ATTR_PROVIDER,
    ATTR_STREAM,
    get_tracer,
    record_usage,
)

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


def create_error_response(error: BaseException, prefix: str) -> LlmResponse:
    """Wrap *error* as a framework error response.

    Errors exposing an integer HTTP status (``status_code`` as on litellm
    and httpx errors, or ``status``) get ``API_ERROR_<status>``; anything
    else gets ``<prefix>_ERROR``.
    """
    status = getattr(error, "status_code", None)
    if not isinstance(status, int) or isinstance(status, bool):
        status = getattr(error, "status", None)
    if isinstance(status, int) and not isinstance(status, bool):
        code = f"API_ERROR_{status}"
    else:
        code = f"{prefix}_ERROR"
    return LlmResponse(error_code=code, error_message=str(error), turn_complete=True)


class BaseProviderLlm(ABC):
    """Base class for all providers.

    Subclasses implement :meth:`_generate_single` and :meth:`_generate_stream`;
    this class adds request decoding, tracing, and error wrapping.
    """

    provider_name: ClassVar[str] = ""
    dialect: ClassVar[str] = "openai"
    supported_models: ClassVar[tuple[str, ...]] = ()
    config_cls: ClassVar[type[ProviderConfig]] = ProviderConfig

    def __init__(self, config: ProviderConfig, defaults: dict[str, Any] | None = None) -> None:
        self.config = config
        self.defaults = defaults or {}
        self.model = config.model

    @classmethod
    def supports(cls, model: str) -> bool:
        """Return whether any of :attr:`supported_models` matches *model*."""
        return any(re.search(pattern, model) for pattern in cls.supported_models)

    @classmethod
    def from_model(
        cls, model: str, *, defaults: dict[str, Any] | None = None, **options: Any
    ) -> BaseProviderLlm:
        """Build a provider for *model* from keyword options."""
        return cls(cls.config_cls(model=model, **options), defaults=defaults)

    @property
    @abstractmethod
    def error_prefix(self) -> str:
        """Prefix for error codes of failures without an HTTP status."""

    async def generate_content_async(
        self, request: LlmRequest | Mapping[str, Any], stream: bool = False
    ) -> AsyncIterator[LlmResponse]:
        """Generate content for *request*.

        Non-streaming calls yield exactly one response. Streaming calls yield
        partial text responses followed by one final response. Any failure
        is yielded as an error response and ends the generator.
        """
        with _tracer.start_as_current_span("llm.generate") as span:
            span.set_attribute(ATTR_MODEL, self.model)
            span.set_attribute(ATTR_PROVIDER, self.provider_name)
            span.set_attribute(ATTR_DIALECT, self.dialect)
            span.set_attribute(ATTR_STREAM, stream)
            chunks = 0
            try:
                req = ensure_request(request)
                if stream:
                    async for response in self._generate_stream(req):
                        chunks += 1
                        if response.turn_complete:
                            record_usage(span, response.usage_metadata)
                        yield response
                else:
                    response = await self._generate_single(req)
                    record_usage(span, response.usage_metadata)
                    if response.error_code:
                        span.set_attribute(ATTR_ERROR_CODE, response.error_code)
                    yield response
            except Exception as exc:
                error = create_error_response(exc, self.error_prefix)
                logger.warning(
                    "%s request for %s failed (%s): %s",
                    self.provider_name,
                    self.model,
                    error.error_code,
                    exc,
                )
                span.set_attribute(ATTR_ERROR_CODE, error.error_code or "")
                yield error
            finally:
                span.set_attribute(ATTR_CHUNKS, chunks)

    async def connect(self, request: LlmRequest) -> Any:
        """Bidirectional (live) connections are not supported by chat APIs."""
        raise NotImplementedError(f"{type(self).__name__} does not support bidirectional streaming")

    @abstractmethod
    async def _generate_single(self, request: LlmRequest) -> LlmResponse:
        """Perform one non-streaming call."""

    @abstractmethod
    def _generate_stream(self, request: LlmRequest) -> AsyncIterator[LlmResponse]:
        """Perform one streaming call, yielding converted responses."""
