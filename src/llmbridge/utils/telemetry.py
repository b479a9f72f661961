"""OpenTelemetry tracing helpers for llmbridge.

Thin wrapper around the OpenTelemetry API so provider code can call
``get_tracer()`` without caring whether the SDK is installed. Without a
configured SDK the API hands out no-op tracers.

Usage::

    from llmbridge.utils.telemetry import get_tracer

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("llm.generate") as span:
        span.set_attribute(ATTR_MODEL, "gpt-4o")

Call :func:`configure_telemetry` once at startup to export spans
(requires the ``otel`` extra: ``pip install llmbridge[otel]``).
"""

from __future__ import annotations

from typing import Any

from opentelemetry import trace

# ---------------------------------------------------------------------------
# Semantic attribute keys
# ---------------------------------------------------------------------------

ATTR_MODEL = "llmbridge.model"
ATTR_PROVIDER = "llmbridge.provider"
ATTR_DIALECT = "llmbridge.dialect"
ATTR_STREAM = "llmbridge.stream"
ATTR_TOKENS_PROMPT = "llmbridge.tokens.prompt"
ATTR_TOKENS_COMPLETION = "llmbridge.tokens.completion"
ATTR_TOKENS_TOTAL = "llmbridge.tokens.total"
ATTR_ERROR_CODE = "llmbridge.error_code"
ATTR_CHUNKS = "llmbridge.stream.chunks"

_INSTRUMENTATION_NAME = "llmbridge"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a :class:`~opentelemetry.trace.Tracer` for *name*.

    If the OpenTelemetry SDK has not been configured the returned tracer
    is a no-op.
    """
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(
    *,
    service_name: str = "llmbridge",
    export_to_console: bool = True,
    otlp_endpoint: str | None = None,
) -> None:
    """Configure OpenTelemetry tracing (requires ``llmbridge[otel]``).

    Parameters
    ----------
    service_name:
        The ``service.name`` resource attribute.
    export_to_console:
        If ``True``, export spans as JSON to stdout.
    otlp_endpoint:
        If set, export spans via OTLP/gRPC to this endpoint.

    Raises
    ------
    ImportError
        If the ``opentelemetry-sdk`` package is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor  # pyright: ignore[reportMissingImports]
    except ImportError as exc:
        msg = (
            "opentelemetry-sdk is required for configure_telemetry(). "
            "Install it with: pip install llmbridge[otel]"
        )
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))

    if export_to_console:
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter  # pyright: ignore[reportMissingImports]

        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    if otlp_endpoint:
        _add_otlp_exporter(provider, BatchSpanProcessor, otlp_endpoint)

    trace.set_tracer_provider(provider)


def _add_otlp_exporter(provider: Any, processor_cls: Any, endpoint: str) -> None:
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter  # pyright: ignore[reportMissingImports]
    except ImportError as exc:
        msg = (
            "opentelemetry-exporter-otlp is required for OTLP export. "
            "Install it with: pip install llmbridge[otel]"
        )
        raise ImportError(msg) from exc

    provider.add_span_processor(processor_cls(OTLPSpanExporter(endpoint=endpoint)))


def record_usage(span: trace.Span, usage: Any) -> None:
    """Copy framework usage counters onto *span* when present."""
    if usage is None:
        return
    for attr, value in (
        (ATTR_TOKENS_PROMPT, usage.prompt_token_count),
        (ATTR_TOKENS_COMPLETION, usage.candidates_token_count),
        (ATTR_TOKENS_TOTAL, usage.total_token_count),
    ):
        if value is not None:
            span.set_attribute(attr, int(value))
