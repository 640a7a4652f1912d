"""
OpenTelemetry tracing helpers.

Spans are exported only when ``OTEL_EXPORTER_OTLP_ENDPOINT`` is set and the
``otlp`` extra is installed; otherwise the API's no-op tracer is used, so the
helpers cost next to nothing. ``OTEL_SDK_DISABLED=true`` turns them into
pass-throughs.
"""

import functools
import os
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from opentelemetry import trace as otel_trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Span, Status, StatusCode

#: Longest attribute value recorded on a span.
MAX_ATTRIBUTE_LENGTH = 100


class TelemetryManager:
    """Holds the tracer used by ``trace_operation`` and ``trace_function``."""

    def __init__(self, service_name: str = "package-release-check"):
        self.service_name = service_name
        self.enabled = os.getenv("OTEL_SDK_DISABLED", "false").lower() != "true"
        self.tracer: otel_trace.Tracer | None = None

        if self.enabled:
            self._install_exporter(os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT"))
            self.tracer = otel_trace.get_tracer(__name__)

    def _install_exporter(self, endpoint: str | None) -> None:
        """Register a batching OTLP/HTTP exporter for ``endpoint``."""
        if not endpoint:
            return

        try:
            from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
                OTLPSpanExporter,
            )
        except ImportError:
            logger.warning(
                "OTEL_EXPORTER_OTLP_ENDPOINT is set but the OTLP exporter is "
                "not installed; install the 'otlp' extra to export spans"
            )
            return

        provider = TracerProvider(
            resource=Resource.create({"service.name": self.service_name})
        )
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint))
        )
        otel_trace.set_tracer_provider(provider)

    @contextmanager
    def trace_operation(
        self, operation_name: str, attributes: dict[str, Any] | None = None
    ) -> Iterator[Span | None]:
        """
        Run a block inside a span.

        Exceptions are recorded on the span and re-raised.

        Args:
            operation_name: Span name
            attributes: Stringified and attached to the span

        Yields:
            The active span, or None when telemetry is disabled
        """
        if self.tracer is None:
            yield None
            return

        with self.tracer.start_as_current_span(operation_name) as span:
            for key, value in (attributes or {}).items():
                span.set_attribute(key, str(value)[:MAX_ATTRIBUTE_LENGTH])
            try:
                yield span
            except Exception as e:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                span.record_exception(e)
                raise

    def trace_function(
        self, operation_name: str | None = None
    ) -> Callable[[Callable], Callable]:
        """
        Decorator that wraps each call in ``trace_operation``.

        Args:
            operation_name: Span name, defaults to ``module.function``
        """

        def decorator(func: Callable) -> Callable:
            if self.tracer is None:
                return func

            name = operation_name or f"{func.__module__}.{func.__name__}"

            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                with self.trace_operation(name) as span:
                    started = time.time()
                    result = func(*args, **kwargs)
                    span.set_attribute("duration_seconds", time.time() - started)
                    return result

            return wrapper

        return decorator


_telemetry_manager: TelemetryManager | None = None


def get_telemetry_manager() -> TelemetryManager:
    """Get or create the process-wide TelemetryManager."""
    global _telemetry_manager
    if _telemetry_manager is None:
        _telemetry_manager = TelemetryManager()
    return _telemetry_manager


def trace_operation(operation_name: str, attributes: dict[str, Any] | None = None):
    """Module-level shortcut for ``TelemetryManager.trace_operation``."""
    return get_telemetry_manager().trace_operation(operation_name, attributes)


def trace_function(operation_name: str | None = None):
    """Module-level shortcut for ``TelemetryManager.trace_function``."""
    return get_telemetry_manager().trace_function(operation_name)
