"""OpenTelemetry wrappers for typedparams.

Spans and counters are emitted only when the active configuration has
``telemetry_enabled`` set. Exporters and providers are the application's
business; this module talks to the OpenTelemetry API only.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from opentelemetry import metrics, trace
from opentelemetry.trace import Status, StatusCode

from .config import get_config

logger = logging.getLogger(__name__)

INSTRUMENTATION_NAME = "typedparams"

_tracer: trace.Tracer | None = None
_counters: dict[str, Any] = {}


class NoOpSpan:
    """No-op span for when telemetry is disabled."""

    def set_attribute(self, key: str, value: Any) -> None:
        pass

    def record_exception(self, exception: Exception) -> None:
        pass

    def is_recording(self) -> bool:
        return False


class SpanWrapper:
    """Wraps an OpenTelemetry span, filtering attribute values."""

    def __init__(self, otel_span: Any) -> None:
        self._span = otel_span

    def set_attribute(self, key: str, value: Any) -> None:
        if not self._span.is_recording() or value is None:
            return
        if isinstance(value, str | int | float | bool):
            self._span.set_attribute(key, value)
        else:
            self._span.set_attribute(key, str(value))

    def record_exception(self, exception: Exception) -> None:
        if self._span.is_recording():
            self._span.record_exception(exception)
            self._span.set_status(Status(StatusCode.ERROR, str(exception)))

    def is_recording(self) -> bool:
        return bool(self._span.is_recording())


def _get_tracer() -> trace.Tracer:
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(INSTRUMENTATION_NAME)
    return _tracer


@contextmanager
def traced_operation(
    name: str, attributes: dict[str, Any] | None = None
) -> Iterator[SpanWrapper | NoOpSpan]:
    """Context manager for tracing an operation.

    Args:
        name: Operation name (e.g., "typedparams.build_from_params")
        attributes: Initial span attributes

    Yields:
        A span wrapper, or a no-op span when telemetry is disabled
    """
    if not get_config().telemetry_enabled:
        yield NoOpSpan()
        return

    with _get_tracer().start_as_current_span(name) as otel_span:
        span = SpanWrapper(otel_span)
        for key, value in (attributes or {}).items():
            span.set_attribute(key, value)
        try:
            yield span
        except Exception as e:
            span.record_exception(e)
            raise


def record_counter(
    name: str,
    value: int = 1,
    attributes: dict[str, Any] | None = None,
    description: str = "",
) -> None:
    """Record a counter metric.

    Args:
        name: Metric name
        value: Value to add (default: 1)
        attributes: Metric attributes/labels
        description: Metric description
    """
    if not get_config().telemetry_enabled:
        return

    try:
        if name not in _counters:
            meter = metrics.get_meter(INSTRUMENTATION_NAME)
            _counters[name] = meter.create_counter(name, description=description, unit="1")
        _counters[name].add(value, attributes=attributes or {})
    except Exception as e:
        logger.debug(f"Failed to record counter {name}: {e}")
