import functools
from typing import Any, Callable, Dict, Optional, TypeVar

from opentelemetry.trace import SpanKind, Status, StatusCode

from sqlcomposer.telemetry import get_tracer


F = TypeVar('F', bound=Callable[..., Any])

logger = None


def _get_logger():
    """Get logger instance lazily."""
    global logger
    if logger is None:
        from sqlcomposer.logging import get_logger
        logger = get_logger(__name__)
    return logger


def traced(
    span_name: Optional[str] = None,
    *,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: Optional[Dict[str, Any]] = None,
    attribute_getter: Optional[Callable[..., Optional[Dict[str, Any]]]] = None,
) -> Callable[[F], F]:
    """Instrument a function with an OpenTelemetry span.

    Args:
        span_name: Optional explicit span name. Defaults to module-qualified function name.
        kind: Span kind, defaults to INTERNAL.
        attributes: Static span attributes to attach.
        attribute_getter: Callable returning additional attributes at call time.
            It receives the same arguments as the decorated function.
    """

    def decorator(func: F) -> F:

        def _collect_attributes(args: tuple, kwargs: dict) -> Dict[str, Any]:
            collected: Dict[str, Any] = {}
            if attributes:
                collected.update({k: v for k, v in attributes.items() if v is not None})

            if attribute_getter:
                try:
                    dynamic_attrs = attribute_getter(*args, **kwargs)
                except Exception as exc:  # pragma: no cover
                    _get_logger().warning("trace attribute getter failed: %s", exc)
                    dynamic_attrs = None

                if dynamic_attrs:
                    collected.update({k: v for k, v in dynamic_attrs.items() if v is not None})

            return collected

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            tracer = get_tracer(func.__module__)
            name = span_name or f"{func.__module__}.{func.__qualname__}"

            with tracer.start_as_current_span(name, kind=kind) as span:
                for key, value in _collect_attributes(args, kwargs).items():
                    span.set_attribute(key, value)

                try:
                    return func(*args, **kwargs)
                except Exception as exc:
                    span.record_exception(exc)
                    span.set_status(Status(StatusCode.ERROR, str(exc)))
                    raise

        return sync_wrapper  # type: ignore[return-value]

    return decorator
