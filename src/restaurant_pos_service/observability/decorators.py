"""OpenTelemetry tracing decorators."""

import functools
import inspect
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Span

from restaurant_pos_service.observability.config import SERVICE_NAME

F = TypeVar("F", bound=Callable[..., Any])


@contextmanager
def _span(
    tracer: trace.Tracer,
    name: str,
    func_name: str,
    id_kwargs: tuple[str, ...],
    kwargs: dict[str, Any],
) -> Iterator[Span]:
    with tracer.start_as_current_span(name) as span:
        span.set_attribute("service.name", SERVICE_NAME)
        span.set_attribute("function.name", func_name)
        # Identifiers passed by keyword (bill_id, item_id, ...) become span attributes
        for key in id_kwargs:
            if kwargs.get(key) is not None:
                span.set_attribute(f"pos.{key}", str(kwargs[key]))
        try:
            yield span
        except Exception as e:
            span.set_attribute("success", False)
            span.set_attribute("error.type", type(e).__name__)
            span.record_exception(e)
            raise
        span.set_attribute("success", True)


def traced(span_name: str | None = None, id_kwargs: tuple[str, ...] = ()) -> Callable[[F], F]:
    """Wrap a service method in an OpenTelemetry span.

    Args:
        span_name: Span name, defaults to the function name
        id_kwargs: Keyword argument names to record as ``pos.<name>`` attributes

    Returns:
        Decorator for sync or async callables

    Example:
        @traced("bill.replace", id_kwargs=("bill_id",))
        async def replace(self, bill_id: str, items: list[LineItem]) -> BillReplacement:
            ...
    """

    def decorator(func: F) -> F:
        name = span_name or func.__name__
        tracer = trace.get_tracer(SERVICE_NAME)

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                with _span(tracer, name, func.__name__, id_kwargs, kwargs):
                    return await func(*args, **kwargs)

            return async_wrapper  # type: ignore

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with _span(tracer, name, func.__name__, id_kwargs, kwargs):
                return func(*args, **kwargs)

        return sync_wrapper  # type: ignore

    return decorator
