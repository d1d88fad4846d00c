import inspect
import json
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

F = TypeVar("F", bound=Callable[..., Any])

_TRACER_NAME = "sprest"


def _format(value: Any) -> str:
    if hasattr(value, "model_dump"):
        value = value.model_dump(mode="json", by_alias=True)
    try:
        return json.dumps(value, default=str)
    except (TypeError, ValueError):
        return repr(value)


def _inputs(func: Callable[..., Any], args: tuple, kwargs: dict) -> str:
    try:
        bound = inspect.signature(func).bind(*args, **kwargs)
    except TypeError:
        return _format({"args": args[1:], "kwargs": kwargs})
    arguments = {k: v for k, v in bound.arguments.items() if k not in ("self", "cls")}
    return _format(arguments)


def traced(
    name: Optional[str] = None,
    run_type: Optional[str] = None,
    hide_input: bool = False,
    hide_output: bool = False,
) -> Callable[[F], F]:
    """Record calls to the decorated function as OpenTelemetry spans.

    Without a configured tracer provider the spans are no-ops, so the
    decorator costs next to nothing unless the application opts in.

    Args:
        name: Span name, defaults to the function's qualified name.
        run_type: Stored as the ``run_type`` span attribute.
        hide_input: Do not record the call arguments (e.g. login names).
        hide_output: Do not record the return value.
    """

    def decorator(func: F) -> F:
        span_name = name or func.__qualname__

        def _start(span: trace.Span, args: tuple, kwargs: dict) -> None:
            if run_type:
                span.set_attribute("run_type", run_type)
            span.set_attribute(
                "input", "{}" if hide_input else _inputs(func, args, kwargs)
            )

        def _finish(span: trace.Span, result: Any) -> None:
            if not hide_output:
                span.set_attribute("output", _format(result))
            span.set_status(Status(StatusCode.OK))

        def _fail(span: trace.Span, exc: BaseException) -> None:
            span.record_exception(exc)
            span.set_status(Status(StatusCode.ERROR, str(exc)))

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                tracer = trace.get_tracer(_TRACER_NAME)
                with tracer.start_as_current_span(
                    span_name, record_exception=False, set_status_on_exception=False
                ) as span:
                    _start(span, args, kwargs)
                    try:
                        result = await func(*args, **kwargs)
                    except Exception as e:
                        _fail(span, e)
                        raise
                    _finish(span, result)
                    return result

            return async_wrapper  # type: ignore[return-value]

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            tracer = trace.get_tracer(_TRACER_NAME)
            with tracer.start_as_current_span(
                span_name, record_exception=False, set_status_on_exception=False
            ) as span:
                _start(span, args, kwargs)
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    _fail(span, e)
                    raise
                _finish(span, result)
                return result

        return wrapper  # type: ignore[return-value]

    return decorator
