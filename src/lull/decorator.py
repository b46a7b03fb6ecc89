"""Decorator that coalesces calls to an async method into one run at a time."""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from functools import wraps
from typing import Any, TypeVar, cast, overload

from lull.config import DebounceConfig, coerce_delay
from lull.duration import Duration

logger = logging.getLogger("lull.decorator")

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


@dataclass(slots=True)
class _GuardState:
    """Per-instance state of one guarded method."""

    active: bool = False
    pending: Callable[[], Awaitable[Any]] | None = None


def _ensure_method_shaped(fn: Callable[..., Any]) -> None:
    if not callable(fn):
        raise TypeError(f"@debounce can only decorate methods, got {type(fn).__name__}")
    if not inspect.iscoroutinefunction(fn):
        raise TypeError("@debounce only supports async methods.")

    owner_path = fn.__qualname__.split(".")[:-1]
    if not owner_path or owner_path[-1] == "<locals>":
        raise TypeError(f"@debounce can only decorate methods, {fn.__qualname__} is not defined in a class")

    params = list(inspect.signature(fn).parameters.values())
    if not params or params[0].kind not in _POSITIONAL:
        raise TypeError(f"@debounce requires {fn.__qualname__} to take the instance as its first argument")


async def _report_failure(config: DebounceConfig, fn: Callable[..., Any], exc: Exception) -> None:
    if config.on_error is None:
        logger.error("Debounced call to %s failed", fn.__qualname__, exc_info=exc)
        return
    try:
        result = config.on_error(exc)
        if inspect.isawaitable(result):
            await result
    except Exception:
        logger.exception("on_error handler failed for %s", fn.__qualname__)


def _guard(fn: F, config: DebounceConfig) -> F:
    _ensure_method_shaped(fn)

    # Keyed by owner identity. An entry exists only while a run is active or
    # a call is still pending, and that run or call holds the owner alive.
    states: dict[int, _GuardState] = {}
    delay = config.delay_seconds

    @wraps(fn)
    async def wrapper(self: Any, *args: Any, **kwargs: Any) -> None:
        key = id(self)
        state = states.setdefault(key, _GuardState())

        async def call() -> None:
            await fn(self, *args, **kwargs)

        state.pending = call
        if state.active:
            return

        try:
            while state.pending is not None and not state.active:
                state.active = True
                try:
                    if delay:
                        await asyncio.sleep(delay)
                    current, state.pending = state.pending, None
                    await current()
                except Exception as exc:
                    await _report_failure(config, fn, exc)
                finally:
                    state.active = False
        finally:
            if state.pending is None and not state.active:
                states.pop(key, None)

    wrapper.config = config  # type: ignore[attr-defined]
    wrapper.guard_state = lambda instance: states.get(id(instance))  # type: ignore[attr-defined]

    return cast("F", wrapper)


@overload
def debounce(
    func: F,
    /,
) -> F: ...


@overload
def debounce(
    delay: Duration | float,
    /,
    *,
    on_error: Callable[[Exception], Any] | None = None,
) -> Callable[[F], F]: ...


@overload
def debounce(
    *,
    delay: Duration | float | None = None,
    on_error: Callable[[Exception], Any] | None = None,
) -> Callable[[F], F]: ...


def debounce(
    func: F | Duration | float | None = None,
    /,
    *,
    delay: Duration | float | None = None,
    on_error: Callable[[Exception], Any] | None = None,
) -> F | Callable[[F], F]:
    """Decorator that lets at most one call of an async method run per instance.

    A call made while a run is in progress (or waiting out its delay) does not
    start a second run. It replaces whatever call was waiting, and once the
    current run finishes the latest waiting call runs. Intermediate calls are
    dropped: only the last arguments are ever executed.

    Calls are fire-and-forget. The wrapper always returns ``None`` and a caller
    cannot tell whether its own arguments ran or were superseded. A failing
    run is passed to *on_error*, or logged when no handler is given, and never
    stops the loop.

    Args:
        func: The method to decorate (when used without parentheses).
        delay: Settle delay awaited before each run, as a :class:`Duration`
            or in seconds. May also be passed positionally. Must be positive.
        on_error: Receives the exception of a failed run. Sync or async.

    Raises:
        TypeError: If the target is not an async method.
        ValueError: If *delay* is zero or negative.

    Examples:
    ```python
        class Search:
            @debounce(Duration.from_milliseconds(300))
            async def refresh(self, query: str) -> None:
                self.results = await backend.search(query)

            @debounce
            async def save(self) -> None:
                await storage.write(self.state)
    ```
    """
    if func is not None and not callable(func):
        if delay is not None:
            raise TypeError("delay given both positionally and as a keyword")
        delay, func = func, None

    config = DebounceConfig(delay=coerce_delay(delay), on_error=on_error)

    def decorator(fn: F) -> F:
        return _guard(fn, config)

    if func is not None:
        return decorator(cast("F", func))

    return decorator
