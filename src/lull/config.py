"""Configuration types for the lull primitives."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from lull.duration import Duration

ErrorHandler = Callable[[Exception], Awaitable[Any] | Any]


def _ensure_int(value: object, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")


def coerce_delay(delay: "Duration | float | None") -> Duration | None:
    """Normalize a delay given as a ``Duration`` or as float seconds."""
    if delay is None or isinstance(delay, Duration):
        return delay
    if isinstance(delay, bool) or not isinstance(delay, (int, float)):
        raise TypeError(f"delay must be a Duration or a number of seconds, got {type(delay).__name__}")
    if delay <= 0:
        raise ValueError(f"delay must be positive, got {delay}")
    return Duration.from_seconds(delay)


@dataclass(frozen=True, slots=True)
class DebounceConfig:
    """Configuration for a ``@debounce`` guarded method.

    Attributes:
        delay: Settle delay awaited before each coalesced run. ``None``
               runs immediately (still one run at a time).
        on_error: Called with the exception of a failed run. Sync or async.
                  When ``None``, failures are logged.
    """

    delay: Duration | None = None
    on_error: ErrorHandler | None = None

    def __post_init__(self) -> None:
        if self.delay is not None:
            if not isinstance(self.delay, Duration):
                raise TypeError(f"delay must be a Duration, got {type(self.delay).__name__}")
            if self.delay.to_milliseconds() <= 0:
                raise ValueError(f"delay must be positive, got {self.delay.to_milliseconds()}ms")

        if self.on_error is not None and not callable(self.on_error):
            raise TypeError("on_error must be callable")

    @property
    def delay_seconds(self) -> float:
        return self.delay.to_seconds() if self.delay is not None else 0.0


@dataclass(frozen=True, slots=True)
class ProcessorConfig:
    """Configuration for a ``BackgroundProcessor``.

    Attributes:
        break_interval_milliseconds: Pause between processing attempts.
        break_only_when_no_work: When True, pending work is picked up with
                                 no pause and the interval only applies
                                 while idle. When False, every tick waits the
                                 full interval (fixed-rate drain).
        drain_poll_interval_milliseconds: How often ``dispose`` checks for
                                          in-flight actions.
    """

    break_interval_milliseconds: int = 1000
    break_only_when_no_work: bool = True
    drain_poll_interval_milliseconds: int = 50

    def __post_init__(self) -> None:
        _ensure_int(self.break_interval_milliseconds, "break_interval_milliseconds")
        if self.break_interval_milliseconds < 0:
            raise ValueError(
                f"break_interval_milliseconds must be non-negative, got {self.break_interval_milliseconds}"
            )

        if not isinstance(self.break_only_when_no_work, bool):
            raise TypeError("break_only_when_no_work must be a bool")

        _ensure_int(self.drain_poll_interval_milliseconds, "drain_poll_interval_milliseconds")
        if self.drain_poll_interval_milliseconds <= 0:
            raise ValueError(
                f"drain_poll_interval_milliseconds must be positive, got {self.drain_poll_interval_milliseconds}"
            )
