"""Immutable time span used to configure delays."""

import math
from dataclasses import dataclass


def _ensure_number(value: object, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")


def _round_half_up(value: float) -> float:
    return math.floor(value + 0.5)


@dataclass(frozen=True, slots=True, order=True)
class Duration:
    """A non-negative span of time stored in milliseconds.

    Build one through the ``from_*`` constructors and read it back in any
    unit with the matching ``to_*`` accessor::

        delay = Duration.from_hours(2.5)
        delay.to_minutes()  # 150.0

    Attributes:
        milliseconds: The span in milliseconds. Must be >= 0.
    """

    milliseconds: float

    def __post_init__(self) -> None:
        _ensure_number(self.milliseconds, "milliseconds")
        if self.milliseconds < 0:
            raise ValueError(f"milliseconds must be non-negative, got {self.milliseconds}")

    @classmethod
    def from_milliseconds(cls, milliseconds: float) -> "Duration":
        return cls(milliseconds)

    @classmethod
    def from_seconds(cls, seconds: float) -> "Duration":
        _ensure_number(seconds, "seconds")
        return cls.from_milliseconds(seconds * 1000)

    @classmethod
    def from_minutes(cls, minutes: float) -> "Duration":
        _ensure_number(minutes, "minutes")
        return cls.from_seconds(minutes * 60)

    @classmethod
    def from_hours(cls, hours: float) -> "Duration":
        _ensure_number(hours, "hours")
        return cls.from_minutes(hours * 60)

    @classmethod
    def from_days(cls, days: float) -> "Duration":
        _ensure_number(days, "days")
        return cls.from_hours(days * 24)

    @classmethod
    def from_weeks(cls, weeks: float) -> "Duration":
        _ensure_number(weeks, "weeks")
        return cls.from_days(weeks * 7)

    def to_milliseconds(self, round_result: bool = False) -> float:
        result = self.milliseconds
        return _round_half_up(result) if round_result else result

    def to_seconds(self, round_result: bool = False) -> float:
        result = self.to_milliseconds() / 1000
        return _round_half_up(result) if round_result else result

    def to_minutes(self, round_result: bool = False) -> float:
        result = self.to_seconds() / 60
        return _round_half_up(result) if round_result else result

    def to_hours(self, round_result: bool = False) -> float:
        result = self.to_minutes() / 60
        return _round_half_up(result) if round_result else result

    def to_days(self, round_result: bool = False) -> float:
        result = self.to_hours() / 24
        return _round_half_up(result) if round_result else result

    def to_weeks(self, round_result: bool = False) -> float:
        result = self.to_days() / 7
        return _round_half_up(result) if round_result else result
