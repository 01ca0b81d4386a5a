"""libotp.clock -- wall clock to HOTP counter conversion"""

from __future__ import annotations

import calendar
import datetime
import time as _time
from typing import Callable, Union

from libotp.exc import ConfigurationError

__all__ = [
    "Clock",
    "DEFAULT_STEP_SIZE",
    "system_clock",
    "check_step_size",
    "normalize_time",
    "time_to_counter",
    "current_counter",
]

TimeValue = Union[int, float, datetime.datetime]

#: source of the current time, as unix epoch seconds (or a datetime)
Clock = Callable[[], TimeValue]

DEFAULT_STEP_SIZE = 30

#: max 64-bit value
MAX_UINT64 = (1 << 64) - 1


def system_clock() -> float:
    return _time.time()


def check_step_size(step_size: int) -> int:
    # NOTE: bool is an int subclass, and is rejected too
    if not isinstance(step_size, int) or isinstance(step_size, bool):
        raise ConfigurationError(
            f"step size must be an integer, not {type(step_size).__name__}"
        )
    if step_size <= 0:
        raise ConfigurationError(f"step size must be > 0: {step_size!r}")
    return step_size


def normalize_time(value: TimeValue) -> int:
    """
    Normalize time value to unix epoch seconds.

    :arg value:
        :class:`!datetime`, or unix epoch timestamp as :class:`!float` or :class:`!int`.
        Naive datetimes are treated as UTC.

    :returns:
        unix epoch timestamp as :class:`int`.
    """
    if isinstance(value, datetime.datetime):
        # NOTE: utctimetuple() assumes naive datetimes are in UTC,
        #       and we explicitly don't want microseconds.
        return calendar.timegm(value.utctimetuple())
    elif isinstance(value, float):
        return int(value)
    elif isinstance(value, int) and not isinstance(value, bool):
        return value
    raise ConfigurationError(
        f"clock must return int, float, or datetime, not {type(value).__name__}"
    )


def time_to_counter(value: TimeValue, step_size: int) -> int:
    """
    convert timestamp to HOTP counter using *step_size*,
    i.e. ``floor(epoch_seconds / step_size)``.
    """
    check_step_size(step_size)
    seconds = normalize_time(value)
    if seconds < 0:
        raise ConfigurationError(f"time must be >= 0: {seconds!r}")
    counter = seconds // step_size
    if counter > MAX_UINT64:
        raise ConfigurationError("time counter doesn't fit in 64 bits")
    return counter


def current_counter(step_size: int, clock: Clock = system_clock) -> int:
    """
    read *clock* once, and return the counter of the time step it falls in.

    *step_size* is validated before the clock is touched.
    """
    check_step_size(step_size)
    return time_to_counter(clock(), step_size)
