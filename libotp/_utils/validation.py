from __future__ import annotations

from libotp.exc import ConfigurationError

_TRUE_VALUES = ("true", "t", "yes", "y", "on", "1")
_FALSE_VALUES = ("false", "f", "no", "n", "off", "0")


def as_bool(value: object, param: str = "boolean") -> bool:
    """coerce config value to bool, accepting the usual string spellings"""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        clean = value.lower().strip()
        if clean in _TRUE_VALUES:
            return True
        if clean in _FALSE_VALUES:
            return False
    raise ConfigurationError(f"unrecognized {param} value: {value!r}")


def as_int(value: object, param: str) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as err:
            raise ConfigurationError(f"{param} must be an integer: {value!r}") from err
    raise ConfigurationError(
        f"{param} must be an integer, not {type(value).__name__}"
    )
