from typing import Union

StrOrBytes = Union[str, bytes]


def as_str(value: StrOrBytes) -> str:
    return value.decode("utf8") if isinstance(value, bytes) else value


def wipe(buffer: bytearray) -> None:
    """overwrite mutable secret buffer with zeros, in place"""
    buffer[:] = bytes(len(buffer))
