"""libotp.codec -- text encodings for shared secrets"""

from __future__ import annotations

import base64
import binascii
import re
from typing import Literal

from libotp._utils.bytes import StrOrBytes, as_str
from libotp.exc import ConfigurationError, DecodeError

__all__ = [
    "Encoding",
    "ENCODINGS",
    "b32encode",
    "b32decode",
    "b64encode",
    "b64decode",
    "encode_secret",
    "decode_secret",
]

Encoding = Literal["base32", "base64"]

ENCODINGS: tuple[Encoding, ...] = ("base32", "base64")

#: whitespace & group separators ignored in base32 input
_b32_clean_re = re.compile(r"\s|-")

#: whitespace ignored in base64 input ('-' belongs to the urlsafe alphabet)
_b64_clean_re = re.compile(r"\s")


def _clean(key: StrOrBytes, clean_re: re.Pattern[str]) -> bytes:
    """strip ignored characters & trailing padding, rejecting padding anywhere else"""
    try:
        key = clean_re.sub("", as_str(key)).rstrip("=")
        data = key.encode("ascii")
    except UnicodeError as err:
        raise DecodeError("secret must contain only ascii characters") from err
    if b"=" in data:
        raise DecodeError("secret padding is only allowed at the end")
    return data


def b32encode(key: bytes) -> str:
    """
    wrapper around :func:`base64.b32encode` which strips padding,
    and returns a native string.
    """
    return base64.b32encode(key).rstrip(b"=").decode("ascii")


def b32decode(key: StrOrBytes) -> bytes:
    """
    wrapper around :func:`base64.b32decode` which ignores case,
    whitespace & hyphens, and inserts missing padding.
    """
    key = _clean(key, _b32_clean_re)
    pad = -len(key) % 8
    try:
        return base64.b32decode(key + b"=" * pad, casefold=True)
    except binascii.Error as err:
        raise DecodeError("secret is not valid base32") from err


def b64encode(key: bytes) -> str:
    return base64.b64encode(key).decode("ascii")


def b64decode(key: StrOrBytes) -> bytes:
    """
    wrapper around :func:`base64.b64decode` which rejects characters
    outside the standard alphabet, and tolerates missing padding.
    only whitespace is ignored.
    """
    key = _clean(key, _b64_clean_re)
    if len(key) % 4 == 1:
        raise DecodeError("secret is not valid base64: impossible length")
    pad = -len(key) % 4
    try:
        return base64.b64decode(key + b"=" * pad, validate=True)
    except binascii.Error as err:
        raise DecodeError("secret is not valid base64") from err


def encode_secret(key: bytes, encoding: Encoding = "base32") -> str:
    if encoding == "base32":
        return b32encode(key)
    elif encoding == "base64":
        return b64encode(key)
    raise ConfigurationError(f"unknown secret encoding: {encoding!r}")


def decode_secret(key: StrOrBytes, encoding: Encoding = "base32") -> bytes:
    """
    decode a text-encoded secret into raw key bytes.

    :arg key: encoded secret, as unicode or ascii bytes.
    :arg encoding: ``"base32"`` or ``"base64"``.

    :raises ~libotp.exc.DecodeError: if *key* isn't valid in that encoding.
    :raises ~libotp.exc.ConfigurationError: if *encoding* is unknown.
    """
    if encoding == "base32":
        return b32decode(key)
    elif encoding == "base64":
        return b64decode(key)
    raise ConfigurationError(f"unknown secret encoding: {encoding!r}")
