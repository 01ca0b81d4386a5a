"""libotp.hotp -- HMAC-based one-time password derivation (RFC 4226)"""

from __future__ import annotations

import hmac
import struct
from typing import Callable, Literal, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as cg_hmac

from libotp.clock import MAX_UINT64
from libotp.exc import (
    ConfigurationError,
    InvalidKeyError,
    UnsupportedAlgorithmError,
)

__all__ = [
    "Backend",
    "BACKENDS",
    "ALGORITHMS",
    "DEFAULT_DIGITS",
    "check_digits",
    "compile_hmac",
    "counter_to_bytes",
    "truncate",
    "hotp",
]

Backend = Literal["cryptography", "hashlib"]

BACKENDS: tuple[Backend, ...] = ("cryptography", "hashlib")

#: digests allowed for HOTP / TOTP, mapped to their :mod:`cryptography` equivalents.
#: all of them are at least 20 bytes, so ``offset + 4`` never runs off the digest.
ALGORITHMS: dict[str, type[hashes.HashAlgorithm]] = {
    "sha1": hashes.SHA1,
    "sha256": hashes.SHA256,
    "sha512": hashes.SHA512,
}

DEFAULT_DIGITS = 6

KeyBytes = Union[bytes, bytearray, memoryview]
HmacFunc = Callable[[bytes], bytes]


def check_digits(digits: int) -> int:
    if not isinstance(digits, int) or isinstance(digits, bool):
        raise ConfigurationError(
            f"digits must be an integer, not {type(digits).__name__}"
        )
    if not 6 <= digits <= 10:
        raise ConfigurationError(f"digits must be in range(6, 11): {digits!r}")
    return digits


def _check_key(key: KeyBytes) -> None:
    if not isinstance(key, (bytes, bytearray, memoryview)):
        raise InvalidKeyError(f"key must be bytes, not {type(key).__name__}")
    if not len(key):
        raise InvalidKeyError("key must not be empty")


def _compile_cryptography(alg: str, key: KeyBytes) -> HmacFunc:
    try:
        template = cg_hmac.HMAC(key, ALGORITHMS[alg]())
    except UnsupportedAlgorithm as err:
        raise UnsupportedAlgorithmError(
            f"HMAC-{alg.upper()} is not supported by the cryptography backend"
        ) from err
    except (TypeError, ValueError) as err:
        raise InvalidKeyError() from err

    def hmac_func(msg: bytes) -> bytes:
        ctx = template.copy()
        ctx.update(msg)
        return ctx.finalize()

    return hmac_func


def _compile_hashlib(alg: str, key: KeyBytes) -> HmacFunc:
    # stdlib hmac only takes bytes & bytearray keys
    if isinstance(key, memoryview):
        key = key.tobytes()
    try:
        template = hmac.new(key, None, alg)
    except ValueError as err:
        # hashlib raises ValueError for digests it (or a FIPS-mode openssl) refuses
        raise UnsupportedAlgorithmError(
            f"HMAC-{alg.upper()} is not supported by the hashlib backend"
        ) from err
    except TypeError as err:
        raise InvalidKeyError() from err

    def hmac_func(msg: bytes) -> bytes:
        ctx = template.copy()
        ctx.update(msg)
        return ctx.digest()

    return hmac_func


def compile_hmac(
    alg: str, key: KeyBytes, backend: Backend = "cryptography"
) -> HmacFunc:
    """
    This function returns an efficient HMAC function, hardcoded with a specific digest & key.

    :arg alg: digest name (``"sha1"``, ``"sha256"``, or ``"sha512"``).
    :arg key: secret key, as bytes.
    :arg backend: which library performs the HMAC.

    :raises ~libotp.exc.InvalidKeyError: if key is empty, or not bytes.
    :raises ~libotp.exc.UnsupportedAlgorithmError:
        if the digest or backend is unknown or unavailable.

    :returns:
        function which takes a message (bytes) and returns the digest.
    """
    if alg not in ALGORITHMS:
        raise UnsupportedAlgorithmError(f"unsupported HMAC digest: {alg!r}")
    _check_key(key)
    if backend == "cryptography":
        return _compile_cryptography(alg, key)
    elif backend == "hashlib":
        return _compile_hashlib(alg, key)
    raise UnsupportedAlgorithmError(f"unknown HMAC backend: {backend!r}")


def counter_to_bytes(counter: int) -> bytes:
    """serialize *counter* as 8 big-endian bytes"""
    if not isinstance(counter, int) or isinstance(counter, bool):
        raise ConfigurationError(
            f"counter must be an integer, not {type(counter).__name__}"
        )
    if not 0 <= counter <= MAX_UINT64:
        raise ConfigurationError(f"counter out of 64-bit range: {counter!r}")
    return struct.pack(">Q", counter)


def truncate(digest: bytes) -> int:
    """
    RFC 4226 dynamic truncation:
    returns the 31-bit integer found at the offset named by the digest's low nibble.
    """
    offset = digest[-1] & 0x0F
    return struct.unpack(">I", digest[offset : offset + 4])[0] & 0x7FFFFFFF


def hotp(
    key: KeyBytes,
    counter: int,
    *,
    digits: int = DEFAULT_DIGITS,
    alg: str = "sha1",
    backend: Backend = "cryptography",
) -> int:
    """
    derive the HOTP value for *key* at *counter*.

    :returns:
        code as an integer in ``range(10 ** digits)``.
        leading zeros are up to whoever renders it.
    """
    check_digits(digits)
    msg = counter_to_bytes(counter)
    digest = compile_hmac(alg, key, backend)(msg)
    return truncate(digest) % 10**digits
