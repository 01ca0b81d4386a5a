"""libotp.exc -- exceptions raised while deriving one-time passwords"""

from __future__ import annotations

import enum

__all__ = [
    "ErrorKind",
    "OTPError",
    "DecodeError",
    "ConfigurationError",
    "InvalidKeyError",
    "UnsupportedAlgorithmError",
    "TokenDeliveryError",
]


class ErrorKind(enum.Enum):
    """closed set of failure causes, one per :class:`OTPError` subclass"""

    DECODE = "decode"
    CONFIGURATION = "configuration"
    INVALID_KEY = "invalid_key"
    UNSUPPORTED_ALGORITHM = "unsupported_algorithm"
    DELIVERY = "delivery"


class OTPError(Exception):
    """
    Base class for all errors raised by libotp.

    Every subclass is tagged with an :class:`ErrorKind`, so callers that
    translate failures into user-visible messages can dispatch on
    ``err.kind`` instead of the class hierarchy.  When the error wraps a
    lower level fault (e.g. :exc:`binascii.Error`), that fault is chained
    as ``__cause__`` and also available as :attr:`cause`.

    None of these errors are retried by libotp itself.
    """

    kind: ErrorKind
    _default_message: str | None = None

    def __init__(self, msg: str | None = None, *args: object) -> None:
        if msg is None:
            msg = self._default_message
        super().__init__(msg, *args)

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__


class DecodeError(OTPError, ValueError):
    """
    Error raised when an encoded secret is malformed: characters outside
    the base32 / base64 alphabet, non-ascii text, or an impossible length.
    Derives from :exc:`!ValueError`.
    """

    kind = ErrorKind.DECODE
    _default_message = "Malformed encoded secret"


class ConfigurationError(OTPError, ValueError):
    """
    Error raised for invalid settings, such as a non-positive time step,
    an unknown encoding, or a clock reading before the unix epoch.
    Derives from :exc:`!ValueError`.
    """

    kind = ErrorKind.CONFIGURATION
    _default_message = "Invalid OTP configuration"


class InvalidKeyError(OTPError, ValueError):
    """
    Error raised when the secret key is empty, missing,
    or rejected by the HMAC primitive.
    Derives from :exc:`!ValueError`.
    """

    kind = ErrorKind.INVALID_KEY
    _default_message = "Secret key is not valid"


class UnsupportedAlgorithmError(OTPError, RuntimeError):
    """
    Error raised when the requested HMAC digest (or HMAC backend) isn't
    available on this platform.  This is an environment fault, and
    shouldn't be treated as a recoverable runtime condition.
    Derives from :exc:`!RuntimeError`.
    """

    kind = ErrorKind.UNSUPPORTED_ALGORITHM
    _default_message = "Configured HMAC algorithm is not available"


class TokenDeliveryError(OTPError):
    """
    Error raised by :class:`libotp.delivery.TokenDispatcher` when a
    generated token has nowhere to go (no address, no channel configured).
    """

    kind = ErrorKind.DELIVERY
    _default_message = "Unable to deliver token"
