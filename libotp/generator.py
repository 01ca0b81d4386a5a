"""libotp.generator -- front end for generating & checking time-based tokens"""

from __future__ import annotations

import dataclasses
import hmac
import re
from typing import TYPE_CHECKING, Any

from libotp._utils.bytes import StrOrBytes, as_str, wipe
from libotp._utils.validation import as_bool, as_int
from libotp.clock import (
    DEFAULT_STEP_SIZE,
    Clock,
    check_step_size,
    current_counter,
    system_clock,
)
from libotp.codec import ENCODINGS, Encoding, decode_secret
from libotp.exc import ConfigurationError
from libotp.hotp import ALGORITHMS, BACKENDS, DEFAULT_DIGITS, Backend, check_digits, hotp
from libotp.totp import DEFAULT_MAX_ATTEMPTS, TotpCode, check_max_attempts, totp

if TYPE_CHECKING:
    from collections.abc import Mapping

    from typing_extensions import Self

__all__ = [
    "TokenSettings",
    "TokenGenerator",
    "generate_token",
]

_INT_FIELDS = ("step_size", "digits", "max_attempts")
_BOOL_FIELDS = ("zero_pad", "event_delivery")

#: regex used to clean whitespace from tokens
_clean_re = re.compile(r"\s|-")


@dataclasses.dataclass(frozen=True)
class TokenSettings:
    """
    Immutable configuration shared by every token a :class:`TokenGenerator` produces.

    :param step_size: length of a time step, in seconds.
    :param encoding: how stored secrets are encoded (``"base32"`` or ``"base64"``).
    :param digits: number of digits in a full length token.
    :param max_attempts: derivations allowed while looking for a full length token.
    :param alg: HMAC digest (``"sha1"``, ``"sha256"``, or ``"sha512"``).
    :param backend: library computing the HMAC (``"cryptography"`` or ``"hashlib"``).
    :param zero_pad: render short tokens with leading zeros.
    :param event_delivery:
        hand tokens to the event publisher rather than the notification sender
        (see :class:`libotp.delivery.TokenDispatcher`).
    """

    step_size: int = DEFAULT_STEP_SIZE
    encoding: Encoding = "base32"
    digits: int = DEFAULT_DIGITS
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    alg: str = "sha1"
    backend: Backend = "cryptography"
    zero_pad: bool = False
    event_delivery: bool = False

    def __post_init__(self) -> None:
        check_step_size(self.step_size)
        check_digits(self.digits)
        check_max_attempts(self.max_attempts)
        if self.encoding not in ENCODINGS:
            raise ConfigurationError(f"unknown secret encoding: {self.encoding!r}")
        if self.alg not in ALGORITHMS:
            raise ConfigurationError(f"unsupported HMAC digest: {self.alg!r}")
        if self.backend not in BACKENDS:
            raise ConfigurationError(f"unknown HMAC backend: {self.backend!r}")

    @classmethod
    def from_mapping(cls, source: Mapping[str, Any]) -> Self:
        """
        build settings from string-valued parameters,
        such as those read from an authenticator's config file.
        """
        known = {field.name for field in dataclasses.fields(cls)}
        unknown = sorted(set(source) - known)
        if unknown:
            raise ConfigurationError(f"unknown token settings: {', '.join(unknown)}")
        kwds: dict[str, Any] = {}
        for key, value in source.items():
            if key in _INT_FIELDS:
                value = as_int(value, param=key)
            elif key in _BOOL_FIELDS:
                value = as_bool(value, param=key)
            elif isinstance(value, str):
                value = value.strip().lower()
            kwds[key] = value
        return cls(**kwds)

    def replace(self, **changes: Any) -> Self:
        return dataclasses.replace(self, **changes)


class TokenGenerator:
    """
    Generates TOTP tokens from text-encoded secrets.

    The decoded secret is copied into a :class:`bytearray` that is wiped
    before the call returns.  The wipe is best-effort: the immutable bytes
    produced while decoding linger until they are garbage collected.
    Instances hold no mutable state, so a single generator can be shared
    between threads.

    :param settings: :class:`TokenSettings` to use (defaults if omitted).
    :param clock: source of the current time; override to test.
    """

    def __init__(
        self,
        settings: TokenSettings | None = None,
        clock: Clock = system_clock,
    ) -> None:
        self._settings = settings or TokenSettings()
        self._clock = clock

    @property
    def settings(self) -> TokenSettings:
        return self._settings

    def _resolve(
        self, encoding: Encoding | None, step_size: int | None
    ) -> tuple[Encoding, int]:
        encoding = encoding or self._settings.encoding
        if step_size is None:
            step_size = self._settings.step_size
        return encoding, check_step_size(step_size)

    def generate_code(
        self,
        secret: StrOrBytes,
        encoding: Encoding | None = None,
        step_size: int | None = None,
    ) -> TotpCode:
        """like :meth:`generate`, but returns the full :class:`~libotp.totp.TotpCode`"""
        settings = self._settings
        encoding, step_size = self._resolve(encoding, step_size)
        key = bytearray(decode_secret(secret, encoding))
        try:
            return totp(
                key,
                step_size,
                digits=settings.digits,
                max_attempts=settings.max_attempts,
                clock=self._clock,
                alg=settings.alg,
                backend=settings.backend,
            )
        finally:
            wipe(key)

    def generate(
        self,
        secret: StrOrBytes,
        encoding: Encoding | None = None,
        step_size: int | None = None,
    ) -> str:
        """
        Generate the token for the current time step.

        :arg secret: encoded secret.
        :arg encoding: overrides :attr:`TokenSettings.encoding`.
        :arg step_size: overrides :attr:`TokenSettings.step_size`.

        :raises ~libotp.exc.DecodeError: if the secret is malformed.
        :raises ~libotp.exc.ConfigurationError: if *step_size* isn't positive.
        :raises ~libotp.exc.InvalidKeyError: if the secret decodes to nothing.

        :returns: token as a decimal string.
        """
        code = self.generate_code(secret, encoding=encoding, step_size=step_size)
        return code.token(pad=self._settings.zero_pad)

    def verify(
        self,
        token: StrOrBytes | int,
        secret: StrOrBytes,
        encoding: Encoding | None = None,
        step_size: int | None = None,
        window: int = 1,
    ) -> bool:
        """
        Check *token* against the codes of the current time step,
        and of up to *window* steps either side of it.

        Padded & unpadded renderings of a code are both accepted.
        Malformed tokens don't raise, they just fail to verify.
        """
        settings = self._settings
        encoding, step_size = self._resolve(encoding, step_size)
        if not isinstance(window, int) or window < 0:
            raise ConfigurationError(f"window must be >= 0: {window!r}")
        if isinstance(token, int):
            token = str(token)
        try:
            token = _clean_re.sub("", as_str(token))
        except UnicodeDecodeError:
            return False
        # NOTE: str.isdigit() alone would accept non-ascii digits
        if not (token.isascii() and token.isdigit()) or len(token) > settings.digits:
            return False
        expected = f"{int(token):0{settings.digits}d}"

        counter = current_counter(step_size, self._clock)
        key = bytearray(decode_secret(secret, encoding))
        try:
            for candidate in range(max(counter - window, 0), counter + window + 1):
                code = hotp(
                    key,
                    candidate,
                    digits=settings.digits,
                    alg=settings.alg,
                    backend=settings.backend,
                )
                if hmac.compare_digest(expected, f"{code:0{settings.digits}d}"):
                    return True
            return False
        finally:
            wipe(key)


def generate_token(
    secret: StrOrBytes,
    encoding: Encoding = "base32",
    step_size: int = DEFAULT_STEP_SIZE,
) -> str:
    """generate the current token for *secret* using default settings"""
    return TokenGenerator().generate(secret, encoding=encoding, step_size=step_size)
