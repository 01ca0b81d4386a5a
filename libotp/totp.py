"""libotp.totp -- time-based one-time passwords (RFC 6238), with a minimum-digit policy"""

from __future__ import annotations

import dataclasses

from libotp._logging import logger
from libotp.clock import Clock, check_step_size, current_counter, system_clock
from libotp.exc import ConfigurationError
from libotp.hotp import DEFAULT_DIGITS, Backend, KeyBytes, check_digits, hotp

__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "TotpCode",
    "check_max_attempts",
    "has_minimum_digits",
    "totp",
]

#: max number of derivations spent looking for a code with the full number of digits
DEFAULT_MAX_ATTEMPTS = 5


@dataclasses.dataclass(frozen=True)
class TotpCode:
    """
    Result of :func:`totp`.

    .. attribute:: code

        the one-time password, as an integer in ``range(10 ** digits)``

    .. attribute:: counter

        time-step counter the code was derived from

    .. attribute:: attempts

        number of derivations performed before the code was accepted
    """

    code: int
    counter: int
    attempts: int
    digits: int = DEFAULT_DIGITS

    def token(self, pad: bool = False) -> str:
        """render code as decimal string, optionally zero-padded to :attr:`digits`"""
        if pad:
            return f"{self.code:0{self.digits}d}"
        return str(self.code)

    def __str__(self) -> str:
        return self.token()


def check_max_attempts(max_attempts: int) -> int:
    if not isinstance(max_attempts, int) or isinstance(max_attempts, bool):
        raise ConfigurationError(
            f"max_attempts must be an integer, not {type(max_attempts).__name__}"
        )
    if max_attempts < 1:
        raise ConfigurationError(f"max_attempts must be >= 1: {max_attempts!r}")
    return max_attempts


def has_minimum_digits(code: int, digits: int = DEFAULT_DIGITS) -> bool:
    """
    check if *code* prints with the full *digits* characters without padding,
    i.e. ``code >= 10 ** (digits - 1)``.
    """
    return code * 10 // 10**digits > 0


def totp(
    key: KeyBytes,
    step_size: int,
    *,
    digits: int = DEFAULT_DIGITS,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    clock: Clock = system_clock,
    alg: str = "sha1",
    backend: Backend = "cryptography",
) -> TotpCode:
    """
    Derive the TOTP code for the current time step.

    HOTP's modulo step can yield codes with fewer than *digits* digits.
    Rather than padding them, this re-reads the clock and derives again,
    up to *max_attempts* derivations in total, so a later time step gets a
    chance to produce a full length code.  If none does, the last code is
    returned anyway.

    :arg key: raw secret key.
    :arg step_size: time step, in seconds.
    :arg clock: source of the current time, read once per attempt.

    :raises ~libotp.exc.ConfigurationError:
        for a bad *step_size*, *digits* or *max_attempts*;
        raised before the clock is read.
    :raises ~libotp.exc.InvalidKeyError: if *key* is empty.
    :raises ~libotp.exc.UnsupportedAlgorithmError: if *alg* isn't available.

    :returns: :class:`TotpCode`
    """
    check_step_size(step_size)
    check_digits(digits)
    check_max_attempts(max_attempts)

    attempts = 0
    while True:
        counter = current_counter(step_size, clock)
        code = hotp(key, counter, digits=digits, alg=alg, backend=backend)
        attempts += 1
        if has_minimum_digits(code, digits):
            break
        if attempts >= max_attempts:
            logger.debug(
                "no %d digit code within %d attempts, using the last one",
                digits,
                attempts,
            )
            break
    return TotpCode(code=code, counter=counter, attempts=attempts, digits=digits)
