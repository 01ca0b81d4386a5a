"""libotp -- HOTP / TOTP one-time password derivation"""

from libotp.exc import (
    ConfigurationError,
    DecodeError,
    ErrorKind,
    InvalidKeyError,
    OTPError,
    TokenDeliveryError,
    UnsupportedAlgorithmError,
)
from libotp.generator import TokenGenerator, TokenSettings, generate_token

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "DecodeError",
    "ErrorKind",
    "InvalidKeyError",
    "OTPError",
    "TokenDeliveryError",
    "TokenGenerator",
    "TokenSettings",
    "UnsupportedAlgorithmError",
    "generate_token",
]
