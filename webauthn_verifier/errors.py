"""Exception hierarchy and the static check-to-error table."""
from __future__ import annotations

import struct
from enum import Enum, unique
from functools import wraps
from typing import Callable, Dict, Type, TypeVar

__all__ = [
    "AuthenticatorDataFormatError",
    "AuthenticatorDataVerificationError",
    "ChallengeVerificationError",
    "Check",
    "ClientDataFormatError",
    "ConfigurationError",
    "ERRORS_BY_CHECK",
    "MissingOriginError",
    "OriginVerificationError",
    "RpIdVerificationError",
    "TokenBindingVerificationError",
    "TypeVerificationError",
    "UserPresenceVerificationError",
    "UserVerifiedVerificationError",
    "VerificationError",
    "WebAuthnVerifierError",
    "catch_builtins",
    "error_for",
]

F = TypeVar("F", bound=Callable)


@unique
class Check(Enum):
    """The verification steps, in the order they are applied."""

    TYPE = "type"
    TOKEN_BINDING = "token_binding"
    CHALLENGE = "challenge"
    ORIGIN = "origin"
    AUTHENTICATOR_DATA = "authenticator_data"
    RP_ID = "rp_id"
    USER_PRESENCE = "user_presence"
    USER_VERIFIED = "user_verified"


class WebAuthnVerifierError(Exception):
    """Base exception for everything raised by this package."""


class ConfigurationError(WebAuthnVerifierError):
    """The relying party is not configured well enough to verify anything."""


class MissingOriginError(ConfigurationError):
    """No expected origin was passed and none is configured."""

    def __init__(self, message: str = "Unspecified expected origin"):
        super().__init__(message)


class ClientDataFormatError(WebAuthnVerifierError):
    """The client data JSON could not be decoded."""


class AuthenticatorDataFormatError(WebAuthnVerifierError):
    """The authenticator data is not a well-formed structure."""


class VerificationError(WebAuthnVerifierError):
    """A response failed one of the verification checks."""

    check: Check

    def __init__(self, message: str = ""):
        super().__init__(message or f"{self.check.value} verification failed")


class TypeVerificationError(VerificationError):
    check = Check.TYPE


class TokenBindingVerificationError(VerificationError):
    check = Check.TOKEN_BINDING


class ChallengeVerificationError(VerificationError):
    check = Check.CHALLENGE


class OriginVerificationError(VerificationError):
    check = Check.ORIGIN


class AuthenticatorDataVerificationError(VerificationError):
    check = Check.AUTHENTICATOR_DATA


class RpIdVerificationError(VerificationError):
    check = Check.RP_ID


class UserPresenceVerificationError(VerificationError):
    check = Check.USER_PRESENCE


class UserVerifiedVerificationError(VerificationError):
    check = Check.USER_VERIFIED


ERRORS_BY_CHECK: Dict[Check, Type[VerificationError]] = {
    Check.TYPE: TypeVerificationError,
    Check.TOKEN_BINDING: TokenBindingVerificationError,
    Check.CHALLENGE: ChallengeVerificationError,
    Check.ORIGIN: OriginVerificationError,
    Check.AUTHENTICATOR_DATA: AuthenticatorDataVerificationError,
    Check.RP_ID: RpIdVerificationError,
    Check.USER_PRESENCE: UserPresenceVerificationError,
    Check.USER_VERIFIED: UserVerifiedVerificationError,
}


def error_for(check: Check) -> Type[VerificationError]:
    """Return the exception class reported when *check* fails."""

    return ERRORS_BY_CHECK[check]


def catch_builtins(error_cls: Type[WebAuthnVerifierError]) -> Callable[[F], F]:
    """Utility decorator re-raising parser errors as *error_cls*."""

    def decorator(f):
        @wraps(f)
        def inner(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except (ValueError, KeyError, IndexError, TypeError, struct.error) as e:
                raise error_cls(e) from e

        return inner

    return decorator
