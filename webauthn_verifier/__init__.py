"""Relying party side verification of WebAuthn responses."""
from __future__ import annotations

from .authenticator_data import AttestedAuthenticatorDataView, AuthenticatorDataView
from .client_data import ClientData
from .config import RelyingParty, configure, current_relying_party, init_app
from .errors import (
    AuthenticatorDataFormatError,
    AuthenticatorDataVerificationError,
    ChallengeVerificationError,
    Check,
    ClientDataFormatError,
    ConfigurationError,
    MissingOriginError,
    OriginVerificationError,
    RpIdVerificationError,
    TokenBindingVerificationError,
    TypeVerificationError,
    UserPresenceVerificationError,
    UserVerifiedVerificationError,
    VerificationError,
    WebAuthnVerifierError,
)
from .response import AuthenticatorResponse, Ceremony, VerificationResult

__all__ = [
    "AttestedAuthenticatorDataView",
    "AuthenticatorDataFormatError",
    "AuthenticatorDataVerificationError",
    "AuthenticatorDataView",
    "AuthenticatorResponse",
    "Ceremony",
    "ChallengeVerificationError",
    "Check",
    "ClientData",
    "ClientDataFormatError",
    "ConfigurationError",
    "MissingOriginError",
    "OriginVerificationError",
    "RelyingParty",
    "RpIdVerificationError",
    "TokenBindingVerificationError",
    "TypeVerificationError",
    "UserPresenceVerificationError",
    "UserVerifiedVerificationError",
    "VerificationError",
    "VerificationResult",
    "WebAuthnVerifierError",
    "configure",
    "current_relying_party",
    "init_app",
]
