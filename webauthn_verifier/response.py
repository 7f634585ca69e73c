"""Verification of WebAuthn registration and authentication responses."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, Iterable, Optional, Union

from cryptography.hazmat.primitives import constant_time
from fido2.utils import websafe_decode
from fido2.webauthn import CollectedClientData

from .authenticator_data import AttestedAuthenticatorDataView, AuthenticatorDataView
from .client_data import ClientData
from .config import RelyingParty, current_relying_party
from .errors import (
    AuthenticatorDataFormatError,
    Check,
    MissingOriginError,
    VerificationError,
    error_for,
)
from .origins import normalize_origins, origin_allowed, resolve_rp_id, rp_id_hash

__all__ = ["AuthenticatorResponse", "Ceremony", "VerificationResult"]

logger = logging.getLogger(__name__)

OriginArg = Union[str, Iterable[str], None]


@unique
class Ceremony(Enum):
    """The two kinds of response, keyed by their client data type."""

    REGISTRATION = CollectedClientData.TYPE.CREATE.value
    AUTHENTICATION = CollectedClientData.TYPE.GET.value

    @property
    def client_data_type(self) -> str:
        return self.value


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of :meth:`AuthenticatorResponse.evaluate`."""

    failed_check: Optional[Check] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failed_check is None

    def __bool__(self) -> bool:
        return self.ok

    def error(self) -> Optional[VerificationError]:
        if self.failed_check is None:
            return None
        return error_for(self.failed_check)(self.reason or "")

    def raise_for_failure(self) -> None:
        error = self.error()
        if error is not None:
            raise error


_PASSED = VerificationResult()


def _as_challenge_bytes(value: Union[bytes, bytearray, memoryview, str]) -> Optional[bytes]:
    """Return the expected challenge as bytes, or ``None`` if it cannot be decoded.

    Raises :class:`TypeError` for anything other than bytes-like or ``str``.
    """

    # Fido2Server keeps challenges websafe-encoded in its state.
    if isinstance(value, str):
        try:
            return websafe_decode(value)
        except ValueError:
            return None
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"Expected challenge must be bytes or str, not {type(value).__name__}")


class AuthenticatorResponse:
    """A response to a WebAuthn ceremony, ready to be verified.

    Instances are immutable and meant to be built once per request. The
    relying party is captured at construction; when omitted the process or
    Flask application default is used.
    """

    def __init__(
        self,
        ceremony: Ceremony,
        client_data: ClientData,
        authenticator_data: AuthenticatorDataView,
        relying_party: Optional[RelyingParty] = None,
    ):
        self._ceremony = ceremony
        self._client_data = client_data
        self._authenticator_data = authenticator_data
        if relying_party is None:
            relying_party = current_relying_party()
        self._relying_party = relying_party

    @classmethod
    def registration(
        cls,
        client_data_json: bytes,
        attestation_object: bytes,
        relying_party: Optional[RelyingParty] = None,
    ) -> "AuthenticatorResponse":
        return cls(
            Ceremony.REGISTRATION,
            ClientData(client_data_json),
            AttestedAuthenticatorDataView(attestation_object),
            relying_party,
        )

    @classmethod
    def authentication(
        cls,
        client_data_json: bytes,
        authenticator_data: bytes,
        relying_party: Optional[RelyingParty] = None,
    ) -> "AuthenticatorResponse":
        return cls(
            Ceremony.AUTHENTICATION,
            ClientData(client_data_json),
            AuthenticatorDataView(authenticator_data),
            relying_party,
        )

    @property
    def ceremony(self) -> Ceremony:
        return self._ceremony

    @property
    def client_data(self) -> ClientData:
        return self._client_data

    @property
    def authenticator_data(self) -> AuthenticatorDataView:
        return self._authenticator_data

    @property
    def relying_party(self) -> RelyingParty:
        return self._relying_party

    def evaluate(
        self,
        expected_challenge: Union[bytes, str],
        expected_origin: OriginArg = None,
        *,
        user_presence: Optional[bool] = None,
        user_verification: Optional[bool] = None,
        rp_id: Optional[str] = None,
    ) -> VerificationResult:
        """Run every check in order and stop at the first failure.

        Raises :class:`MissingOriginError` when no origin was passed and the
        relying party has none configured, and :class:`TypeError` when the
        expected challenge is neither bytes nor ``str``. Every other problem,
        including a challenge string that is not websafe base64, is reported
        in the returned :class:`VerificationResult`.
        """

        origins = normalize_origins(expected_origin)
        if origins is None:
            origins = self._relying_party.allowed_origins
        if origins is None:
            raise MissingOriginError()

        challenge = _as_challenge_bytes(expected_challenge)

        client_data = self._client_data
        auth_data = self._authenticator_data
        name = self._ceremony.name.lower()

        logger.debug("Verifying %s client data type", name)
        if client_data.type != self._ceremony.client_data_type:
            return self._fail(
                Check.TYPE,
                f"expected {self._ceremony.client_data_type!r}, got {client_data.type!r}",
            )

        logger.debug("Verifying %s token binding", name)
        if not client_data.token_binding_well_formed:
            return self._fail(Check.TOKEN_BINDING, "malformed token binding")

        logger.debug("Verifying %s challenge", name)
        if challenge is None:
            return self._fail(Check.CHALLENGE, "expected challenge is not websafe base64")
        if not constant_time.bytes_eq(client_data.challenge, challenge):
            return self._fail(Check.CHALLENGE, "challenge mismatch")

        logger.debug("Verifying %s origin", name)
        if not origin_allowed(client_data.origin, origins):
            return self._fail(Check.ORIGIN, f"origin {client_data.origin!r} not allowed")

        logger.debug("Verifying %s authenticator data", name)
        try:
            auth_data.validate()
        except AuthenticatorDataFormatError as exc:
            return self._fail(Check.AUTHENTICATOR_DATA, str(exc) or "malformed")

        logger.debug("Verifying %s RP ID", name)
        resolved_rp_id = resolve_rp_id(rp_id, self._relying_party.id, origins)
        if resolved_rp_id is None:
            return self._fail(Check.RP_ID, "unable to resolve RP ID")
        if rp_id_hash(resolved_rp_id) != auth_data.rp_id_hash:
            return self._fail(Check.RP_ID, f"RP ID hash does not match {resolved_rp_id!r}")

        # Explicit user_presence wins over the silent authentication setting.
        if user_presence or (
            user_presence is None and not self._relying_party.silent_authentication
        ):
            logger.debug("Verifying %s user presence", name)
            if not auth_data.user_present:
                return self._fail(Check.USER_PRESENCE, "user not present")

        if user_verification:
            logger.debug("Verifying %s user verification", name)
            if not auth_data.user_verified:
                return self._fail(Check.USER_VERIFIED, "user not verified")

        return _PASSED

    def verify(
        self,
        expected_challenge: Union[bytes, str],
        expected_origin: OriginArg = None,
        *,
        user_presence: Optional[bool] = None,
        user_verification: Optional[bool] = None,
        rp_id: Optional[str] = None,
    ) -> bool:
        """Return ``True`` or raise the :class:`VerificationError` of the failed check."""

        self.evaluate(
            expected_challenge,
            expected_origin,
            user_presence=user_presence,
            user_verification=user_verification,
            rp_id=rp_id,
        ).raise_for_failure()
        return True

    def is_valid(self, *args: Any, **kwargs: Any) -> bool:
        """Like :meth:`verify` but ``False`` instead of a verification error."""

        return self.evaluate(*args, **kwargs).ok

    def _fail(self, check: Check, reason: str) -> VerificationResult:
        logger.info(
            "WebAuthn %s response failed %s check: %s",
            self._ceremony.name.lower(),
            check.value,
            reason,
        )
        return VerificationResult(failed_check=check, reason=reason)
