"""Lazy views over authenticator data."""
from __future__ import annotations

from typing import Optional

from fido2.webauthn import AttestationObject, AttestedCredentialData, AuthenticatorData

from .errors import AuthenticatorDataFormatError, catch_builtins

__all__ = ["AttestedAuthenticatorDataView", "AuthenticatorDataView"]


class AuthenticatorDataView:
    """Authenticator data as returned with an assertion.

    Parsing is deferred until the first accessor call so that a malformed
    structure surfaces as :class:`AuthenticatorDataFormatError` from
    :meth:`validate` rather than from the constructor.
    """

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._parsed: Optional[AuthenticatorData] = None

    @catch_builtins(AuthenticatorDataFormatError)
    def _load(self) -> AuthenticatorData:
        return AuthenticatorData(self._data)

    @property
    def parsed(self) -> AuthenticatorData:
        if self._parsed is None:
            self._parsed = self._load()
        return self._parsed

    def validate(self) -> bool:
        """Return ``True`` or raise :class:`AuthenticatorDataFormatError`."""

        self.parsed
        return True

    @property
    def rp_id_hash(self) -> bytes:
        return self.parsed.rp_id_hash

    @property
    def user_present(self) -> bool:
        return self.parsed.is_user_present()

    @property
    def user_verified(self) -> bool:
        return self.parsed.is_user_verified()

    @property
    def sign_count(self) -> int:
        return self.parsed.counter

    @property
    def credential_data(self) -> Optional[AttestedCredentialData]:
        return self.parsed.credential_data

    def __bytes__(self) -> bytes:
        return self._data


class AttestedAuthenticatorDataView(AuthenticatorDataView):
    """Authenticator data carried inside a CBOR attestation object.

    A registration must include attested credential data, so its absence is
    treated as a structural error.
    """

    @catch_builtins(AuthenticatorDataFormatError)
    def _load(self) -> AuthenticatorData:
        return AttestationObject(self._data).auth_data

    def validate(self) -> bool:
        super().validate()
        if self.parsed.credential_data is None:
            raise AuthenticatorDataFormatError("Attested credential data missing")
        return True

    def __bytes__(self) -> bytes:
        return bytes(self.parsed)
