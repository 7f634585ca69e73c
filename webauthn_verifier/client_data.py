"""Read-only view over the client data JSON of a WebAuthn response."""
from __future__ import annotations

import json
from typing import Any, Mapping, Optional, Union

from fido2.webauthn import CollectedClientData

from .errors import ClientDataFormatError, catch_builtins

__all__ = ["ClientData", "TOKEN_BINDING_STATUSES"]


TOKEN_BINDING_STATUSES = frozenset({"present", "supported", "not-supported"})


class ClientData:
    """Decoded ``clientDataJSON``.

    The JSON is parsed once, on construction, through python-fido2's
    :class:`CollectedClientData`. The ``tokenBinding`` member is not modelled
    by python-fido2 so it is read from the raw JSON object here.
    """

    @catch_builtins(ClientDataFormatError)
    def __init__(self, client_data_json: Union[bytes, CollectedClientData]):
        if isinstance(client_data_json, CollectedClientData):
            collected = client_data_json
        else:
            collected = CollectedClientData(bytes(client_data_json))
        raw = json.loads(bytes(collected).decode("utf-8"))
        if not isinstance(raw, Mapping):
            raise ClientDataFormatError("Client data JSON must be an object")

        self._collected = collected
        self._token_binding: Any = raw.get("tokenBinding")

    @property
    def type(self) -> str:
        return self._collected.type

    @property
    def challenge(self) -> bytes:
        return self._collected.challenge

    @property
    def origin(self) -> str:
        return self._collected.origin

    @property
    def cross_origin(self) -> bool:
        return bool(self._collected.cross_origin)

    @property
    def hash(self) -> bytes:
        """SHA-256 of the raw JSON, as signed by the authenticator."""

        return self._collected.hash

    @property
    def token_binding(self) -> Optional[Any]:
        return self._token_binding

    @property
    def token_binding_well_formed(self) -> bool:
        """``True`` when no token binding is present or its status is known."""

        token_binding = self._token_binding
        if token_binding is None:
            return True
        if not isinstance(token_binding, Mapping):
            return False
        status = token_binding.get("status")
        return isinstance(status, str) and status in TOKEN_BINDING_STATUSES

    def __repr__(self) -> str:
        return f"ClientData(type={self.type!r}, origin={self.origin!r})"
