import hashlib
import json

import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from fido2.cose import ES256
from fido2.utils import websafe_encode
from fido2.webauthn import (
    AttestationObject,
    AttestedCredentialData,
    AuthenticatorData,
)

from webauthn_verifier import RelyingParty, config

RP_ID = "good.test"
ORIGIN = "https://good.test"
CHALLENGE = b"0123456789abcdef0123456789abcdef"

UP = AuthenticatorData.FLAG.UP
UV = AuthenticatorData.FLAG.UV
AT = AuthenticatorData.FLAG.AT

_CONFIG_ENV_KEYS = (
    "FIDO_SERVER_RP_ID",
    "FIDO_SERVER_RP_NAME",
    "FIDO_SERVER_ALLOWED_ORIGINS",
    "FIDO_SERVER_ORIGIN",
    "FIDO_SERVER_SILENT_AUTHENTICATION",
)


@pytest.fixture(autouse=True)
def isolated_configuration(monkeypatch):
    """Keep the process-wide relying party and env vars out of each test."""

    monkeypatch.setattr(config, "_default_relying_party", None)
    for key in _CONFIG_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def relying_party():
    return RelyingParty(id=RP_ID, name="Good", allowed_origins={ORIGIN})


@pytest.fixture
def make_client_data():
    def _make(
        type="webauthn.get",
        challenge=CHALLENGE,
        origin=ORIGIN,
        **extra,
    ) -> bytes:
        payload = {
            "type": type,
            "challenge": websafe_encode(challenge),
            "origin": origin,
            "crossOrigin": False,
        }
        payload.update(extra)
        return json.dumps(payload, separators=(",", ":")).encode()

    return _make


@pytest.fixture
def make_auth_data():
    def _make(rp_id=RP_ID, flags=UP, counter=1, credential_data=b"") -> bytes:
        rp_id_hash = hashlib.sha256(rp_id.encode("utf-8")).digest()
        return bytes(
            AuthenticatorData.create(
                rp_id_hash, flags, counter=counter, credential_data=credential_data
            )
        )

    return _make


@pytest.fixture
def credential_data():
    private_key = ec.generate_private_key(ec.SECP256R1())
    public_key = ES256.from_cryptography_key(private_key.public_key())
    return AttestedCredentialData.create(
        bytes(16),
        hashlib.sha256(b"credential").digest(),
        public_key,
    )


@pytest.fixture
def make_attestation_object(make_auth_data, credential_data):
    def _make(rp_id=RP_ID, flags=UP | AT, attested=True) -> bytes:
        auth_data = AuthenticatorData(
            make_auth_data(
                rp_id=rp_id,
                flags=flags,
                credential_data=credential_data if attested else b"",
            )
        )
        return bytes(AttestationObject.create("none", auth_data, {}))

    return _make
