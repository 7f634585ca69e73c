"""Relying party configuration for the verifier."""
from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, FrozenSet, Mapping, Optional

from flask import Flask, current_app, has_app_context
from fido2.webauthn import PublicKeyCredentialRpEntity

from .origins import clean_origins, normalize_origins, parse_origin_list, rp_id_hash

__all__ = [
    "EXTENSION_KEY",
    "RelyingParty",
    "configure",
    "current_relying_party",
    "init_app",
]

logger = logging.getLogger(__name__)

EXTENSION_KEY = "webauthn_verifier"

_DEFAULT_RP_NAME = "Demo server"

_CONFIG_KEYS = (
    "FIDO_SERVER_RP_ID",
    "FIDO_SERVER_RP_NAME",
    "FIDO_SERVER_ALLOWED_ORIGINS",
    "FIDO_SERVER_ORIGIN",
    "FIDO_SERVER_SILENT_AUTHENTICATION",
)


def _parse_flag(raw_value: Any) -> Optional[bool]:
    """Return ``True`` or ``False`` when *raw_value* is explicitly set."""

    if raw_value is None:
        return None
    if isinstance(raw_value, bool):
        return raw_value

    normalised = str(raw_value).strip().lower()
    if normalised in {"", "0", "false", "off", "no"}:
        return False
    return True


def _parse_rp_id(raw_value: Any) -> Optional[str]:
    if not isinstance(raw_value, str):
        return None
    cleaned = raw_value.strip()
    return cleaned or None


def _parse_origins(raw_value: Any) -> Optional[FrozenSet[str]]:
    if raw_value is None or isinstance(raw_value, str):
        return parse_origin_list(raw_value)
    return clean_origins(raw_value)


@dataclass(frozen=True)
class RelyingParty:
    """Relying party settings shared read-only by every verification."""

    id: Optional[str] = None
    name: str = _DEFAULT_RP_NAME
    allowed_origins: Optional[FrozenSet[str]] = None
    silent_authentication: bool = False

    def __post_init__(self):
        object.__setattr__(self, "allowed_origins", normalize_origins(self.allowed_origins))

    @property
    def entity(self) -> PublicKeyCredentialRpEntity:
        return PublicKeyCredentialRpEntity(name=self.name, id=self.id)

    @property
    def id_hash(self) -> Optional[bytes]:
        if self.id is None:
            return None
        return rp_id_hash(self.id)

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "RelyingParty":
        """Build settings from ``FIDO_SERVER_*`` keys, e.g. a Flask ``app.config``."""

        origins = _parse_origins(config.get("FIDO_SERVER_ALLOWED_ORIGINS"))
        if origins is None:
            # Legacy single-origin setting.
            origins = _parse_origins(config.get("FIDO_SERVER_ORIGIN"))

        name = config.get("FIDO_SERVER_RP_NAME")
        if not isinstance(name, str) or not name.strip():
            name = _DEFAULT_RP_NAME

        return cls(
            id=_parse_rp_id(config.get("FIDO_SERVER_RP_ID")),
            name=name.strip(),
            allowed_origins=origins,
            silent_authentication=bool(
                _parse_flag(config.get("FIDO_SERVER_SILENT_AUTHENTICATION"))
            ),
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RelyingParty":
        return cls.from_mapping(os.environ if environ is None else environ)


_default_lock = threading.Lock()
_default_relying_party: Optional[RelyingParty] = None


def configure(relying_party: Optional[RelyingParty] = None, **settings: Any) -> RelyingParty:
    """Publish the process-wide relying party.

    Either pass a ready :class:`RelyingParty` or keyword settings for one.
    Call this once at start-up; the published object is never mutated.
    """

    global _default_relying_party

    if relying_party is None:
        relying_party = RelyingParty(**settings)
    elif settings:
        raise TypeError("Pass either a RelyingParty or keyword settings, not both")

    with _default_lock:
        _default_relying_party = relying_party
    logger.debug("Configured relying party %r", relying_party.id)
    return relying_party


def current_relying_party() -> RelyingParty:
    """Return the relying party for the active Flask app or the process."""

    global _default_relying_party

    if has_app_context():
        app_relying_party = current_app.extensions.get(EXTENSION_KEY)
        if app_relying_party is not None:
            return app_relying_party

    with _default_lock:
        if _default_relying_party is None:
            _default_relying_party = RelyingParty.from_env()
            logger.debug(
                "Loaded relying party %r from the environment", _default_relying_party.id
            )
        return _default_relying_party


def init_app(app: Flask, relying_party: Optional[RelyingParty] = None) -> RelyingParty:
    """Attach a relying party to *app*.

    ``FIDO_SERVER_*`` values already present in ``app.config`` take precedence
    over the environment.
    """

    if relying_party is None:
        for key in _CONFIG_KEYS:
            if key in os.environ:
                app.config.setdefault(key, os.environ[key])
        relying_party = RelyingParty.from_mapping(app.config)

    app.extensions[EXTENSION_KEY] = relying_party
    app.logger.info(
        "WebAuthn relying party %s configured with %d allowed origin(s).",
        relying_party.id or "<derived>",
        len(relying_party.allowed_origins or ()),
    )
    return relying_party
