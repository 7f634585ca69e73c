"""Origin matching and relying party identifier helpers."""
from __future__ import annotations

import hashlib
import re
from collections.abc import Iterable
from typing import Any, FrozenSet, Optional
from urllib.parse import urlparse

__all__ = [
    "clean_origins",
    "normalize_origin",
    "normalize_origins",
    "origin_allowed",
    "parse_origin_list",
    "resolve_rp_id",
    "rp_id_from_origin",
    "rp_id_hash",
]


def normalize_origin(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    normalized = value.strip().rstrip("/")
    return normalized or None


def _origin_candidates(value: Any) -> Iterable[Any]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, Iterable):
        return value
    raise TypeError(f"Unsupported origin value: {value!r}")


def normalize_origins(value: Any) -> Optional[FrozenSet[str]]:
    """Coerce an origin or a collection of origins into a frozen set.

    ``None`` stays ``None`` so callers can tell "not given" apart from
    "given but empty". A bare string is one origin, never a collection of
    characters. Origins are kept verbatim; membership is exact.
    """

    if value is None:
        return None
    return frozenset(
        candidate for candidate in _origin_candidates(value) if isinstance(candidate, str)
    )


def clean_origins(value: Any) -> Optional[FrozenSet[str]]:
    """Like :func:`normalize_origins` but trims settings text.

    Whitespace and a trailing ``/`` are stripped and blank entries dropped.
    """

    if value is None:
        return None
    origins = set()
    for candidate in _origin_candidates(value):
        normalized = normalize_origin(candidate)
        if normalized:
            origins.add(normalized)
    return frozenset(origins)


def parse_origin_list(raw_value: Optional[str]) -> Optional[FrozenSet[str]]:
    """Normalise a comma, semicolon or newline separated list of origins."""

    if raw_value is None:
        return None

    components = re.split(r"[,;\n]+", raw_value)
    origins = clean_origins(components)
    if not origins:
        return None
    return origins


def origin_allowed(origin: Optional[str], expected_origins: Optional[FrozenSet[str]]) -> bool:
    if not expected_origins or not isinstance(origin, str):
        return False
    return origin in expected_origins


def rp_id_from_origin(expected_origins: Optional[FrozenSet[str]]) -> Optional[str]:
    """Return the host of the only expected origin.

    With zero or several expected origins there is no unambiguous RP ID and
    ``None`` is returned.
    """

    if not expected_origins or len(expected_origins) != 1:
        return None
    (origin,) = expected_origins
    return urlparse(origin).hostname or None


def resolve_rp_id(
    explicit_id: Optional[str],
    configured_id: Optional[str],
    expected_origins: Optional[FrozenSet[str]],
) -> Optional[str]:
    """Resolve the RP ID to check against the authenticator data."""

    if explicit_id is not None:
        return explicit_id
    if configured_id is not None:
        return configured_id
    return rp_id_from_origin(expected_origins)


def rp_id_hash(rp_id: str) -> bytes:
    return hashlib.sha256(rp_id.encode("utf-8")).digest()
