import hashlib

import pytest

from webauthn_verifier import origins


def test_normalize_origins_keeps_none():
    assert origins.normalize_origins(None) is None


def test_normalize_origins_single_string():
    assert origins.normalize_origins("https://good.test") == frozenset({"https://good.test"})


def test_normalize_origins_keeps_origins_verbatim():
    assert origins.normalize_origins(["https://good.test/", " https://a.test", None]) == frozenset(
        {"https://good.test/", " https://a.test"}
    )


def test_normalize_origins_rejects_scalars():
    with pytest.raises(TypeError):
        origins.normalize_origins(42)


def test_clean_origins_trims_settings_text():
    assert origins.clean_origins(" https://good.test/ ") == frozenset({"https://good.test"})
    assert origins.clean_origins(["https://a.test", "", "  ", None]) == frozenset(
        {"https://a.test"}
    )
    assert origins.clean_origins(None) is None


def test_parse_origin_list():
    assert origins.parse_origin_list("https://a.test, https://b.test;\nhttps://c.test") == frozenset(
        {"https://a.test", "https://b.test", "https://c.test"}
    )
    assert origins.parse_origin_list(" , ") is None
    assert origins.parse_origin_list(None) is None


def test_origin_allowed():
    allowed = frozenset({"https://good.test"})

    assert origins.origin_allowed("https://good.test", allowed)
    assert not origins.origin_allowed("https://good.test.evil", allowed)
    assert not origins.origin_allowed("https://good.test", frozenset())
    assert not origins.origin_allowed("https://good.test", None)
    assert not origins.origin_allowed(None, allowed)


@pytest.mark.parametrize(
    "expected, rp_id",
    [
        ({"https://good.test"}, "good.test"),
        ({"https://Good.Test:8443"}, "good.test"),
        ({"http://localhost:5000"}, "localhost"),
        ({"https://a.test", "https://b.test"}, None),
        (set(), None),
        (None, None),
        ({"not a url"}, None),
    ],
)
def test_rp_id_from_origin(expected, rp_id):
    normalized = origins.normalize_origins(expected)
    assert origins.rp_id_from_origin(normalized) == rp_id


def test_resolve_rp_id_precedence():
    single = frozenset({"https://derived.test"})

    assert origins.resolve_rp_id("explicit.test", "configured.test", single) == "explicit.test"
    assert origins.resolve_rp_id(None, "configured.test", single) == "configured.test"
    assert origins.resolve_rp_id(None, None, single) == "derived.test"
    assert origins.resolve_rp_id(None, None, frozenset({"https://a.test", "https://b.test"})) is None


def test_rp_id_hash():
    assert origins.rp_id_hash("good.test") == hashlib.sha256(b"good.test").digest()
