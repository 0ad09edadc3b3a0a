try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from cloudassistant.models import SessionRecord
from cloudassistant.services.sessions import Identity, parse_session_cookie

from _google_stub import build_services


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        ("ca_session=abc", "abc"),
        ("theme=dark; ca_session=abc; lang=en", "abc"),
        ("theme=dark;ca_session=abc", "abc"),
        ("xca_session=abc", None),
        ("ca_session=", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_session_cookie(header, expected) -> None:
    assert parse_session_cookie(header) == expected


def test_resolve_returns_email_for_known_session() -> None:
    services = build_services()
    services.store.save_session(SessionRecord(session_id="s1", email="ada@example.com"))
    services.store.save_session(SessionRecord(session_id="s2", email="bob@example.com"))

    assert services.resolver.resolve("ca_session=s1") == "ada@example.com"
    assert services.resolver.resolve("ca_session=s2") == "bob@example.com"


def test_resolve_returns_none_for_unknown_or_missing_cookie() -> None:
    services = build_services()

    assert services.resolver.resolve("ca_session=evicted") is None
    assert services.resolver.resolve(None) is None


def test_identify_prefers_session_over_email_parameter() -> None:
    services = build_services()
    services.store.save_session(SessionRecord(session_id="s1", email="ada@example.com"))

    identity = services.resolver.identify("ca_session=s1", "mallory@example.com")

    assert identity == Identity(email="ada@example.com", authenticated=True)


def test_identify_falls_back_to_unauthenticated_email() -> None:
    services = build_services()

    identity = services.resolver.identify("ca_session=unknown", "ada@example.com")

    assert identity == Identity(email="ada@example.com", authenticated=False)
    assert services.resolver.identify(None, None) is None


def test_email_fallback_can_be_disabled() -> None:
    services = build_services(allow_email_fallback=False)

    assert services.resolver.identify(None, "ada@example.com") is None
