from datetime import datetime, timedelta, timezone

import pytest

from cyberhunter.application.use_cases.notifications import fan_out_recipients
from cyberhunter.infrastructure.security import (
    create_access_token,
    decode_access_token,
    generate_url_token,
    get_password_hash,
    hash_url_token,
    password_signature,
    verify_password,
)
from cyberhunter.utils import ensure_app_naive_datetime, page_count, resolve_page
from cyberhunter.utils.datetime import _resolve_timezone


def test_fan_out_skips_actor_blanks_and_repeats() -> None:
    assert fan_out_recipients([3, None, 1, 3, 2, 0, 1], actor_id=2) == [3, 1]


def test_resolve_page_clamps_to_configured_bounds() -> None:
    assert resolve_page() == resolve_page(0, -5)
    assert resolve_page(2, 20).offset == 20
    assert resolve_page(1, 10_000).limit == 100
    assert resolve_page(None, None, default_limit=20).limit == 20


def test_page_count_rounds_up() -> None:
    assert page_count(0, 10) == 0
    assert page_count(21, 10) == 3


def test_access_token_round_trip() -> None:
    token = create_access_token({"sub": "7"})
    assert decode_access_token(token)["sub"] == "7"


def test_expired_or_garbage_tokens_are_rejected() -> None:
    expired = create_access_token({"sub": "7"}, expires_delta=timedelta(seconds=-1))
    for token in (expired, "not-a-token"):
        with pytest.raises(ValueError):
            decode_access_token(token)


def test_password_hash_and_signature() -> None:
    hashed = get_password_hash("Secret123")
    assert verify_password("Secret123", hashed)
    assert not verify_password("secret123", hashed)
    assert password_signature(hashed, True) != password_signature(hashed, False)


def test_url_tokens_store_only_the_digest() -> None:
    raw, digest = generate_url_token()
    assert raw != digest
    assert hash_url_token(raw) == digest


def test_health(client) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "Server is running"}


@pytest.mark.parametrize(
    ("name", "offset"),
    [
        ("UTC", timedelta(0)),
        ("UTC+5:30", timedelta(hours=5, minutes=30)),
        ("GMT-03", timedelta(hours=-3)),
        ("Nowhere/Special", timedelta(0)),
    ],
)
def test_timezone_names_and_offsets(name: str, offset: timedelta) -> None:
    assert _resolve_timezone(name).utcoffset(datetime(2024, 1, 1)) == offset


def test_aware_datetimes_are_stored_naive_in_app_zone() -> None:
    aware = datetime(2024, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert ensure_app_naive_datetime(aware) == datetime(2024, 5, 1, 10, 0)
    assert ensure_app_naive_datetime(None) is None
