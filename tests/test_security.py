from datetime import datetime, timedelta, timezone

from app.core.config import settings
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    lockout_remaining_minutes,
    next_lockout,
    verify_password,
    verify_token_type,
)

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def test_password_hash_round_trip():
    hashed = hash_password("correct horse")

    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong", hashed)


def test_token_types():
    access = decode_token(create_access_token({"sub": "abc"}))
    refresh = decode_token(create_refresh_token({"sub": "abc"}))

    assert access["sub"] == "abc"
    assert verify_token_type(access, "access")
    assert verify_token_type(refresh, "refresh")
    assert not verify_token_type(refresh, "access")


def test_expired_or_tampered_token_decodes_to_none():
    expired = create_access_token({"sub": "abc"}, expires_delta=timedelta(seconds=-5))

    assert decode_token(expired) is None
    assert decode_token("not.a.token") is None


def test_lockout_remaining_rounds_up():
    assert lockout_remaining_minutes(None, NOW) == 0
    assert lockout_remaining_minutes(NOW - timedelta(seconds=1), NOW) == 0
    assert lockout_remaining_minutes(NOW + timedelta(minutes=14, seconds=1), NOW) == 15
    assert lockout_remaining_minutes(NOW + timedelta(minutes=3), NOW) == 3


def test_lockout_remaining_accepts_naive_datetimes():
    naive = (NOW + timedelta(minutes=2)).replace(tzinfo=None)

    assert lockout_remaining_minutes(naive, NOW) == 2


def test_next_lockout_threshold():
    assert next_lockout(settings.max_failed_logins - 1, NOW) is None
    assert next_lockout(settings.max_failed_logins, NOW) == NOW + timedelta(minutes=settings.lockout_minutes)
