"""Pairing code helper tests."""

from datetime import datetime, timedelta, timezone

from safelink.utils.codes import (
    CODE_PATTERN,
    ensure_utc,
    generate_code,
    is_expired,
    normalize_code,
)


def test_generated_codes_match_pattern():
    for _ in range(200):
        assert CODE_PATTERN.match(generate_code())


def test_generate_code_length():
    assert len(generate_code(8)) == 8


def test_normalize_strips_one_hyphen_and_uppercases():
    assert normalize_code("ab-12cd") == "AB12CD"
    assert normalize_code("AB1234") == "AB1234"
    assert normalize_code("  xy9z01 ") == "XY9Z01"


def test_normalize_removes_only_first_hyphen():
    assert normalize_code("a-b-c") == "AB-C"


def test_is_expired():
    now = datetime.now(timezone.utc)
    assert is_expired(now - timedelta(seconds=1), now)
    assert not is_expired(now + timedelta(hours=1), now)
    assert not is_expired(now, now)


def test_is_expired_treats_naive_as_utc():
    now = datetime.now(timezone.utc)
    naive_past = (now - timedelta(minutes=5)).replace(tzinfo=None)
    assert is_expired(naive_past, now)
    assert ensure_utc(naive_past).tzinfo is timezone.utc
