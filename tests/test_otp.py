"""Tests for verification code helpers."""

from datetime import datetime, timedelta, timezone

from passguard.app.security import otp


def test_generate_otp_is_six_digits():
    for _ in range(50):
        code = otp.generate_otp()
        assert len(code) == 6
        assert code.isdigit()
        assert code[0] != "0"


def test_constant_time_compare():
    assert otp.constant_time_compare("123456", "123456") is True
    assert otp.constant_time_compare("123456", "654321") is False
    assert otp.constant_time_compare("123456", "12345") is False


def test_expiry_with_naive_timestamp():
    now = datetime.now(timezone.utc)
    issued = (now - timedelta(minutes=6)).replace(tzinfo=None)
    assert otp.is_expired(issued, 300, now=now) is True
    assert otp.is_expired(now - timedelta(minutes=4), 300, now=now) is False


def test_cooldown():
    now = datetime.now(timezone.utc)
    assert otp.is_in_cooldown(now - timedelta(seconds=10), 60, now=now) is True
    assert otp.is_in_cooldown(now - timedelta(seconds=61), 60, now=now) is False
