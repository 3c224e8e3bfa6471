# passguard/app/security/otp.py
"""
Email verification codes.

- 6-digit numeric codes from the secrets module
- Constant-time comparison
- Expiry and resend cooldown measured from the pending row's created_at
"""
import secrets
from datetime import datetime, timezone
from typing import Optional

OTP_DIGITS = 6


def generate_otp() -> str:
    """Random 6-digit code in 100000-999999 (no leading zero)."""
    return str(100000 + secrets.randbelow(900000))


def constant_time_compare(a: str, b: str) -> bool:
    """
    Compare two strings in constant time to prevent timing attacks.

    Args:
        a: Expected code
        b: Provided code

    Returns:
        True if strings match, False otherwise
    """
    if len(a) != len(b):
        # Still do the comparison to keep timing uniform
        secrets.compare_digest(a, a)
        return False
    return secrets.compare_digest(a, b)


def seconds_since(issued_at: datetime, now: Optional[datetime] = None) -> float:
    now = now or datetime.now(timezone.utc)

    # SQLite hands back naive datetimes; they were written as UTC
    if issued_at.tzinfo is None:
        issued_at = issued_at.replace(tzinfo=timezone.utc)

    return (now - issued_at).total_seconds()


def is_expired(issued_at: datetime, ttl_seconds: int, now: Optional[datetime] = None) -> bool:
    return seconds_since(issued_at, now) > ttl_seconds


def is_in_cooldown(issued_at: datetime, cooldown_seconds: int, now: Optional[datetime] = None) -> bool:
    return seconds_since(issued_at, now) < cooldown_seconds
