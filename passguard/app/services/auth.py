# passguard/app/services/auth.py
"""
Account flow: register → email code → verify → login.

Every failure is an AuthError carrying the status code the endpoint
should answer with.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from passguard.app.core.config import settings
from passguard.app.core.errors import AuthError, MailDeliveryError
from passguard.app.models.pending_registration import PendingRegistration
from passguard.app.models.user import User
from passguard.app.security import hashing, jwt, otp
from passguard.app.services.mailer import Mailer

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_NAME_LENGTH = 2


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalars().first()


async def get_pending(db: AsyncSession, email: str) -> Optional[PendingRegistration]:
    result = await db.execute(
        select(PendingRegistration).where(PendingRegistration.email == email)
    )
    return result.scalars().first()


async def _discard_pending(db: AsyncSession, email: str) -> None:
    await db.execute(delete(PendingRegistration).where(PendingRegistration.email == email))
    await db.commit()


def issue_token(user: User) -> str:
    return jwt.create_access_token(data={"sub": str(user.id)})


async def register(
    db: AsyncSession,
    mailer: Mailer,
    name: Optional[str],
    email: Optional[str],
    password: Optional[str],
) -> str:
    """
    Create or refresh a pending registration and email its code.

    Returns:
        The normalized email the code was sent to
    """
    if not name or not email or not password:
        raise AuthError("Name, email, and password are required")

    name = name.strip()
    if len(name) < MIN_NAME_LENGTH:
        raise AuthError("Name must be at least 2 characters long")

    if not EMAIL_RE.match(email):
        raise AuthError("Invalid email format")
    email = normalize_email(email)

    if await get_user_by_email(db, email):
        raise AuthError("User already exists")

    code = otp.generate_otp()
    hashed = hashing.get_password_hash(password)
    now = datetime.now(timezone.utc)

    pending = await get_pending(db, email)
    if pending:
        # Re-registration replaces the details and restarts the clock
        pending.name = name
        pending.hashed_password = hashed
        pending.otp = code
        pending.created_at = now
    else:
        pending = PendingRegistration(
            name=name,
            email=email,
            hashed_password=hashed,
            otp=code,
            created_at=now,
        )
    db.add(pending)
    await db.commit()

    try:
        await mailer.send_verification_code(email, name, code)
    except MailDeliveryError as exc:
        raise AuthError("Failed to send verification code", status_code=500) from exc

    return email


async def resend_otp(db: AsyncSession, mailer: Mailer, email: Optional[str]) -> None:
    if not email:
        raise AuthError("Email is required")
    email = normalize_email(email)

    pending = await get_pending(db, email)
    if not pending:
        raise AuthError("No pending registration found for this email")

    if otp.is_in_cooldown(pending.created_at, settings.OTP_RESEND_COOLDOWN_SECONDS):
        raise AuthError(
            "Please wait a minute before requesting a new code", status_code=429
        )

    code = otp.generate_otp()
    pending.otp = code
    pending.created_at = datetime.now(timezone.utc)
    db.add(pending)
    await db.commit()

    try:
        await mailer.send_verification_code(email, pending.name, code, resend=True)
    except MailDeliveryError as exc:
        raise AuthError("Failed to resend verification code", status_code=500) from exc


async def verify_otp(db: AsyncSession, email: Optional[str], code: Optional[str]) -> Tuple[User, str]:
    """
    Turn a pending registration into an account.

    Returns:
        (new user, access token)
    """
    if not email or not code:
        raise AuthError("Email and OTP are required")
    email = normalize_email(email)

    pending = await get_pending(db, email)
    if not pending:
        raise AuthError("No pending registration found for this email")

    if not otp.constant_time_compare(pending.otp, str(code).strip()):
        raise AuthError("Invalid verification code")

    if otp.is_expired(pending.created_at, settings.OTP_TTL_SECONDS):
        await _discard_pending(db, email)
        raise AuthError("Verification code expired")

    if await get_user_by_email(db, email):
        await _discard_pending(db, email)
        raise AuthError("User already exists")

    user = User(name=pending.name, email=pending.email, hashed_password=pending.hashed_password)
    db.add(user)
    await db.delete(pending)
    try:
        await db.commit()
    except IntegrityError as exc:
        # Another verification for the same email won the race
        await db.rollback()
        raise AuthError("User already exists") from exc
    await db.refresh(user)

    logger.info("Verified account %s", user.id)
    return user, issue_token(user)


async def login(db: AsyncSession, email: Optional[str], password: Optional[str]) -> Tuple[User, str]:
    if not email or not password:
        raise AuthError("Email and password are required")

    user = await get_user_by_email(db, normalize_email(email))
    if not user or not hashing.verify_password(password, user.hashed_password):
        raise AuthError("Invalid credentials")

    return user, issue_token(user)
