# passguard/app/models/pending_registration.py
"""
ORM model for accounts waiting on email verification.

A row lives from /auth/register until the code is verified or found
expired. created_at doubles as the OTP issue time: it is reset whenever
a new code is sent, and the TTL and resend cooldown are measured from it.
"""
from sqlalchemy import Column, Integer, String, DateTime

from passguard.app.db.base import Base


class PendingRegistration(Base):
    __tablename__ = "pending_registrations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)

    # Already hashed; copied to the User row on verification
    hashed_password = Column(String(255), nullable=False)

    # 6-digit one-time code
    otp = Column(String(6), nullable=False)

    # Set explicitly (timezone-aware UTC) by the account service
    created_at = Column(DateTime(timezone=True), nullable=False)
