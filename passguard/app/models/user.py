# passguard/app/models/user.py
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from passguard.app.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    # Stored lower-cased and trimmed
    email = Column(String(255), unique=True, index=True, nullable=False)

    # bcrypt hash, only used to log in; never touches vault encryption
    hashed_password = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
