# passguard/app/models/vault_entry.py
import uuid

from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime
from sqlalchemy.sql import func

from passguard.app.db.base import Base


def _new_entry_id() -> str:
    return str(uuid.uuid4())


class VaultEntry(Base):
    __tablename__ = "vault_entries"

    # Opaque id; not enumerable across accounts
    id = Column(String(36), primary_key=True, default=_new_entry_id)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # --- Plain metadata, returned as stored ---
    service = Column(String(255), nullable=False)
    username_or_email = Column(String(255), nullable=False)

    # --- Encrypted secret ---
    # password: AES-256-CBC ciphertext, hex
    # iv: 16 random bytes, hex (32 chars), fresh on every write
    # Both nullable so rows written before iv was required can still be
    # listed (and skipped); the store always writes them together.
    password = Column(Text, nullable=True)
    iv = Column(String(32), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    def __repr__(self) -> str:
        # never include ciphertext or iv
        return f"<VaultEntry id={self.id} user_id={self.user_id} service={self.service!r}>"
