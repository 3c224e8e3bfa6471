# passguard/app/services/vault_store.py
"""
Owner-scoped persistence for vault entries.

Every query filters on both the entry id and the owner id. A row owned by
someone else is reported exactly like a missing row (None / False).
"""
import logging
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from passguard.app.core.errors import StorageError
from passguard.app.models.vault_entry import VaultEntry

logger = logging.getLogger(__name__)


class VaultStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        owner_id: int,
        service: str,
        identity: str,
        ciphertext: str,
        iv: str,
    ) -> VaultEntry:
        entry = VaultEntry(
            user_id=owner_id,
            service=service,
            username_or_email=identity,
            password=ciphertext,
            iv=iv,
        )
        try:
            self.db.add(entry)
            await self.db.commit()
            await self.db.refresh(entry)
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise StorageError("Could not create vault entry") from exc
        return entry

    async def list_by_owner(self, owner_id: int) -> List[VaultEntry]:
        query = (
            select(VaultEntry)
            .where(VaultEntry.user_id == owner_id)
            .order_by(VaultEntry.created_at)
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as exc:
            raise StorageError("Could not list vault entries") from exc
        return list(result.scalars().all())

    async def find_by_id_and_owner(self, entry_id: str, owner_id: int) -> Optional[VaultEntry]:
        query = (
            select(VaultEntry)
            .where(VaultEntry.id == entry_id, VaultEntry.user_id == owner_id)
            # a previous update in this session must not serve stale columns
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as exc:
            raise StorageError("Could not load vault entry") from exc
        return result.scalars().first()

    async def update_by_id_and_owner(
        self,
        entry_id: str,
        owner_id: int,
        service: str,
        identity: str,
        ciphertext: str,
        iv: str,
    ) -> Optional[VaultEntry]:
        """
        Replace service, identity, ciphertext and iv in one UPDATE.

        There is no read before the write: the row filter and the new
        values go to the database as a single statement, so concurrent
        updates end as one complete write, never a mix of two.
        """
        statement = (
            update(VaultEntry)
            .where(VaultEntry.id == entry_id, VaultEntry.user_id == owner_id)
            .values(
                service=service,
                username_or_email=identity,
                password=ciphertext,
                iv=iv,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.db.execute(statement)
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise StorageError("Could not update vault entry") from exc

        if result.rowcount == 0:
            return None
        return await self.find_by_id_and_owner(entry_id, owner_id)

    async def delete_by_id_and_owner(self, entry_id: str, owner_id: int) -> bool:
        statement = (
            delete(VaultEntry)
            .where(VaultEntry.id == entry_id, VaultEntry.user_id == owner_id)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.db.execute(statement)
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise StorageError("Could not delete vault entry") from exc
        return result.rowcount > 0
