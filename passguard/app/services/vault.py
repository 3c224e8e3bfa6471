# passguard/app/services/vault.py
"""
Vault service: the only code that touches the cipher.

Writes validate, encrypt with a fresh IV, then store. Reads fetch, then
decrypt each entry on its own; an entry that cannot be decrypted is
logged and left out so the rest of the vault is still returned.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Union

from passguard.app.core.errors import DecryptionError, NotFoundError, ValidationError
from passguard.app.models.vault_entry import VaultEntry
from passguard.app.security.encryption import VaultCipher
from passguard.app.services.vault_store import VaultStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecryptedEntry:
    id: str
    service: str
    username_or_email: str
    password: str
    created_at: Optional[datetime]


def _require_fields(service: Optional[str], identity: Optional[str], password: Optional[str]) -> None:
    for value in (service, identity, password):
        if not isinstance(value, str) or not value.strip():
            raise ValidationError("All fields are required")


class VaultService:
    def __init__(self, store: VaultStore, cipher: VaultCipher):
        self.store = store
        self.cipher = cipher

    async def add_entry(
        self,
        owner_id: int,
        service: Optional[str],
        identity: Optional[str],
        password: Optional[str],
    ) -> VaultEntry:
        _require_fields(service, identity, password)

        secret = self.cipher.encrypt(password)
        entry = await self.store.create(
            owner_id,
            service=service,
            identity=identity,
            ciphertext=secret.ciphertext,
            iv=secret.iv,
        )
        logger.info("Stored vault entry %s for user %s", entry.id, owner_id)
        return entry

    def open_record(self, record: VaultEntry) -> Union[DecryptedEntry, DecryptionError]:
        """
        Decrypt one stored record.

        Returns the DecryptionError instead of raising it, so a listing can
        keep the successes and report the failures explicitly.
        """
        if not record.password or not record.iv:
            return DecryptionError("Entry is missing its ciphertext or IV")
        try:
            plaintext = self.cipher.decrypt(record.password, record.iv)
        except DecryptionError as exc:
            return exc
        return DecryptedEntry(
            id=record.id,
            service=record.service,
            username_or_email=record.username_or_email,
            password=plaintext,
            created_at=record.created_at,
        )

    async def list_entries(self, owner_id: int) -> List[DecryptedEntry]:
        records = await self.store.list_by_owner(owner_id)

        entries: List[DecryptedEntry] = []
        for record, outcome in zip(records, map(self.open_record, records)):
            if isinstance(outcome, DecryptionError):
                logger.warning("Skipping vault entry %s: %s", record.id, outcome)
                continue
            entries.append(outcome)
        return entries

    async def update_entry(
        self,
        entry_id: str,
        owner_id: int,
        service: Optional[str],
        identity: Optional[str],
        password: Optional[str],
    ) -> VaultEntry:
        _require_fields(service, identity, password)

        secret = self.cipher.encrypt(password)
        entry = await self.store.update_by_id_and_owner(
            entry_id,
            owner_id,
            service=service,
            identity=identity,
            ciphertext=secret.ciphertext,
            iv=secret.iv,
        )
        if entry is None:
            raise NotFoundError("Vault item not found or unauthorized")
        return entry

    async def delete_entry(self, entry_id: str, owner_id: int) -> None:
        if not await self.store.delete_by_id_and_owner(entry_id, owner_id):
            raise NotFoundError("Vault item not found")
        logger.info("Deleted vault entry %s for user %s", entry_id, owner_id)
