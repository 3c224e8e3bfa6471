# passguard/app/schemas/vault.py
"""
Request and response bodies for the vault routes.

JSON keys follow the web client (`_id`, `usernameOrEmail`, `createdAt`);
Python attributes stay snake_case.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VaultEntryIn(BaseModel):
    # All optional here: a missing field is answered with 400 by the
    # service, not with a 422 from request parsing
    service: Optional[str] = None
    username_or_email: Optional[str] = Field(default=None, alias="usernameOrEmail")
    password: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class VaultEntryOut(BaseModel):
    """A decrypted entry as returned by GET /vault."""
    id: str = Field(alias="_id")
    service: str
    username_or_email: str = Field(alias="usernameOrEmail")
    password: str
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class StoredVaultEntry(BaseModel):
    """The entry as persisted; password is the hex ciphertext."""
    id: str = Field(alias="_id")
    user_id: int = Field(alias="user")
    service: str
    username_or_email: str = Field(alias="usernameOrEmail")
    password: Optional[str] = None
    iv: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class MessageResponse(BaseModel):
    message: str


class VaultUpdateResponse(BaseModel):
    message: str
    updated_vault: StoredVaultEntry = Field(alias="updatedVault")

    model_config = ConfigDict(populate_by_name=True)
