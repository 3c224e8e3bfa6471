# passguard/app/api/v1/endpoints/vault.py
from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from passguard.app.api import deps
from passguard.app.core.errors import NotFoundError, ValidationError
from passguard.app.models.user import User
from passguard.app.schemas.vault import (
    MessageResponse,
    StoredVaultEntry,
    VaultEntryIn,
    VaultEntryOut,
    VaultUpdateResponse,
)
from passguard.app.services.vault import VaultService

router = APIRouter()


# 1. ADD AN ENTRY (POST)
@router.post("/add", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def add_password(
        entry_in: VaultEntryIn,
        current_user: User = Depends(deps.get_current_user),
        vault: VaultService = Depends(deps.get_vault_service),
):
    try:
        await vault.add_entry(
            current_user.id,
            entry_in.service,
            entry_in.username_or_email,
            entry_in.password,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    return MessageResponse(message="Password stored successfully")


# 2. LIST DECRYPTED ENTRIES (GET)
# Entries that fail to decrypt are left out, never reported per entry
@router.get("", response_model=List[VaultEntryOut])
@router.get("/", response_model=List[VaultEntryOut], include_in_schema=False)
async def get_passwords(
        current_user: User = Depends(deps.get_current_user),
        vault: VaultService = Depends(deps.get_vault_service),
):
    entries = await vault.list_entries(current_user.id)
    return [VaultEntryOut.model_validate(asdict(entry)) for entry in entries]


# 3. UPDATE AN ENTRY (PUT)
@router.put("/{entry_id}", response_model=VaultUpdateResponse)
async def update_password(
        entry_id: str,
        entry_in: VaultEntryIn,
        current_user: User = Depends(deps.get_current_user),
        vault: VaultService = Depends(deps.get_vault_service),
):
    try:
        entry = await vault.update_entry(
            entry_id,
            current_user.id,
            entry_in.service,
            entry_in.username_or_email,
            entry_in.password,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))

    return VaultUpdateResponse(
        message="Password updated successfully",
        updated_vault=StoredVaultEntry.model_validate(entry),
    )


# 4. DELETE AN ENTRY (DELETE)
@router.delete("/{entry_id}", response_model=MessageResponse)
async def delete_password(
        entry_id: str,
        current_user: User = Depends(deps.get_current_user),
        vault: VaultService = Depends(deps.get_vault_service),
):
    try:
        await vault.delete_entry(entry_id, current_user.id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))

    return MessageResponse(message="Password deleted successfully")
