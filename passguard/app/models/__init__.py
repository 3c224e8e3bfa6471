from passguard.app.models.user import User
from passguard.app.models.pending_registration import PendingRegistration
from passguard.app.models.vault_entry import VaultEntry

__all__ = ["User", "PendingRegistration", "VaultEntry"]
