# passguard/app/core/errors.py
"""
Domain errors raised by the vault core and the account flow.

Endpoints translate the expected ones (validation, not found, auth) into
HTTPException. StorageError and anything unexpected become a generic 500;
the detail is logged server-side only.
"""


class PassGuardError(Exception):
    """Base class for all application errors."""


class ConfigurationError(PassGuardError):
    """Required configuration is missing or unusable (raised at startup)."""


class ValidationError(PassGuardError):
    """A required request field is missing or empty."""


class NotFoundError(PassGuardError):
    """
    The record does not exist for this owner.

    Deliberately the same outcome whether the id never existed or belongs
    to another account, so callers cannot probe for other users' entries.
    """


class DecryptionError(PassGuardError):
    """Ciphertext or IV is malformed, or padding validation failed."""


class StorageError(PassGuardError):
    """The database rejected or failed an operation."""


class MailDeliveryError(PassGuardError):
    """The verification email could not be sent."""


class AuthError(PassGuardError):
    """Account flow failure carrying the HTTP status it maps to."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
