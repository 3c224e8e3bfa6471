# passguard/app/security/encryption.py
"""
Server-side encryption for stored vault passwords.

Scheme:
- Key: SHA-256(ENCRYPTION_KEY) → 32 bytes (AES-256)
- Cipher: AES-256-CBC with PKCS7 padding
- IV: 16 random bytes per encrypt call, never reused
- Storage: ciphertext and IV as lower-case hex strings

CBC carries no MAC. A tampered ciphertext either fails padding validation
(DecryptionError) or decrypts to different bytes; it is not detected as
tampering. Switching to an authenticated mode would change the stored
format and needs a migration of existing rows.
"""
import hashlib
import os
from typing import NamedTuple, Optional

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from passguard.app.core.errors import ConfigurationError, DecryptionError

KEY_LENGTH = 32  # AES-256
IV_LENGTH = 16  # one AES block
BLOCK_SIZE_BITS = algorithms.AES.block_size


class EncryptedSecret(NamedTuple):
    """Hex-encoded result of one encrypt call."""
    ciphertext: str
    iv: str


def derive_key(secret: Optional[str]) -> bytes:
    """
    Derive the vault key from the configured passphrase.

    Raises:
        ConfigurationError: if the secret is missing or blank
    """
    if secret is None or not secret.strip():
        raise ConfigurationError(
            "ENCRYPTION_KEY is not set; refusing to start without a vault key"
        )
    return hashlib.sha256(secret.encode("utf-8")).digest()


class VaultCipher:
    """
    Encrypts and decrypts single secret strings with a fixed key.

    Holds no mutable state after construction, so one instance is shared
    by every request.
    """

    def __init__(self, key: bytes):
        if len(key) != KEY_LENGTH:
            raise ConfigurationError(
                f"Vault key must be {KEY_LENGTH} bytes, got {len(key)}"
            )
        self._key = key

    @classmethod
    def from_secret(cls, secret: Optional[str]) -> "VaultCipher":
        return cls(derive_key(secret))

    def encrypt(self, plaintext: str) -> EncryptedSecret:
        """
        Encrypt a password with a freshly generated IV.

        Args:
            plaintext: The secret to protect

        Returns:
            EncryptedSecret with hex ciphertext and hex IV
        """
        iv = os.urandom(IV_LENGTH)

        padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
        padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

        encryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()

        return EncryptedSecret(ciphertext=ciphertext.hex(), iv=iv.hex())

    def decrypt(self, ciphertext: str, iv: str) -> str:
        """
        Decrypt a stored password.

        Raises:
            DecryptionError: malformed hex, wrong IV or block length,
                bad padding, or plaintext that is not UTF-8
        """
        if not ciphertext or not iv:
            raise DecryptionError("Ciphertext and IV are both required")

        try:
            iv_bytes = bytes.fromhex(iv)
            data = bytes.fromhex(ciphertext)
        except (ValueError, TypeError) as exc:
            raise DecryptionError("Ciphertext or IV is not valid hex") from exc

        if len(iv_bytes) != IV_LENGTH:
            raise DecryptionError(
                f"IV must be {IV_LENGTH} bytes, got {len(iv_bytes)}"
            )
        if len(data) % IV_LENGTH != 0:
            raise DecryptionError("Ciphertext length is not a multiple of the block size")

        decryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv_bytes)).decryptor()
        padded = decryptor.update(data) + decryptor.finalize()

        unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
        try:
            raw = unpadder.update(padded) + unpadder.finalize()
        except ValueError as exc:
            raise DecryptionError("Invalid padding") from exc

        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecryptionError("Decrypted bytes are not valid UTF-8") from exc
