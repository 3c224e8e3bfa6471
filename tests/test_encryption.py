"""Tests for vault key derivation and the AES-256-CBC cipher."""

import hashlib

import pytest

from passguard.app.core.errors import ConfigurationError, DecryptionError
from passguard.app.security.encryption import IV_LENGTH, VaultCipher, derive_key


class TestDeriveKey:

    def test_key_is_sha256_of_secret(self):
        assert derive_key("s3cret") == hashlib.sha256(b"s3cret").digest()
        assert len(derive_key("s3cret")) == 32

    @pytest.mark.parametrize("secret", [None, "", "   "])
    def test_missing_secret_fails_fast(self, secret):
        with pytest.raises(ConfigurationError):
            derive_key(secret)

    def test_cipher_rejects_short_key(self):
        with pytest.raises(ConfigurationError):
            VaultCipher(b"too-short")


class TestEncryptDecrypt:

    @pytest.mark.parametrize("plaintext", [
        "hunter2",
        "",
        "exactly16bytes!!",
        "pässwörd-🔐-密码",
        "x" * 1000,
    ])
    def test_round_trip(self, cipher, plaintext):
        secret = cipher.encrypt(plaintext)
        assert cipher.decrypt(secret.ciphertext, secret.iv) == plaintext

    def test_output_is_hex(self, cipher):
        secret = cipher.encrypt("hunter2")
        assert len(secret.iv) == IV_LENGTH * 2
        bytes.fromhex(secret.iv)
        # one block of padded plaintext
        assert len(bytes.fromhex(secret.ciphertext)) == 16

    def test_same_plaintext_gets_fresh_iv(self, cipher):
        first = cipher.encrypt("same password")
        second = cipher.encrypt("same password")
        assert first.iv != second.iv
        assert first.ciphertext != second.ciphertext

    def test_decrypt_is_deterministic(self, cipher):
        secret = cipher.encrypt("hunter2")
        assert cipher.decrypt(*secret) == cipher.decrypt(*secret)

    def test_other_key_never_returns_plaintext(self, cipher):
        secret = cipher.encrypt("hunter2")
        other = VaultCipher.from_secret("a-different-secret")
        try:
            assert other.decrypt(secret.ciphertext, secret.iv) != "hunter2"
        except DecryptionError:
            pass


class TestDecryptFailures:

    def test_empty_values(self, cipher):
        secret = cipher.encrypt("hunter2")
        with pytest.raises(DecryptionError):
            cipher.decrypt("", secret.iv)
        with pytest.raises(DecryptionError):
            cipher.decrypt(secret.ciphertext, "")

    def test_non_hex(self, cipher):
        secret = cipher.encrypt("hunter2")
        with pytest.raises(DecryptionError):
            cipher.decrypt("not-hex-at-all", secret.iv)
        with pytest.raises(DecryptionError):
            cipher.decrypt(secret.ciphertext, "zz" * 16)

    def test_wrong_iv_length(self, cipher):
        secret = cipher.encrypt("hunter2")
        with pytest.raises(DecryptionError):
            cipher.decrypt(secret.ciphertext, secret.iv[:-2])

    def test_partial_block(self, cipher):
        secret = cipher.encrypt("hunter2")
        with pytest.raises(DecryptionError):
            cipher.decrypt(secret.ciphertext[:-2], secret.iv)

    def test_bad_padding(self, cipher):
        # All-zero plaintext block after decryption is invalid PKCS7
        secret = cipher.encrypt("hunter2")
        raw = bytes.fromhex(secret.ciphertext)
        iv = bytes.fromhex(secret.iv)
        # XOR the IV with the real padded block so the decrypted block is zeros
        padded = b"hunter2" + bytes([9]) * 9
        forged_iv = bytes(a ^ b for a, b in zip(iv, padded))
        with pytest.raises(DecryptionError):
            cipher.decrypt(raw.hex(), forged_iv.hex())
