"""
Unit tests for credential encryption at rest.
"""
import pytest
from cryptography.fernet import Fernet

from taskvora.exceptions import DecryptionError
from taskvora.services.crypto import CredentialCipher, rotate_key


class TestCredentialCipher:
    """Fernet round-trip and failure modes."""

    @pytest.mark.parametrize("plain", ["hunter2", "", "çãõ-senha-😀", "a" * 500, " spaces inside "])
    def test_round_trip(self, cipher, plain):
        assert cipher.decrypt(cipher.encrypt(plain)) == plain

    def test_ciphertext_is_not_plaintext(self, cipher):
        token = cipher.encrypt("hunter2")
        assert "hunter2" not in token

    def test_same_plaintext_gives_different_tokens(self, cipher):
        assert cipher.encrypt("hunter2") != cipher.encrypt("hunter2")

    def test_wrong_key_raises(self, cipher):
        other = CredentialCipher(Fernet.generate_key().decode())
        token = cipher.encrypt("hunter2")
        with pytest.raises(DecryptionError):
            other.decrypt(token)

    def test_garbage_token_raises(self, cipher):
        with pytest.raises(DecryptionError):
            cipher.decrypt("U2FsdGVkX1+not-a-fernet-token")

    def test_decryption_error_is_value_error(self, cipher):
        with pytest.raises(ValueError):
            cipher.decrypt("")

    def test_invalid_key_fails_fast(self):
        with pytest.raises(RuntimeError):
            CredentialCipher("your-32-char-secret-key-here")


class TestRotateKey:
    """Re-encryption under a new key."""

    def test_rotate_key(self):
        old_key = Fernet.generate_key().decode()
        new_key = Fernet.generate_key().decode()
        token = CredentialCipher(old_key).encrypt("hunter2")

        rotated = rotate_key(old_key, new_key, token)

        assert CredentialCipher(new_key).decrypt(rotated) == "hunter2"
        with pytest.raises(DecryptionError):
            CredentialCipher(old_key).decrypt(rotated)
