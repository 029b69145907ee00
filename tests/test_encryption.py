"""Tests for access-token encryption."""

import pytest

from shopmetrics.core.encryption import decrypt_token, encrypt_token


class TestEncryptionModule:
    """Tests for shopmetrics.core.encryption (used by Shopify token storage)."""

    def test_encrypt_decrypt_round_trip(self) -> None:
        """Encrypting then decrypting returns the original plaintext."""
        plaintext = "shpat_abc123_my_shopify_access_token"
        ciphertext = encrypt_token(plaintext)
        assert ciphertext != plaintext
        assert decrypt_token(ciphertext) == plaintext

    def test_encrypt_produces_different_ciphertext_each_call(self) -> None:
        """Fernet includes a timestamp + IV, so repeated encryptions differ."""
        ct1 = encrypt_token("same-token-value")
        ct2 = encrypt_token("same-token-value")
        assert ct1 != ct2
        assert decrypt_token(ct1) == decrypt_token(ct2) == "same-token-value"

    def test_decrypt_with_tampered_ciphertext_raises(self) -> None:
        """Modifying one character of ciphertext is detected."""
        ciphertext = encrypt_token("secret")
        mid = len(ciphertext) // 2
        tampered_char = "A" if ciphertext[mid] != "A" else "B"
        tampered = ciphertext[:mid] + tampered_char + ciphertext[mid + 1 :]
        with pytest.raises(ValueError):
            decrypt_token(tampered)

    def test_decrypt_garbage_raises(self) -> None:
        with pytest.raises(ValueError, match="cannot be decrypted"):
            decrypt_token("this-is-not-a-valid-fernet-token")

    def test_encrypt_empty_string(self) -> None:
        assert decrypt_token(encrypt_token("")) == ""
