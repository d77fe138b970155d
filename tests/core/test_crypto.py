"""
Test suite for SensitiveCrypto.

Values encrypted for storage and URLs must round trip, and equal
plaintexts must encrypt identically so Mongo can filter on them.

System role: Verification of field-level encryption
"""

import base64

import pytest

from api_hub_applications.core.crypto import SensitiveCrypto
from api_hub_applications.core.exceptions import DecryptionException


class TestSensitiveCrypto:
    """Test suite for SensitiveCrypto."""

    def test_encrypt_should_be_deterministic(self, crypto: SensitiveCrypto) -> None:
        # Act
        first = crypto.encrypt("jessie@example.com")
        second = crypto.encrypt("jessie@example.com")

        # Assert
        assert first == second
        assert first != "jessie@example.com"

    def test_different_plaintexts_should_encrypt_differently(self, crypto: SensitiveCrypto) -> None:
        assert crypto.encrypt("jessie@example.com") != crypto.encrypt("james@example.com")

    def test_decrypt_should_return_original_value(self, crypto: SensitiveCrypto) -> None:
        encrypted = crypto.encrypt("meowth@example.com")

        assert crypto.decrypt(encrypted) == "meowth@example.com"

    def test_encrypted_value_should_be_url_safe(self, crypto: SensitiveCrypto) -> None:
        encrypted = crypto.encrypt("a" * 200)

        assert "/" not in encrypted
        assert "+" not in encrypted

    def test_decrypt_with_other_key_should_raise(self, crypto: SensitiveCrypto) -> None:
        # Arrange
        other = SensitiveCrypto(b"x" * 32)
        encrypted = other.encrypt("jessie@example.com")

        # Act & Assert
        with pytest.raises(DecryptionException):
            crypto.decrypt(encrypted)

    @pytest.mark.parametrize("value", ["not base64!", "c2hvcnQ=", ""])
    def test_decrypt_malformed_value_should_raise(self, crypto: SensitiveCrypto, value: str) -> None:
        with pytest.raises(DecryptionException):
            crypto.decrypt(value)

    def test_optional_helpers_should_pass_none_through(self, crypto: SensitiveCrypto) -> None:
        assert crypto.encrypt_optional(None) is None
        assert crypto.decrypt_optional(None) is None
        assert crypto.decrypt_optional(crypto.encrypt_optional("secret")) == "secret"

    def test_key_must_be_32_bytes(self) -> None:
        with pytest.raises(ValueError, match="32 bytes"):
            SensitiveCrypto.from_base64(base64.b64encode(b"too short").decode("ascii"))
