"""
Field-level encryption for sensitive document values.

AES-256-GCM with a synthetic nonce: the 12 byte nonce is derived from an
HMAC-SHA256 of the plaintext, so equal plaintexts encrypt to equal
ciphertexts. Mongo filters on encrypted fields (team member email, event
user) rely on that.

Stored format is base64(nonce + ciphertext + tag).

Dependencies: cryptography
System role: Encryption of emails and secrets at rest and in URLs
"""

import base64
import binascii
import hashlib
import hmac

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from api_hub_applications.core.exceptions import DecryptionException

NONCE_SIZE = 12
TAG_SIZE = 16


class SensitiveCrypto:
    """Deterministic AES-GCM encrypter/decrypter for string values."""

    def __init__(self, key: bytes) -> None:
        if len(key) != 32:
            raise ValueError(f"Encryption key must be 32 bytes, got {len(key)}")
        self._key = key
        self._aesgcm = AESGCM(key)

    @classmethod
    def from_base64(cls, encoded_key: str) -> "SensitiveCrypto":
        return cls(base64.b64decode(encoded_key))

    def _nonce_for(self, plaintext: bytes) -> bytes:
        return hmac.new(self._key, plaintext, hashlib.sha256).digest()[:NONCE_SIZE]

    def encrypt(self, plaintext: str) -> str:
        data = plaintext.encode("utf-8")
        nonce = self._nonce_for(data)
        ciphertext = self._aesgcm.encrypt(nonce, data, None)
        return base64.urlsafe_b64encode(nonce + ciphertext).decode("ascii")

    def decrypt(self, encrypted: str) -> str:
        """
        Decrypt a value produced by encrypt().

        Raises:
            DecryptionException: If the value is malformed or was not encrypted with this key
        """
        try:
            data = base64.urlsafe_b64decode(encrypted.encode("ascii"))
        except (binascii.Error, ValueError, UnicodeEncodeError) as e:
            raise DecryptionException("Encrypted value is not valid base64") from e

        if len(data) < NONCE_SIZE + TAG_SIZE:
            raise DecryptionException("Encrypted value too short")

        try:
            plaintext = self._aesgcm.decrypt(data[:NONCE_SIZE], data[NONCE_SIZE:], None)
        except InvalidTag as e:
            raise DecryptionException("Encrypted value could not be decrypted") from e
        return plaintext.decode("utf-8")

    def encrypt_optional(self, plaintext: str | None) -> str | None:
        return None if plaintext is None else self.encrypt(plaintext)

    def decrypt_optional(self, encrypted: str | None) -> str | None:
        return None if encrypted is None else self.decrypt(encrypted)
