"""AES-256-CBC encryption/decryption with per-message IVs."""
import hmac
import logging
import secrets

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import padding as sym_padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from .. import codec
from ..config import AES_IV_SIZE, AES_KEY_SIZE, MAC_KEY_INFO, MAC_TAG_SIZE
from ..exceptions import (
    CryptoOperationError,
    EncodingError,
    KeyFormatError
)
from ..keys import Key, KeyAlgorithm, KeyRole

logger = logging.getLogger(__name__)


class SymmetricKeyManager:
    """
    Manages AES-256-CBC keys and bulk payload encryption.

    Ciphertext format (before base64): ``iv || cbc_ciphertext || tag`` where
    ``iv`` is 16 fresh random bytes per call and ``tag`` is HMAC-SHA256 over
    ``iv || cbc_ciphertext`` under a subkey derived from the AES key.
    Nothing is shared between calls.
    """

    AES_KEY_SIZE = AES_KEY_SIZE
    AES_IV_SIZE = AES_IV_SIZE
    MAC_TAG_SIZE = MAC_TAG_SIZE
    BLOCK_SIZE = 16  # bytes

    def generate_key(self) -> Key:
        """
        Generate a random AES-256 key.

        Returns:
            New extractable symmetric key
        """
        key = secrets.token_bytes(self.AES_KEY_SIZE)
        logger.info(f"Generated AES-{self.AES_KEY_SIZE * 8} key")
        return Key(KeyAlgorithm.AES_CBC, KeyRole.SECRET, key)

    def export_key(self, key: Key) -> str:
        """
        Export raw key bytes as base64.

        Raises:
            KeyRoleError: If key is not an extractable AES key
        """
        raw = Key.check(key, KeyAlgorithm.AES_CBC, KeyRole.SECRET)
        key.require_extractable()
        return codec.encode(raw)

    def import_key(self, encoded: str) -> Key:
        """
        Import a symmetric key from base64 raw bytes.

        Raises:
            KeyFormatError: If the text is not base64 or not 32 bytes decoded
        """
        try:
            raw = codec.decode(encoded)
        except EncodingError as e:
            raise KeyFormatError(f"Invalid key encoding: {e}", e) from e

        if len(raw) != self.AES_KEY_SIZE:
            logger.warning(f"Rejected AES key import: {len(raw)} bytes")
            raise KeyFormatError(
                f"AES-256 key must be {self.AES_KEY_SIZE} bytes, got {len(raw)} bytes"
            )

        return Key(KeyAlgorithm.AES_CBC, KeyRole.SECRET, raw)

    def _mac_key(self, raw_key: bytes) -> bytes:
        hkdf = HKDF(
            algorithm=hashes.SHA256(),
            length=self.MAC_TAG_SIZE,
            salt=None,
            info=MAC_KEY_INFO
        )
        return hkdf.derive(raw_key)

    def _tag(self, raw_key: bytes, data: bytes) -> bytes:
        return hmac.new(self._mac_key(raw_key), data, 'sha256').digest()

    def encrypt_bytes(self, key: Key, data: bytes) -> str:
        """
        Encrypt raw bytes under a symmetric key.

        Returns:
            Base64 of ``iv || ciphertext || tag``

        Raises:
            KeyRoleError: If key is not an AES key
        """
        raw_key = Key.check(key, KeyAlgorithm.AES_CBC, KeyRole.SECRET)

        # Fresh IV for every message
        iv = secrets.token_bytes(self.AES_IV_SIZE)

        padder = sym_padding.PKCS7(self.BLOCK_SIZE * 8).padder()
        padded = padder.update(data) + padder.finalize()

        encryptor = Cipher(algorithms.AES(raw_key), modes.CBC(iv)).encryptor()
        encrypted = encryptor.update(padded) + encryptor.finalize()

        body = iv + encrypted
        logger.debug(f"AES-CBC encrypted {len(data)} bytes into {len(body) + self.MAC_TAG_SIZE} bytes")
        return codec.encode(body + self._tag(raw_key, body))

    def encrypt(self, key: Key, data: str) -> str:
        """
        Encrypt text using AES-256-CBC.

        Args:
            key: Symmetric key handle
            data: Plaintext string, encoded as UTF-8

        Returns:
            Base64-encoded ciphertext carrying its own IV

        Raises:
            EncodingError: If data is not a string
            KeyRoleError: If key is not an AES key
        """
        if not isinstance(data, str):
            raise EncodingError(f"Data must be string, got {type(data).__name__}")

        return self.encrypt_bytes(key, data.encode('utf-8'))

    def decrypt_bytes(self, encoded_key: str, ciphertext: str) -> bytes:
        """
        Decrypt ciphertext produced by ``encrypt_bytes`` or ``encrypt``.

        Args:
            encoded_key: Output of ``export_key``
            ciphertext: Base64 of ``iv || ciphertext || tag``

        Returns:
            Decrypted bytes

        Raises:
            KeyFormatError: If the key cannot be imported
            EncodingError: If the ciphertext is not valid base64
            CryptoOperationError: If the tag or padding check fails
        """
        raw_key = self.import_key(encoded_key).material
        message = codec.decode(ciphertext)

        min_size = self.AES_IV_SIZE + self.BLOCK_SIZE + self.MAC_TAG_SIZE
        body_size = len(message) - self.AES_IV_SIZE - self.MAC_TAG_SIZE
        if len(message) < min_size or body_size % self.BLOCK_SIZE:
            logger.warning(f"AES-CBC ciphertext has invalid length: {len(message)} bytes")
            raise CryptoOperationError(
                f"Ciphertext has invalid length: {len(message)} bytes"
            )

        body, tag = message[:-self.MAC_TAG_SIZE], message[-self.MAC_TAG_SIZE:]
        if not hmac.compare_digest(tag, self._tag(raw_key, body)):
            logger.warning("AES-CBC ciphertext failed integrity check")
            raise CryptoOperationError(
                "Decryption failed: integrity check failed (wrong key or altered ciphertext)"
            )

        iv, encrypted = body[:self.AES_IV_SIZE], body[self.AES_IV_SIZE:]

        try:
            decryptor = Cipher(algorithms.AES(raw_key), modes.CBC(iv)).decryptor()
            padded = decryptor.update(encrypted) + decryptor.finalize()

            unpadder = sym_padding.PKCS7(self.BLOCK_SIZE * 8).unpadder()
            decrypted = unpadder.update(padded) + unpadder.finalize()
        except ValueError as e:
            logger.warning(f"AES-CBC decryption failed: {e}")
            raise CryptoOperationError(f"Decryption failed: {e}", e) from e

        logger.debug(f"AES-CBC decrypted {len(decrypted)} bytes")
        return decrypted

    def decrypt(self, encoded_key: str, ciphertext: str) -> str:
        """
        Decrypt ciphertext produced by ``encrypt`` back to text.

        Raises:
            KeyFormatError: If the key cannot be imported
            EncodingError: If the ciphertext is not base64 or the plaintext is not UTF-8
            CryptoOperationError: If the tag or padding check fails
        """
        decrypted = self.decrypt_bytes(encoded_key, ciphertext)

        try:
            return decrypted.decode('utf-8')
        except UnicodeDecodeError as e:
            raise EncodingError(f"Decrypted data is not valid UTF-8: {e}", e) from e
