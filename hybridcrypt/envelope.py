"""Single-message hybrid envelope: AES-encrypted payload plus RSA-wrapped key."""
import json
import logging
from typing import Any, Dict, Optional

from .core.encryption_manager import SymmetricKeyManager
from .exceptions import EncodingError
from .key_exchange.rsa_exchange import AsymmetricKeyManager
from .keys import Key

logger = logging.getLogger(__name__)


class SealedMessage:
    """An encrypted payload and the symmetric key that protects it, wrapped for one recipient."""

    def __init__(self, encrypted_key: str, ciphertext: str):
        self.encrypted_key = encrypted_key
        self.ciphertext = ciphertext

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "key": self.encrypted_key,
            "data": self.ciphertext
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SealedMessage':
        """Create SealedMessage from dictionary."""
        if not isinstance(data, dict):
            raise EncodingError(f"Sealed message must be an object, got {type(data).__name__}")

        try:
            encrypted_key = data["key"]
            ciphertext = data["data"]
        except KeyError as e:
            raise EncodingError(f"Sealed message missing field: {e}", e) from e

        if not isinstance(encrypted_key, str) or not isinstance(ciphertext, str):
            raise EncodingError("Sealed message fields must be strings")

        return cls(encrypted_key=encrypted_key, ciphertext=ciphertext)

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> 'SealedMessage':
        """Deserialize from JSON string."""
        try:
            data = json.loads(json_str)
        except (TypeError, ValueError) as e:
            raise EncodingError(f"Invalid sealed message JSON: {e}", e) from e
        return cls.from_dict(data)

    def __eq__(self, other):
        if not isinstance(other, SealedMessage):
            return NotImplemented
        return self.encrypted_key == other.encrypted_key and self.ciphertext == other.ciphertext

    def __repr__(self):
        return f"SealedMessage(key={len(self.encrypted_key)} chars, data={len(self.ciphertext)} chars)"


def seal(
    plaintext: str,
    recipient_public_key: str,
    asymmetric: Optional[AsymmetricKeyManager] = None,
    symmetric: Optional[SymmetricKeyManager] = None
) -> SealedMessage:
    """
    Encrypt text for the holder of ``recipient_public_key``.

    A fresh symmetric key is generated per call and wrapped with RSA-OAEP.

    Args:
        plaintext: Text to protect
        recipient_public_key: Recipient's exported public key
        asymmetric: Optional manager instance (defaults to a new one)
        symmetric: Optional manager instance (defaults to a new one)
    """
    asymmetric = asymmetric or AsymmetricKeyManager()
    symmetric = symmetric or SymmetricKeyManager()

    session_key = symmetric.generate_key()
    ciphertext = symmetric.encrypt(session_key, plaintext)

    # Raw key bytes are the RSA payload; the export is already base64
    encrypted_key = asymmetric.encrypt(symmetric.export_key(session_key), recipient_public_key)

    logger.debug("Sealed message for recipient")
    return SealedMessage(encrypted_key=encrypted_key, ciphertext=ciphertext)


def open_sealed(
    sealed: SealedMessage,
    private_key: Key,
    asymmetric: Optional[AsymmetricKeyManager] = None,
    symmetric: Optional[SymmetricKeyManager] = None
) -> str:
    """
    Recover the text of a sealed message with the recipient's private key.

    Raises:
        CryptoOperationError: If the message wasn't sealed for this key or was altered
        KeyFormatError: If the recovered symmetric key has the wrong size
        EncodingError: If the plaintext is not valid UTF-8
    """
    asymmetric = asymmetric or AsymmetricKeyManager()
    symmetric = symmetric or SymmetricKeyManager()

    exported_key = asymmetric.decrypt(sealed.encrypted_key, private_key)
    return symmetric.decrypt(exported_key, sealed.ciphertext)
