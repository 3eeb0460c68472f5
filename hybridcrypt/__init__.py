"""Hybrid RSA-OAEP / AES-CBC primitives for point-to-point message exchange."""
from typing import Optional

from . import codec
from .core.encryption_manager import SymmetricKeyManager
from .envelope import SealedMessage, open_sealed, seal
from .exceptions import (
    HybridCryptoError,
    EncodingError,
    KeyManagementError,
    KeyFormatError,
    KeyRoleError,
    PayloadTooLargeError,
    CryptoProviderError,
    CryptoOperationError
)
from .key_exchange.rsa_exchange import AsymmetricKeyManager
from .keys import Key, KeyAlgorithm, KeyPair, KeyRole

__version__ = "0.1.0"

_asymmetric = AsymmetricKeyManager()
_symmetric = SymmetricKeyManager()


def generate_rsa_key_pair() -> KeyPair:
    return _asymmetric.generate_key_pair()


def export_pub_key(key: Key) -> str:
    return _asymmetric.export_public_key(key)


def export_prv_key(key: Optional[Key]) -> Optional[str]:
    return _asymmetric.export_private_key(key)


def import_pub_key(encoded: str) -> Key:
    return _asymmetric.import_public_key(encoded)


def import_prv_key(encoded: str) -> Key:
    return _asymmetric.import_private_key(encoded)


def rsa_encrypt(plaintext_b64: str, public_key_encoded: str) -> str:
    return _asymmetric.encrypt(plaintext_b64, public_key_encoded)


def rsa_decrypt(ciphertext_b64: str, private_key: Key) -> str:
    return _asymmetric.decrypt(ciphertext_b64, private_key)


def create_random_symmetric_key() -> Key:
    return _symmetric.generate_key()


def export_sym_key(key: Key) -> str:
    return _symmetric.export_key(key)


def import_sym_key(encoded: str) -> Key:
    return _symmetric.import_key(encoded)


def sym_encrypt(key: Key, data: str) -> str:
    return _symmetric.encrypt(key, data)


def sym_decrypt(encoded_key: str, ciphertext: str) -> str:
    return _symmetric.decrypt(encoded_key, ciphertext)


__all__ = [
    'codec',
    'AsymmetricKeyManager',
    'SymmetricKeyManager',
    'Key',
    'KeyAlgorithm',
    'KeyPair',
    'KeyRole',
    'SealedMessage',
    'seal',
    'open_sealed',
    'generate_rsa_key_pair',
    'export_pub_key',
    'export_prv_key',
    'import_pub_key',
    'import_prv_key',
    'rsa_encrypt',
    'rsa_decrypt',
    'create_random_symmetric_key',
    'export_sym_key',
    'import_sym_key',
    'sym_encrypt',
    'sym_decrypt',
    'HybridCryptoError',
    'EncodingError',
    'KeyManagementError',
    'KeyFormatError',
    'KeyRoleError',
    'PayloadTooLargeError',
    'CryptoProviderError',
    'CryptoOperationError',
]
