"""RSA-OAEP key pair management and small-payload encryption."""
import logging
from typing import Optional

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .. import codec
from ..config import Config, RSA_MAX_KEY_SIZE, RSA_MIN_KEY_SIZE, RSA_PUBLIC_EXPONENT
from ..exceptions import (
    CryptoOperationError,
    CryptoProviderError,
    EncodingError,
    KeyFormatError,
    PayloadTooLargeError
)
from ..keys import Key, KeyAlgorithm, KeyPair, KeyRole

logger = logging.getLogger(__name__)


class AsymmetricKeyManager:
    """
    RSA-OAEP (SHA-256) key pairs for protecting small values such as
    exported symmetric keys.

    Keys cross the API as ``Key`` handles or as base64 DER strings:
    SubjectPublicKeyInfo for public keys, PKCS8 for private keys.
    """

    HASH_SIZE = 32  # SHA-256 digest, bytes

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize the manager.

        Args:
            config: Optional configuration. Defaults to ``Config()``.
        """
        self.config = config or Config()
        self.key_size = self.config.rsa_key_size

    @staticmethod
    def _padding() -> padding.OAEP:
        return padding.OAEP(
            mgf=padding.MGF1(algorithm=hashes.SHA256()),
            algorithm=hashes.SHA256(),
            label=None
        )

    @classmethod
    def max_payload_size(cls, key_size: int) -> int:
        """Largest OAEP plaintext in bytes for a modulus of ``key_size`` bits."""
        return key_size // 8 - 2 * cls.HASH_SIZE - 2

    def generate_key_pair(self) -> KeyPair:
        """
        Generate a new RSA key pair.

        Returns:
            KeyPair of (public_key, private_key)

        Raises:
            CryptoProviderError: If the key size is unsupported or generation fails
        """
        if self.key_size is None or not RSA_MIN_KEY_SIZE <= self.key_size <= RSA_MAX_KEY_SIZE:
            shown = self.key_size if self.key_size is not None else repr(self.config.rsa_key_size_raw)
            logger.warning(f"Unsupported RSA key size: {shown}")
            raise CryptoProviderError(
                f"RSA key size must be between {RSA_MIN_KEY_SIZE} and {RSA_MAX_KEY_SIZE} bits, "
                f"got {shown}"
            )

        logger.info(f"Generating RSA key pair (key size: {self.key_size} bits)...")

        try:
            private_key = rsa.generate_private_key(
                public_exponent=RSA_PUBLIC_EXPONENT,
                key_size=self.key_size
            )
        except (ValueError, UnsupportedAlgorithm) as e:
            logger.warning(f"RSA key generation failed: {e}")
            raise CryptoProviderError(f"RSA key generation failed: {e}", e) from e

        logger.info("RSA key pair generated successfully")

        return KeyPair(
            public_key=Key(KeyAlgorithm.RSA_OAEP, KeyRole.PUBLIC, private_key.public_key()),
            private_key=Key(KeyAlgorithm.RSA_OAEP, KeyRole.PRIVATE, private_key)
        )

    def export_public_key(self, key: Key) -> str:
        """
        Serialize a public key to base64 DER SubjectPublicKeyInfo.

        Raises:
            KeyRoleError: If key is not an RSA public key or is not extractable
        """
        public_key = Key.check(key, KeyAlgorithm.RSA_OAEP, KeyRole.PUBLIC)
        key.require_extractable()

        der = public_key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo
        )
        return codec.encode(der)

    def export_private_key(self, key: Optional[Key]) -> Optional[str]:
        """
        Serialize a private key to base64 DER PKCS8.

        Args:
            key: Private key, or None

        Returns:
            Encoded key, or None when no key was given

        Raises:
            KeyRoleError: If key is not an RSA private key or is not extractable
        """
        if key is None:
            return None

        private_key = Key.check(key, KeyAlgorithm.RSA_OAEP, KeyRole.PRIVATE)
        key.require_extractable()

        der = private_key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption()
        )
        return codec.encode(der)

    @staticmethod
    def _decode_key(encoded: str) -> bytes:
        try:
            return codec.decode(encoded)
        except EncodingError as e:
            raise KeyFormatError(f"Invalid key encoding: {e}", e) from e

    @staticmethod
    def _check_public_numbers(public_key: rsa.RSAPublicKey) -> None:
        """
        Reject public keys this module could never have exported.

        SPKI carries no checksum, so a change inside the modulus that keeps it
        odd and full-length still loads as a different valid key.
        """
        numbers = public_key.public_numbers()
        problem = None
        if not RSA_MIN_KEY_SIZE <= public_key.key_size <= RSA_MAX_KEY_SIZE:
            problem = f"unsupported key size {public_key.key_size} bits"
        elif numbers.n % 2 == 0:
            problem = "modulus is even"
        elif numbers.e != RSA_PUBLIC_EXPONENT:
            problem = f"public exponent {numbers.e}, expected {RSA_PUBLIC_EXPONENT}"

        if problem:
            logger.warning(f"Rejected public key import: {problem}")
            raise KeyFormatError(f"Invalid RSA public key: {problem}")

    def import_public_key(self, encoded: str) -> Key:
        """
        Load an encrypt-only RSA public key from base64 DER SubjectPublicKeyInfo.

        Raises:
            KeyFormatError: If the input is not a valid RSA public key
        """
        der = self._decode_key(encoded)

        try:
            public_key = serialization.load_der_public_key(der)
        except (ValueError, UnsupportedAlgorithm) as e:
            logger.warning(f"Rejected public key import: {e}")
            raise KeyFormatError(f"Invalid RSA public key: {e}", e) from e

        if not isinstance(public_key, rsa.RSAPublicKey):
            logger.warning(f"Rejected public key import: not RSA ({type(public_key).__name__})")
            raise KeyFormatError(
                f"Expected an RSA public key, got {type(public_key).__name__}"
            )

        self._check_public_numbers(public_key)

        return Key(KeyAlgorithm.RSA_OAEP, KeyRole.PUBLIC, public_key)

    def import_private_key(self, encoded: str) -> Key:
        """
        Load a decrypt-only RSA private key from base64 DER PKCS8.

        The RSA consistency check stays enabled, so altered key material is
        rejected here instead of producing a key that decrypts wrongly.

        Raises:
            KeyFormatError: If the input is not a valid RSA private key
        """
        der = self._decode_key(encoded)

        try:
            private_key = serialization.load_der_private_key(der, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            logger.warning(f"Rejected private key import: {e}")
            raise KeyFormatError(f"Invalid RSA private key: {e}", e) from e

        if not isinstance(private_key, rsa.RSAPrivateKey):
            logger.warning(f"Rejected private key import: not RSA ({type(private_key).__name__})")
            raise KeyFormatError(
                f"Expected an RSA private key, got {type(private_key).__name__}"
            )

        return Key(KeyAlgorithm.RSA_OAEP, KeyRole.PRIVATE, private_key)

    def encrypt(self, plaintext_b64: str, public_key_encoded: str) -> str:
        """
        Encrypt a base64 payload under a base64 DER public key.

        Args:
            plaintext_b64: Base64-encoded payload, at most ``max_payload_size`` bytes decoded
            public_key_encoded: Output of ``export_public_key``

        Returns:
            Base64-encoded ciphertext

        Raises:
            EncodingError: If the payload is not valid base64
            KeyFormatError: If the public key cannot be imported
            PayloadTooLargeError: If the payload exceeds the OAEP limit
        """
        data = codec.decode(plaintext_b64)
        public_key = self.import_public_key(public_key_encoded).material

        limit = self.max_payload_size(public_key.key_size)
        if len(data) > limit:
            logger.warning(f"RSA-OAEP payload of {len(data)} bytes exceeds {limit} byte limit")
            raise PayloadTooLargeError(len(data), limit)

        logger.debug(f"RSA-OAEP encrypting {len(data)} bytes")

        try:
            encrypted = public_key.encrypt(data, self._padding())
        except (ValueError, UnsupportedAlgorithm) as e:
            raise CryptoProviderError(f"RSA encryption failed: {e}", e) from e

        return codec.encode(encrypted)

    def decrypt(self, ciphertext_b64: str, private_key: Key) -> str:
        """
        Decrypt a base64 ciphertext with a private key handle.

        Returns:
            Base64-encoded plaintext

        Raises:
            EncodingError: If the ciphertext is not valid base64
            KeyRoleError: If private_key is not an RSA private key
            CryptoOperationError: If the ciphertext doesn't match this key or was altered
        """
        rsa_private_key = Key.check(private_key, KeyAlgorithm.RSA_OAEP, KeyRole.PRIVATE)
        encrypted = codec.decode(ciphertext_b64)

        logger.debug(f"RSA-OAEP decrypting {len(encrypted)} bytes")

        try:
            decrypted = rsa_private_key.decrypt(encrypted, self._padding())
        except ValueError as e:
            logger.warning("RSA decryption failed")
            raise CryptoOperationError(f"RSA decryption failed: {e}", e) from e

        return codec.encode(decrypted)
