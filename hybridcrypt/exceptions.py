"""Custom exceptions for hybrid encryption operations."""
from typing import Optional


class HybridCryptoError(Exception):
    """Base exception for all hybridcrypt errors."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error


class EncodingError(HybridCryptoError):
    """Raised when text is not valid base64 or decrypted bytes are not valid UTF-8."""
    pass


class KeyManagementError(HybridCryptoError):
    """Exception raised when key management operations fail."""
    pass


class KeyFormatError(KeyManagementError):
    """Raised when imported key bytes don't match the expected format, size or algorithm."""
    pass


class KeyRoleError(KeyManagementError):
    """Raised when a key's role or algorithm doesn't fit the requested operation."""
    pass


class PayloadTooLargeError(HybridCryptoError):
    """Raised when an RSA-OAEP payload exceeds the key's size limit."""

    def __init__(self, size: int, limit: int):
        super().__init__(
            f"Payload of {size} bytes exceeds RSA-OAEP limit of {limit} bytes"
        )
        self.size = size
        self.limit = limit


class CryptoProviderError(HybridCryptoError):
    """Raised when the cryptographic provider cannot perform an operation."""
    pass


class CryptoOperationError(HybridCryptoError):
    """Exception raised when decryption fails integrity or padding validation."""
    pass
