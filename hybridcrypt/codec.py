"""Base64 conversion between raw bytes and text-safe strings."""
import base64
import binascii

from .exceptions import EncodingError


def encode(data: bytes) -> str:
    """
    Encode bytes as standard base64 with padding.

    Raises:
        EncodingError: If data is not a bytes-like object
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise EncodingError(f"Base64 input must be bytes, got {type(data).__name__}")

    return base64.b64encode(data).decode('ascii')


def decode(text: str) -> bytes:
    """
    Decode standard base64 text back to bytes.

    Unlike ``base64.b64decode`` defaults, characters outside the alphabet
    and missing padding are rejected rather than silently skipped.

    Raises:
        EncodingError: If text is not valid padded base64
    """
    if not isinstance(text, str):
        raise EncodingError(f"Base64 input must be string, got {type(text).__name__}")

    try:
        return base64.b64decode(text.encode('ascii'), validate=True)
    except UnicodeEncodeError as e:
        raise EncodingError("Invalid base64 encoding: non-ASCII characters", e) from e
    except binascii.Error as e:
        raise EncodingError(f"Invalid base64 encoding: {e}", e) from e
