"""Configuration for hybridcrypt."""
import logging
import os
from typing import Optional

# RSA configuration
RSA_KEY_SIZE = 2048  # bits
RSA_MIN_KEY_SIZE = 2048
RSA_MAX_KEY_SIZE = 4096
RSA_PUBLIC_EXPONENT = 65537

# AES configuration
AES_KEY_SIZE = 32  # 256 bits
AES_IV_SIZE = 16  # 128 bits, one CBC block
MAC_TAG_SIZE = 32  # HMAC-SHA256
MAC_KEY_INFO = b"hybridcrypt-cbc-mac"

# Logging configuration
LOG_LEVEL = "INFO"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


class Config:
    """Runtime configuration, read from the environment."""

    def __init__(self):
        self.rsa_key_size_raw: str = os.getenv("HYBRIDCRYPT_RSA_KEY_SIZE", str(RSA_KEY_SIZE))
        self.rsa_key_size: Optional[int] = None
        try:
            self.rsa_key_size = int(self.rsa_key_size_raw)
        except ValueError:
            # Reported as CryptoProviderError when a key pair is generated
            logger.warning(f"Ignoring non-numeric HYBRIDCRYPT_RSA_KEY_SIZE: {self.rsa_key_size_raw!r}")
        self.log_level: str = os.getenv("HYBRIDCRYPT_LOG_LEVEL", LOG_LEVEL).upper()


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for applications and test scripts.

    The library never calls this on import.

    Args:
        level: Log level name. Defaults to ``Config().log_level``.
    """
    logging.basicConfig(
        level=getattr(logging, level or Config().log_level, logging.INFO),
        format=LOG_FORMAT
    )
