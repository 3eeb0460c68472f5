"""Asyncio wrappers that run each operation in the loop's default executor."""
import asyncio
from typing import Any, Callable, Optional

from .core.encryption_manager import SymmetricKeyManager
from .envelope import SealedMessage, open_sealed as _open_sealed, seal as _seal
from .key_exchange.rsa_exchange import AsymmetricKeyManager
from .keys import Key, KeyPair

_asymmetric = AsymmetricKeyManager()
_symmetric = SymmetricKeyManager()


async def _run(func: Callable[..., Any], *args: Any) -> Any:
    # RSA generation can take hundreds of milliseconds; keep it off the event loop
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func, *args)


async def generate_key_pair() -> KeyPair:
    return await _run(_asymmetric.generate_key_pair)


async def export_public_key(key: Key) -> str:
    return await _run(_asymmetric.export_public_key, key)


async def export_private_key(key: Optional[Key]) -> Optional[str]:
    return await _run(_asymmetric.export_private_key, key)


async def import_public_key(encoded: str) -> Key:
    return await _run(_asymmetric.import_public_key, encoded)


async def import_private_key(encoded: str) -> Key:
    return await _run(_asymmetric.import_private_key, encoded)


async def rsa_encrypt(plaintext_b64: str, public_key_encoded: str) -> str:
    return await _run(_asymmetric.encrypt, plaintext_b64, public_key_encoded)


async def rsa_decrypt(ciphertext_b64: str, private_key: Key) -> str:
    return await _run(_asymmetric.decrypt, ciphertext_b64, private_key)


async def generate_key() -> Key:
    return await _run(_symmetric.generate_key)


async def export_key(key: Key) -> str:
    return await _run(_symmetric.export_key, key)


async def import_key(encoded: str) -> Key:
    return await _run(_symmetric.import_key, encoded)


async def sym_encrypt(key: Key, data: str) -> str:
    return await _run(_symmetric.encrypt, key, data)


async def sym_decrypt(encoded_key: str, ciphertext: str) -> str:
    return await _run(_symmetric.decrypt, encoded_key, ciphertext)


async def seal(plaintext: str, recipient_public_key: str) -> SealedMessage:
    return await _run(_seal, plaintext, recipient_public_key, _asymmetric, _symmetric)


async def open_sealed(sealed: SealedMessage, private_key: Key) -> str:
    return await _run(_open_sealed, sealed, private_key, _asymmetric, _symmetric)
