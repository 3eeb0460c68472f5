"""Key handles shared by the asymmetric and symmetric managers."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .exceptions import KeyRoleError


class KeyAlgorithm(Enum):
    """Algorithms a key can be bound to."""
    RSA_OAEP = "RSA-OAEP"
    AES_CBC = "AES-CBC"


class KeyRole(Enum):
    """Role of a key within its algorithm."""
    PUBLIC = "public"  # encrypt only
    PRIVATE = "private"  # decrypt only
    SECRET = "secret"  # symmetric, encrypt and decrypt


@dataclass(frozen=True, eq=False)
class Key:
    """
    Opaque handle to key material.

    ``material`` is a ``cryptography`` RSA key object for asymmetric keys and
    raw bytes for symmetric keys. Algorithm and role never change after
    creation; the handle is safe to share between threads.
    """
    algorithm: KeyAlgorithm
    role: KeyRole
    material: Any = field(repr=False)
    extractable: bool = True

    @staticmethod
    def check(key: Any, algorithm: KeyAlgorithm, role: KeyRole) -> Any:
        """
        Like ``require``, but also rejects values that aren't ``Key`` handles.

        Raises:
            KeyRoleError: If key is not a Key or doesn't fit the operation
        """
        if not isinstance(key, Key):
            raise KeyRoleError(
                f"Operation requires a {algorithm.value} {role.value} key, "
                f"got {type(key).__name__}"
            )
        return key.require(algorithm, role)

    def require(self, algorithm: KeyAlgorithm, role: KeyRole) -> Any:
        """
        Return the underlying material if this key fits the operation.

        Raises:
            KeyRoleError: If algorithm or role doesn't match
        """
        if self.algorithm is not algorithm or self.role is not role:
            raise KeyRoleError(
                f"Operation requires a {algorithm.value} {role.value} key, "
                f"got a {self.algorithm.value} {self.role.value} key"
            )
        return self.material

    def require_extractable(self) -> None:
        """Raise KeyRoleError unless the key material may be exported."""
        if not self.extractable:
            raise KeyRoleError(
                f"{self.algorithm.value} {self.role.value} key is not extractable"
            )


@dataclass(frozen=True)
class KeyPair:
    """A public key and its matching private key."""
    public_key: Key
    private_key: Key

    def __iter__(self):
        # Allows ``public, private = manager.generate_key_pair()``
        return iter((self.public_key, self.private_key))
