"""Core symmetric encryption components."""

from .encryption_manager import SymmetricKeyManager

__all__ = ['SymmetricKeyManager']
