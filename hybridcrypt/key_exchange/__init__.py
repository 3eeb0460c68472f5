"""Asymmetric key pair components."""

from .rsa_exchange import AsymmetricKeyManager

__all__ = ['AsymmetricKeyManager']
