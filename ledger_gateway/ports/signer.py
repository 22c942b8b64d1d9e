"""Signer port - signing capability bound to a private key."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class SignerPort(ABC):
    """Abstract interface for producing signatures over byte payloads.

    A signer owns its private key for its whole lifetime and never exposes it.
    """

    @abstractmethod
    def sign(self, message: bytes) -> bytes:
        """Sign an arbitrary payload.

        Args:
            message: Bytes to sign; hashing is the signer's concern

        Returns:
            Signature bytes
        """
        ...

    @property
    @abstractmethod
    def public_key(self) -> Any:
        """Public half of the signing key."""
        ...
