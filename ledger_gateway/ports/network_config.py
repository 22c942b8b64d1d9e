"""Network configuration port - read-only access to a connection profile."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any


class NetworkConfigPort(ABC):
    """Abstract interface for a hierarchical network configuration.

    Keys are addressed by dotted path, e.g. ``organizations.Org1MSP.peers``.
    Implementations are immutable once loaded.
    """

    @abstractmethod
    def lookup(self, key_path: str) -> Any:
        """Return the value stored at a dotted key path.

        Args:
            key_path: Dotted path into the configuration tree

        Returns:
            The stored value (mapping, list or scalar)

        Raises:
            ConfigLookupError: If the path does not exist
        """
        ...

    @abstractmethod
    def contains(self, key_path: str) -> bool:
        """Check whether a dotted key path exists."""
        ...

    @property
    @abstractmethod
    def base_dir(self) -> Path | None:
        """Directory relative file references resolve against, if any."""
        ...
