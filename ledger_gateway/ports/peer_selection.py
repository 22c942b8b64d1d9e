"""Peer selection port - strategy for picking the gateway peer."""

from __future__ import annotations

from enum import Enum
from typing import Protocol


class SelectionStrategy(str, Enum):
    """Peer selection strategies."""

    FIRST = "first"


class PeerSelector(Protocol):
    """Protocol for peer selection strategies."""

    def select(self, peer_names: list[str], msp_id: str) -> str:
        """Select one peer from an organization's peer list.

        Args:
            peer_names: Non-empty, ordered list of peer names
            msp_id: Organization the peers belong to

        Returns:
            The name of the selected peer
        """
        ...
