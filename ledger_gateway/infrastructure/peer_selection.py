"""Peer selection strategies."""

from __future__ import annotations

from ..ports.peer_selection import PeerSelector, SelectionStrategy


class FirstPeerSelector:
    """Selects the first peer listed for the organization.

    Selection is deterministic for a given config file; no failover to later
    peers is attempted.
    """

    def select(self, peer_names: list[str], msp_id: str) -> str:
        if not peer_names:
            raise ValueError(f"No peers to select from for '{msp_id}'")
        return peer_names[0]


def create_peer_selector(strategy: SelectionStrategy) -> PeerSelector:
    """Get a peer selector for the specified strategy.

    Raises:
        ValueError: If strategy is not supported
    """
    if strategy == SelectionStrategy.FIRST:
        return FirstPeerSelector()
    raise ValueError(f"Unsupported peer selection strategy: {strategy}")
