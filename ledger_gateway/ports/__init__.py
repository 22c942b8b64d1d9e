"""Ports layer - Interfaces for external collaborators."""

from .channel import ChannelPort
from .identity import IdentityPort
from .logger import LoggerPort
from .network_config import NetworkConfigPort
from .peer_selection import PeerSelector, SelectionStrategy
from .signer import SignerPort

__all__ = [
    "ChannelPort",
    "IdentityPort",
    "LoggerPort",
    "NetworkConfigPort",
    "PeerSelector",
    "SelectionStrategy",
    "SignerPort",
]
