"""Infrastructure layer - Concrete implementations of ports."""

from .bootstrap import GatewayBootstrap, start_ledger_integration
from .config import GatewaySettings, LogContext
from .config_resolver import ConfigResolver
from .identity import ECDSASigner, Ed25519Signer, IdentityBuilder, X509Identity
from .network_config import YamlNetworkConfig
from .peer_selection import FirstPeerSelector, create_peer_selector
from .secure_channel import PinnedCATrustPolicy, SecureChannel, SecureChannelFactory
from .simple_logger import SimpleLogger

__all__ = [
    "ConfigResolver",
    "ECDSASigner",
    "Ed25519Signer",
    "FirstPeerSelector",
    "GatewayBootstrap",
    "GatewaySettings",
    "IdentityBuilder",
    "LogContext",
    "PinnedCATrustPolicy",
    "SecureChannel",
    "SecureChannelFactory",
    "SimpleLogger",
    "X509Identity",
    "YamlNetworkConfig",
    "create_peer_selector",
    "start_ledger_integration",
]
