"""Ledger gateway - bootstrap of TLS-pinned gateway sessions to a ledger peer."""

from .application.gateway_session import CallContext, GatewaySession
from .application.ledger_integration import LedgerIntegration
from .infrastructure.bootstrap import GatewayBootstrap, start_ledger_integration
from .infrastructure.config import GatewaySettings

__all__ = [
    "CallContext",
    "GatewayBootstrap",
    "GatewaySession",
    "GatewaySettings",
    "LedgerIntegration",
    "start_ledger_integration",
]
__version__ = "0.1.0"
