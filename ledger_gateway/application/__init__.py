"""Application layer - gateway session and integration status."""

from .gateway_session import CallContext, GatewaySession, LedgerCall
from .ledger_integration import LedgerIntegration

__all__ = ["CallContext", "GatewaySession", "LedgerCall", "LedgerIntegration"]
