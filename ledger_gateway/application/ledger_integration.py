"""Ledger integration status exposed to the surrounding process."""

from __future__ import annotations

from dataclasses import dataclass

from ..domain.enums import IntegrationStatus
from ..domain.exceptions import LedgerGatewayError, LedgerUnavailableError
from .gateway_session import GatewaySession


@dataclass(frozen=True)
class LedgerIntegration:
    """Outcome of the startup bootstrap.

    A process without a network configuration, or whose bootstrap failed,
    keeps running; consumers ask this object for the session and get a
    :class:`LedgerUnavailableError` instead of a half-built one.
    """

    status: IntegrationStatus
    session: GatewaySession | None = None
    error: LedgerGatewayError | None = None

    @classmethod
    def disabled(cls) -> LedgerIntegration:
        return cls(status=IntegrationStatus.DISABLED)

    @classmethod
    def degraded(cls, error: LedgerGatewayError) -> LedgerIntegration:
        return cls(status=IntegrationStatus.DEGRADED, error=error)

    @classmethod
    def ready(cls, session: GatewaySession) -> LedgerIntegration:
        return cls(status=IntegrationStatus.READY, session=session)

    def __post_init__(self) -> None:
        if (self.status == IntegrationStatus.READY) != (self.session is not None):
            raise ValueError("A session is present exactly when the integration is READY")

    @property
    def is_ready(self) -> bool:
        return self.status == IntegrationStatus.READY

    def require_session(self) -> GatewaySession:
        """Return the session or explain why ledger operations are unavailable.

        Raises:
            LedgerUnavailableError: If the integration is not READY
        """
        if self.session is None:
            reason = self.error.message if self.error else "no network configuration supplied"
            raise LedgerUnavailableError(self.status.value, reason)
        return self.session

    async def close(self) -> None:
        """Release the session's channel, if any."""
        if self.session is not None:
            await self.session.close()
