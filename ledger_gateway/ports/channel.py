"""Channel port - an authenticated transport to one peer."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ChannelPort(Protocol):
    """Transport handle owned by a gateway session."""

    @property
    def target(self) -> str:
        """Endpoint the channel is bound to."""
        ...

    @property
    def grpc_channel(self) -> Any:
        """Underlying RPC channel handed to ledger clients."""
        ...

    @property
    def closed(self) -> bool:
        ...

    async def wait_until_ready(self, timeout: float) -> None:
        """Force connection establishment.

        Raises:
            ChannelEstablishmentError: If the channel is not ready in time
        """
        ...

    async def close(self) -> None:
        """Release the transport."""
        ...
