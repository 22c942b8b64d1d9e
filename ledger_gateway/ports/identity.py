"""Identity port - who is signing, independent of how signing happens."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class IdentityPort(Protocol):
    """A client identity within an organization."""

    @property
    def msp_id(self) -> Any:
        """Organization MSP ID the identity belongs to."""
        ...

    @property
    def credentials(self) -> bytes:
        """Encoded credentials (certificate PEM) attached to requests."""
        ...

    @property
    def public_key(self) -> Any:
        """Public key the identity's signatures verify against."""
        ...
