"""TLS gRPC channels pinned to a single certificate authority."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import grpc
from cryptography.hazmat.primitives import serialization
from pydantic import ValidationError

from ..domain.exceptions import ChannelEstablishmentError
from ..domain.value_objects import PeerEndpoint
from .identity import parse_certificate

logger = logging.getLogger(__name__)


class PinnedCATrustPolicy:
    """Trust exactly one CA certificate and nothing else.

    System trust roots are never consulted. The peer's certificate must chain
    to the pinned CA and match the endpoint host, or ``server_name`` when one
    is configured.
    """

    def __init__(self, ca_cert_pem: bytes, server_name: str | None = None):
        """Parse and pin the CA certificate.

        Only the first certificate in ``ca_cert_pem`` is kept.

        Raises:
            CertParseError: If the CA certificate is malformed
        """
        certificate = parse_certificate(ca_cert_pem)
        self._root_pem = certificate.public_bytes(serialization.Encoding.PEM)
        self._server_name = server_name

    @property
    def root_certificate(self) -> bytes:
        return self._root_pem

    @property
    def server_name(self) -> str | None:
        return self._server_name

    def channel_credentials(self) -> grpc.ChannelCredentials:
        """TLS credentials whose trust store holds only the pinned CA."""
        return grpc.ssl_channel_credentials(root_certificates=self._root_pem)

    def channel_options(self) -> list[tuple[str, Any]]:
        """Channel arguments overriding the name checked against the peer certificate."""
        if not self._server_name:
            return []
        return [
            ("grpc.ssl_target_name_override", self._server_name),
            ("grpc.default_authority", self._server_name),
        ]


class SecureChannel:
    """An authenticated gRPC channel bound to one peer and one pinned CA.

    The channel connects lazily; use :meth:`wait_until_ready` to force the
    TLS handshake. Must be closed explicitly.
    """

    def __init__(
        self,
        endpoint: PeerEndpoint,
        channel: grpc.aio.Channel,
        trust_policy: PinnedCATrustPolicy,
    ):
        self._endpoint = endpoint
        self._channel = channel
        self._trust_policy = trust_policy
        self._closed = False

    @property
    def target(self) -> str:
        return str(self._endpoint)

    @property
    def server_name(self) -> str:
        """Name the peer certificate is verified against."""
        return self._trust_policy.server_name or self._endpoint.host

    @property
    def trust_policy(self) -> PinnedCATrustPolicy:
        return self._trust_policy

    @property
    def grpc_channel(self) -> grpc.aio.Channel:
        return self._channel

    @property
    def closed(self) -> bool:
        return self._closed

    async def wait_until_ready(self, timeout: float) -> None:
        """Wait for the TLS handshake with the peer to complete.

        Raises:
            ChannelEstablishmentError: If the channel is not ready in time,
                e.g. because the peer presents a certificate the pinned CA
                did not issue
        """
        try:
            await asyncio.wait_for(self._channel.channel_ready(), timeout)
        except asyncio.TimeoutError as e:
            state = self._channel.get_state(try_to_connect=False)
            raise ChannelEstablishmentError(
                f"Channel to {self.target} not ready after {timeout:g}s (state: {state.name})",
                endpoint=self.target,
            ) from e

    async def close(self) -> None:
        """Close the channel, releasing sockets. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        await self._channel.close()
        logger.debug("Closed channel to %s", self.target)

    async def __aenter__(self) -> SecureChannel:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"SecureChannel(target={self.target!r}, server_name={self.server_name!r})"


class SecureChannelFactory:
    """Dials peers over TLS using a single pinned CA."""

    def __init__(self, options: list[tuple[str, Any]] | None = None):
        """Initialize the factory.

        Args:
            options: Extra gRPC channel arguments applied to every channel
        """
        self._options = list(options or [])

    def dial(
        self,
        endpoint: PeerEndpoint | str,
        ca_cert_pem: bytes,
        server_name: str | None = None,
    ) -> SecureChannel:
        """Open a TLS channel to ``endpoint`` trusting only ``ca_cert_pem``.

        Must be called with an event loop available; connection is deferred
        until first use.

        Raises:
            CertParseError: If the CA certificate is malformed
            ChannelEstablishmentError: If credentials or the channel cannot be built
        """
        try:
            target = endpoint if isinstance(endpoint, PeerEndpoint) else PeerEndpoint(value=endpoint)
        except ValidationError as e:
            raise ChannelEstablishmentError(
                f"Invalid peer endpoint '{endpoint}'", endpoint=str(endpoint)
            ) from e
        trust_policy = PinnedCATrustPolicy(ca_cert_pem, server_name=server_name)

        try:
            channel = grpc.aio.secure_channel(
                str(target),
                trust_policy.channel_credentials(),
                options=self._options + trust_policy.channel_options(),
            )
        except Exception as e:
            raise ChannelEstablishmentError(
                f"Failed to open channel to {target}: {e}", endpoint=str(target)
            ) from e

        logger.debug("Opened channel to %s (server name %s)", target, server_name or target.host)
        return SecureChannel(target, channel, trust_policy)
