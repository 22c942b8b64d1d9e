"""TLS handshakes against a local gRPC server."""

import grpc
import pytest
import pytest_asyncio

from ledger_gateway.domain.exceptions import ChannelEstablishmentError
from ledger_gateway.infrastructure.secure_channel import SecureChannelFactory
from tests.builders import PEER

pytestmark = pytest.mark.integration


@pytest_asyncio.fixture
async def peer_port(pki):
    """Serve TLS on a free port with the peer's certificate."""
    server = grpc.aio.server()
    credentials = grpc.ssl_server_credentials([(pki.peer_tls.key_pem, pki.peer_tls.cert_pem)])
    port = server.add_secure_port("localhost:0", credentials)
    await server.start()
    yield port
    await server.stop(None)


class TestPinnedTLSChannel:
    """Test handshakes with the pinned trust policy."""

    @pytest.mark.asyncio
    async def test_handshake_with_pinned_ca(self, peer_port, pki):
        channel = SecureChannelFactory().dial(
            f"127.0.0.1:{peer_port}", pki.tls_ca.cert_pem, server_name=PEER
        )
        async with channel:
            await channel.wait_until_ready(5)
            assert not channel.closed
        assert channel.closed

    @pytest.mark.asyncio
    async def test_host_checked_without_override(self, peer_port, pki):
        channel = SecureChannelFactory().dial(f"localhost:{peer_port}", pki.tls_ca.cert_pem)
        async with channel:
            await channel.wait_until_ready(5)

    @pytest.mark.asyncio
    async def test_other_ca_rejected(self, peer_port, pki):
        channel = SecureChannelFactory().dial(
            f"127.0.0.1:{peer_port}", pki.other_ca.cert_pem, server_name=PEER
        )
        async with channel:
            with pytest.raises(ChannelEstablishmentError) as exc_info:
                await channel.wait_until_ready(1)
        assert exc_info.value.endpoint == f"127.0.0.1:{peer_port}"

    @pytest.mark.asyncio
    async def test_wrong_server_name_rejected(self, peer_port, pki):
        channel = SecureChannelFactory().dial(
            f"127.0.0.1:{peer_port}", pki.tls_ca.cert_pem, server_name="peer1.org2.example.com"
        )
        async with channel:
            with pytest.raises(ChannelEstablishmentError):
                await channel.wait_until_ready(1)
