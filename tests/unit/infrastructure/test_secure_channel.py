"""Unit tests for the pinned-CA secure channel factory."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import grpc
import pytest

from ledger_gateway.domain.exceptions import CertParseError, ChannelEstablishmentError
from ledger_gateway.domain.value_objects import PeerEndpoint
from ledger_gateway.infrastructure.secure_channel import (
    PinnedCATrustPolicy,
    SecureChannel,
    SecureChannelFactory,
)
from ledger_gateway.ports.channel import ChannelPort


class TestPinnedCATrustPolicy:
    """Test the single-CA trust policy."""

    def test_pins_ca(self, pki):
        policy = PinnedCATrustPolicy(pki.tls_ca.cert_pem)
        assert policy.root_certificate == pki.tls_ca.cert_pem
        assert policy.server_name is None
        assert policy.channel_options() == []

    def test_keeps_only_first_certificate(self, pki):
        bundle = pki.tls_ca.cert_pem + pki.other_ca.cert_pem
        policy = PinnedCATrustPolicy(bundle)
        assert policy.root_certificate == pki.tls_ca.cert_pem

    def test_server_name_override(self, pki):
        policy = PinnedCATrustPolicy(pki.tls_ca.cert_pem, server_name="peer0.org1.example.com")
        assert dict(policy.channel_options()) == {
            "grpc.ssl_target_name_override": "peer0.org1.example.com",
            "grpc.default_authority": "peer0.org1.example.com",
        }

    def test_malformed_ca(self):
        with pytest.raises(CertParseError):
            PinnedCATrustPolicy(b"-----BEGIN CERTIFICATE-----\nnope\n-----END CERTIFICATE-----\n")

    def test_channel_credentials(self, pki):
        with patch("grpc.ssl_channel_credentials") as mock_credentials:
            PinnedCATrustPolicy(pki.tls_ca.cert_pem).channel_credentials()
        mock_credentials.assert_called_once_with(root_certificates=pki.tls_ca.cert_pem)


class TestSecureChannelFactory:
    """Test dialling."""

    @pytest.mark.asyncio
    async def test_dial_is_lazy(self, pki):
        """Dialling an address with nothing listening still returns a channel."""
        channel = SecureChannelFactory().dial("localhost:7051", pki.tls_ca.cert_pem)
        try:
            assert isinstance(channel, SecureChannel)
            assert isinstance(channel, ChannelPort)
            assert channel.target == "localhost:7051"
            assert channel.server_name == "localhost"
            assert isinstance(channel.grpc_channel, grpc.aio.Channel)
            assert not channel.closed
        finally:
            await channel.close()
        assert channel.closed

    @pytest.mark.asyncio
    async def test_dial_passes_credentials_and_options(self, pki):
        with patch("grpc.aio.secure_channel") as mock_secure_channel:
            channel = SecureChannelFactory(options=[("grpc.keepalive_time_ms", 10000)]).dial(
                PeerEndpoint(value="peer0:7051"),
                pki.tls_ca.cert_pem,
                server_name="peer0.org1.example.com",
            )

        target, _credentials = mock_secure_channel.call_args.args
        options = mock_secure_channel.call_args.kwargs["options"]
        assert target == "peer0:7051"
        assert ("grpc.keepalive_time_ms", 10000) in options
        assert ("grpc.ssl_target_name_override", "peer0.org1.example.com") in options
        assert channel.server_name == "peer0.org1.example.com"

    @pytest.mark.asyncio
    async def test_dial_malformed_ca(self):
        with pytest.raises(CertParseError):
            SecureChannelFactory().dial("localhost:7051", b"garbage")

    @pytest.mark.asyncio
    async def test_dial_invalid_endpoint(self, pki):
        with pytest.raises(ChannelEstablishmentError) as exc_info:
            SecureChannelFactory().dial("grpcs://localhost:7051", pki.tls_ca.cert_pem)
        assert exc_info.value.endpoint == "grpcs://localhost:7051"

    @pytest.mark.asyncio
    async def test_dial_failure_wrapped(self, pki):
        with patch("grpc.aio.secure_channel", side_effect=RuntimeError("boom")):
            with pytest.raises(ChannelEstablishmentError) as exc_info:
                SecureChannelFactory().dial("localhost:7051", pki.tls_ca.cert_pem)
        assert exc_info.value.endpoint == "localhost:7051"
        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestSecureChannel:
    """Test the channel wrapper."""

    @pytest.fixture
    def grpc_channel(self):
        mock = MagicMock()
        mock.close = AsyncMock()
        mock.get_state.return_value = grpc.ChannelConnectivity.TRANSIENT_FAILURE
        return mock

    @pytest.fixture
    def channel(self, grpc_channel, pki):
        return SecureChannel(
            PeerEndpoint(value="localhost:7051"),
            grpc_channel,
            PinnedCATrustPolicy(pki.tls_ca.cert_pem),
        )

    @pytest.mark.asyncio
    async def test_wait_until_ready(self, channel, grpc_channel):
        grpc_channel.channel_ready = AsyncMock(return_value=None)
        await channel.wait_until_ready(1.0)
        grpc_channel.channel_ready.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_wait_until_ready_times_out(self, channel, grpc_channel):
        async def never_ready():
            await asyncio.sleep(10)

        grpc_channel.channel_ready = never_ready

        with pytest.raises(ChannelEstablishmentError) as exc_info:
            await channel.wait_until_ready(0.05)

        assert exc_info.value.endpoint == "localhost:7051"
        assert "TRANSIENT_FAILURE" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, channel, grpc_channel):
        await channel.close()
        await channel.close()
        grpc_channel.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_async_context_manager(self, channel, grpc_channel):
        async with channel as entered:
            assert entered is channel
        assert channel.closed
        grpc_channel.close.assert_awaited_once()

    def test_repr(self, channel):
        assert repr(channel) == "SecureChannel(target='localhost:7051', server_name='localhost')"
