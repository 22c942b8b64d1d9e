"""Pytest configuration and shared fixtures."""

from dataclasses import dataclass
from unittest.mock import MagicMock

import pytest

from ledger_gateway.ports.logger import LoggerPort
from tests.builders import (
    MSP_ID,
    PEER,
    USER,
    IssuedCert,
    NetworkConfigBuilder,
    issue_cert,
    make_ca,
)


@dataclass(frozen=True)
class Pki:
    """Certificates for one organization plus an unrelated CA."""

    tls_ca: IssuedCert
    other_ca: IssuedCert
    peer_tls: IssuedCert
    user: IssuedCert


@pytest.fixture(scope="session")
def pki() -> Pki:
    """Generate a TLS CA, a peer server certificate and a user certificate."""
    tls_ca = make_ca("tlsca.org1.example.com")
    other_ca = make_ca("tlsca.org2.example.com")
    peer_tls = issue_cert(
        tls_ca,
        PEER,
        dns_names=(PEER, "localhost"),
        ip_addresses=("127.0.0.1",),
        server=True,
    )
    user = issue_cert(make_ca("ca.org1.example.com"), f"{USER}@org1.example.com")
    return Pki(tls_ca=tls_ca, other_ca=other_ca, peer_tls=peer_tls, user=user)


@pytest.fixture
def network_builder(pki) -> NetworkConfigBuilder:
    """A well-formed profile: one organization, one peer, one user."""
    return (
        NetworkConfigBuilder()
        .with_organization(MSP_ID, [PEER])
        .with_peer(PEER, "grpcs://localhost:7051", ca_pem=pki.tls_ca.cert_pem)
        .with_user(MSP_ID, USER, cert=pki.user.cert_pem, key=pki.user.key_pem)
    )


@pytest.fixture
def mock_logger():
    """Create a mock logger implementing the logger port.

    ``bind`` returns the same mock so calls made through bound loggers are
    recorded in one place.
    """
    logger = MagicMock(spec=LoggerPort)
    logger.bind.return_value = logger
    return logger
