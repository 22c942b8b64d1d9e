"""Resolves the gateway peer and user credentials from a network configuration."""

from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError

from ..domain.exceptions import ConfigLookupError, CredentialMissingError
from ..domain.models import PeerDescriptor, UserCredential
from ..domain.value_objects import MspId, PeerEndpoint
from ..ports.logger import LoggerPort
from ..ports.network_config import NetworkConfigPort
from ..ports.peer_selection import PeerSelector
from .peer_selection import FirstPeerSelector

TLS_SCHEME = "grpcs://"


class ConfigResolver:
    """Looks up organization, peer and user entries in a connection profile.

    All lookups are pure reads. Any failure is raised immediately and names
    the key path that could not be used.
    """

    def __init__(
        self,
        peer_selector: PeerSelector | None = None,
        logger: LoggerPort | None = None,
    ):
        """Initialize the resolver.

        Args:
            peer_selector: Strategy picking one peer from the organization's
                list. Defaults to the first listed peer.
            logger: Optional logger for debugging
        """
        self._selector = peer_selector or FirstPeerSelector()
        self._logger = logger

    def resolve_peer(self, config: NetworkConfigPort, msp_id: MspId | str) -> PeerDescriptor:
        """Resolve the peer the gateway connects to.

        Raises:
            ConfigLookupError: If the peer list is missing or empty, or the
                selected peer has no usable URL or TLS CA certificate
        """
        peers_key = f"organizations.{msp_id}.peers"
        peer_names = config.lookup(peers_key)
        if not isinstance(peer_names, list) or not peer_names:
            raise ConfigLookupError(peers_key, "expected a non-empty list of peer names")
        if not all(isinstance(name, str) and name for name in peer_names):
            raise ConfigLookupError(peers_key, "peer names must be non-empty strings")

        name = self._selector.select(peer_names, str(msp_id))

        url_key = f"peers.{name}.url"
        url = config.lookup(url_key)
        if not isinstance(url, str):
            raise ConfigLookupError(url_key, "expected a string URL")
        endpoint = url.strip().removeprefix(TLS_SCHEME)
        try:
            peer_endpoint = PeerEndpoint(value=endpoint)
        except ValidationError as e:
            raise ConfigLookupError(url_key, f"unusable peer URL '{url}'") from e

        ca_key = f"peers.{name}.tlsCACerts"
        ca_cert_pem = _read_pem(config, ca_key)
        if ca_cert_pem is None:
            raise ConfigLookupError(f"{ca_key}.pem")

        if self._logger:
            self._logger.debug(
                "Resolved gateway peer",
                msp_id=str(msp_id),
                peer_name=name,
                endpoint=str(peer_endpoint),
            )
        return PeerDescriptor(name=name, endpoint=peer_endpoint, ca_cert_pem=ca_cert_pem)

    def resolve_user(
        self, config: NetworkConfigPort, msp_id: MspId | str, user: str
    ) -> UserCredential:
        """Resolve a user's certificate and private key.

        Raises:
            CredentialMissingError: With ``field`` ``"cert"`` or ``"key"``
                naming the missing half; the certificate is checked first
            ConfigLookupError: If an entry exists but is not usable PEM
        """
        user_key = f"organizations.{msp_id}.users.{user}"

        certificate_pem = _read_pem(config, f"{user_key}.cert")
        if certificate_pem is None:
            raise CredentialMissingError("cert", f"{user_key}.cert.pem")

        private_key_pem = _read_pem(config, f"{user_key}.key")
        if private_key_pem is None:
            raise CredentialMissingError("key", f"{user_key}.key.pem")

        return UserCredential(
            msp_id=str(msp_id),
            username=user,
            certificate_pem=certificate_pem,
            private_key_pem=private_key_pem,
        )


def _read_pem(config: NetworkConfigPort, key_prefix: str) -> bytes | None:
    """Read ``<prefix>.pem`` inline, falling back to the file at ``<prefix>.path``.

    Returns None when neither key exists.
    """
    pem_key = f"{key_prefix}.pem"
    if config.contains(pem_key):
        value = config.lookup(pem_key)
        if not isinstance(value, str) or not value.strip():
            raise ConfigLookupError(pem_key, "expected a PEM string")
        return value.encode("utf-8")

    path_key = f"{key_prefix}.path"
    if config.contains(path_key):
        value = config.lookup(path_key)
        if not isinstance(value, str) or not value.strip():
            raise ConfigLookupError(path_key, "expected a file path")
        path = Path(value).expanduser()
        if not path.is_absolute() and config.base_dir is not None:
            path = config.base_dir / path
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ConfigLookupError(path_key, f"cannot read '{path}': {e}") from e
        if not data.strip():
            raise ConfigLookupError(path_key, f"'{path}' is empty")
        return data

    return None
