"""Bootstrap of the gateway session from a network configuration.

The bootstrap is atomic: it either returns a fully built
:class:`GatewaySession` or raises, discarding anything built on the way
(a dialled channel is closed before the error propagates).
"""

from __future__ import annotations

from ..application.gateway_session import GatewaySession
from ..application.ledger_integration import LedgerIntegration
from ..domain.enums import BootstrapState
from ..domain.exceptions import ConfigError, LedgerGatewayError
from ..ports.logger import LoggerPort
from ..ports.network_config import NetworkConfigPort
from .config import GatewaySettings, LogContext
from .config_resolver import ConfigResolver
from .identity import IdentityBuilder
from .network_config import YamlNetworkConfig
from .peer_selection import create_peer_selector
from .secure_channel import SecureChannel, SecureChannelFactory
from .simple_logger import SimpleLogger


class GatewayBootstrap:
    """Runs the startup sequence once.

    States: UNCONFIGURED -> RESOLVING -> IDENTITY_BUILT -> CHANNEL_OPEN -> READY,
    with any failure moving to the terminal FAILED state.
    """

    def __init__(
        self,
        settings: GatewaySettings,
        config: NetworkConfigPort | None = None,
        resolver: ConfigResolver | None = None,
        identity_builder: IdentityBuilder | None = None,
        channel_factory: SecureChannelFactory | None = None,
        logger: LoggerPort | None = None,
    ):
        """Initialize the bootstrap.

        Args:
            settings: Gateway settings; ``network_config`` must be set
            config: Pre-loaded network configuration. Loaded from
                ``settings.network_config`` when omitted.
            resolver: Config resolver (default uses ``settings.peer_selection``)
            identity_builder: Builder for identity and signer
            channel_factory: Factory dialling the peer
            logger: Logger for state transitions and failures
        """
        self._settings = settings
        self._config = config
        logger = logger or SimpleLogger()
        self._resolver = resolver or ConfigResolver(
            peer_selector=create_peer_selector(settings.peer_selection),
            logger=logger,
        )
        self._identity_builder = identity_builder or IdentityBuilder()
        self._channel_factory = channel_factory or SecureChannelFactory()
        self._state = BootstrapState.UNCONFIGURED
        self._logger = logger.bind(
            msp_id=str(settings.msp_id) if settings.msp_id else None,
            user=settings.user,
            component="GatewayBootstrap",
        )

    @property
    def state(self) -> BootstrapState:
        return self._state

    async def run(self) -> GatewaySession:
        """Build the session.

        Raises:
            ConfigError: If no network configuration was supplied, or it
                cannot be loaded or resolved
            IdentityError: If the user's certificate or key is unusable
            ChannelEstablishmentError: If the peer channel cannot be opened
        """
        if self._state != BootstrapState.UNCONFIGURED:
            raise RuntimeError(f"Bootstrap already ran (state: {self._state.value})")
        if not self._settings.enabled:
            raise ConfigError("No network configuration supplied")

        settings = self._settings
        channel: SecureChannel | None = None
        session: GatewaySession | None = None
        try:
            self._transition(BootstrapState.RESOLVING)
            config = self._config or YamlNetworkConfig.from_file(settings.network_config)
            peer = self._resolver.resolve_peer(config, settings.msp_id)
            credential = self._resolver.resolve_user(config, settings.msp_id, settings.user)
            self._logger = self._logger.bind(peer_name=peer.name, endpoint=str(peer.endpoint))

            identity = self._identity_builder.build_identity(
                settings.msp_id, credential.certificate_pem
            )
            signer = self._identity_builder.build_signer(credential.private_key_pem)
            self._identity_builder.ensure_key_matches(identity, signer)
            self._transition(BootstrapState.IDENTITY_BUILT)

            channel = self._channel_factory.dial(
                peer.endpoint, peer.ca_cert_pem, server_name=settings.server_name
            )
            self._transition(BootstrapState.CHANNEL_OPEN)
            if settings.wait_for_ready is not None:
                await channel.wait_until_ready(settings.wait_for_ready)

            session = GatewaySession.open(identity, signer, channel, settings.timeouts)
            self._transition(BootstrapState.READY)
            return session
        except Exception as e:
            self._state = BootstrapState.FAILED
            self._logger.error(
                f"Gateway bootstrap failed: {e}",
                **LogContext().with_error(e).to_dict(),
                state=BootstrapState.FAILED.value,
            )
            raise
        finally:
            if session is None and channel is not None:
                await channel.close()

    def _transition(self, state: BootstrapState) -> None:
        self._state = state
        self._logger.debug(
            f"Gateway bootstrap {state.value}",
            operation="bootstrap",
            state=state.value,
        )


async def start_ledger_integration(
    settings: GatewaySettings,
    logger: LoggerPort | None = None,
    **bootstrap_kwargs,
) -> LedgerIntegration:
    """Bootstrap the ledger gateway for the surrounding process.

    Never raises for gateway problems: a missing configuration yields a
    DISABLED integration and a failed bootstrap a DEGRADED one carrying the
    error.
    """
    logger = logger or SimpleLogger()
    if not settings.enabled:
        logger.info("Ledger integration disabled: no network configuration supplied")
        return LedgerIntegration.disabled()

    bootstrap = GatewayBootstrap(settings, logger=logger, **bootstrap_kwargs)
    try:
        session = await bootstrap.run()
    except LedgerGatewayError as e:
        logger.warning(
            "Ledger integration degraded; ledger-backed operations unavailable",
            error_code=e.__class__.__name__,
        )
        return LedgerIntegration.degraded(e)

    logger.info(
        f"Ledger integration ready: {session.msp_id} via {session.target}",
        msp_id=session.msp_id,
        endpoint=session.target,
    )
    return LedgerIntegration.ready(session)
