"""Domain layer - value objects, models and exceptions."""

from .enums import BootstrapState, IntegrationStatus, OperationCategory
from .exceptions import (
    CertParseError,
    ChannelEstablishmentError,
    ConfigError,
    ConfigLookupError,
    CredentialMissingError,
    GatewayOperationError,
    IdentityError,
    IdentityMismatchError,
    KeyFormatError,
    LedgerGatewayError,
    LedgerUnavailableError,
    OperationTimeoutError,
)
from .models import PeerDescriptor, UserCredential
from .value_objects import MspId, PeerEndpoint, TimeoutPolicy

__all__ = [
    "BootstrapState",
    "CertParseError",
    "ChannelEstablishmentError",
    "ConfigError",
    "ConfigLookupError",
    "CredentialMissingError",
    "GatewayOperationError",
    "IdentityError",
    "IdentityMismatchError",
    "IntegrationStatus",
    "KeyFormatError",
    "LedgerGatewayError",
    "LedgerUnavailableError",
    "MspId",
    "OperationCategory",
    "OperationTimeoutError",
    "PeerDescriptor",
    "PeerEndpoint",
    "TimeoutPolicy",
    "UserCredential",
]
