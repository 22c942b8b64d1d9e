"""Domain-specific exceptions for the ledger gateway bootstrap."""

from __future__ import annotations


class LedgerGatewayError(Exception):
    """Base exception for all ledger gateway errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigError(LedgerGatewayError):
    """Network configuration could not be loaded or is malformed."""

    pass


class ConfigLookupError(ConfigError):
    """Raised when a key path is missing or holds an unusable value."""

    def __init__(self, key_path: str, reason: str | None = None):
        message = f"Config key '{key_path}' not found"
        if reason:
            message = f"Config key '{key_path}' is invalid: {reason}"
        super().__init__(message, details={"key_path": key_path})
        self.key_path = key_path
        self.reason = reason


class CredentialMissingError(ConfigError):
    """Raised when a user's certificate or private key is absent.

    ``field`` is either ``"cert"`` or ``"key"`` so callers can tell which
    half of the credential is missing.
    """

    def __init__(self, field: str, key_path: str):
        super().__init__(
            f"User {field} not found at '{key_path}'",
            details={"field": field, "key_path": key_path},
        )
        self.field = field
        self.key_path = key_path


class IdentityError(LedgerGatewayError):
    """Identity or signer construction errors."""

    pass


class CertParseError(IdentityError):
    """Raised when PEM data is not a well-formed X.509 certificate."""

    pass


class KeyFormatError(IdentityError):
    """Raised when PEM data is not a supported private key."""

    pass


class IdentityMismatchError(IdentityError):
    """Raised when the private key does not belong to the certificate."""

    def __init__(self, msp_id: str):
        super().__init__(
            f"Private key does not match the certificate public key for '{msp_id}'",
            details={"msp_id": msp_id},
        )
        self.msp_id = msp_id


class ChannelEstablishmentError(LedgerGatewayError):
    """Raised when a secure channel to a peer cannot be built or used."""

    def __init__(self, message: str, endpoint: str | None = None):
        super().__init__(message)
        self.endpoint = endpoint
        if endpoint:
            self.details["endpoint"] = endpoint


class GatewayOperationError(LedgerGatewayError):
    """Errors raised while issuing calls through a gateway session."""

    pass


class OperationTimeoutError(GatewayOperationError):
    """Raised when a call exceeds its category timeout."""

    def __init__(self, category: str, timeout: float):
        super().__init__(
            f"{category} operation timed out after {timeout:g}s",
            details={"category": category, "timeout": timeout},
        )
        self.category = category
        self.timeout = timeout


class LedgerUnavailableError(LedgerGatewayError):
    """Raised when ledger-backed operations are requested but unavailable."""

    def __init__(self, status: str, reason: str | None = None):
        message = f"Ledger integration is {status.lower()}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, details={"status": status})
        self.status = status
        self.reason = reason
        if reason:
            self.details["reason"] = reason
