"""Domain enums for type safety and consistency."""

from enum import Enum


class OperationCategory(str, Enum):
    """Categories of ledger calls, each with its own timeout ceiling."""

    EVALUATE = "evaluate"  # Read-only query
    ENDORSE = "endorse"  # Proposal sent for endorsement
    SUBMIT = "submit"  # Endorsed transaction sent for ordering
    COMMIT_STATUS = "commit_status"  # Wait for commit confirmation


class BootstrapState(str, Enum):
    """Stages of the gateway bootstrap.

    FAILED is terminal; no session is produced from it.
    """

    UNCONFIGURED = "UNCONFIGURED"
    RESOLVING = "RESOLVING"
    IDENTITY_BUILT = "IDENTITY_BUILT"
    CHANNEL_OPEN = "CHANNEL_OPEN"
    READY = "READY"
    FAILED = "FAILED"


class IntegrationStatus(str, Enum):
    """Availability of ledger-backed operations for the surrounding process."""

    DISABLED = "DISABLED"  # No network configuration supplied
    DEGRADED = "DEGRADED"  # Bootstrap failed; process keeps running
    READY = "READY"
