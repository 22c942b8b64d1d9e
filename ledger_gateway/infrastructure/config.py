"""Configuration objects for the infrastructure layer."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..domain.value_objects import MspId, TimeoutPolicy
from ..ports.peer_selection import SelectionStrategy


class GatewaySettings(BaseModel):
    """Settings for bootstrapping a gateway session.

    A missing ``network_config`` means ledger integration is disabled;
    when it is present, ``msp_id`` and ``user`` are required.
    """

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    network_config: Path | None = Field(
        default=None,
        description="Path to the network configuration (connection profile)",
    )
    msp_id: MspId | None = Field(
        default=None,
        description="Organization MSP ID whose peer and user are used",
    )
    user: str | None = Field(
        default=None,
        description="User name under organizations.<msp_id>.users",
    )
    server_name: str | None = Field(
        default=None,
        description="TLS server name to verify instead of the endpoint host",
    )
    peer_selection: SelectionStrategy = Field(
        default=SelectionStrategy.FIRST,
        description="How the gateway peer is picked from the organization's peers",
    )
    timeouts: TimeoutPolicy = Field(
        default_factory=TimeoutPolicy,
        description="Timeout ceilings per operation category",
    )
    wait_for_ready: float | None = Field(
        default=None,
        gt=0,
        description="Seconds to wait for the channel handshake at startup; None dials lazily",
    )

    @field_validator("msp_id", mode="before")
    @classmethod
    def parse_msp_id(cls, v: Any) -> MspId | None:
        """Parse MSP ID from string or MspId object."""
        if v is None or v == "":
            return None
        if isinstance(v, MspId):
            return v
        if isinstance(v, str):
            return MspId(value=v)
        raise ValueError(f"Invalid MSP ID type: {type(v)}")

    @field_validator("user", "server_name", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def require_identity_when_enabled(self) -> GatewaySettings:
        """An enabled gateway needs both an MSP ID and a user."""
        if self.network_config is not None:
            missing = [name for name in ("msp_id", "user") if getattr(self, name) is None]
            if missing:
                raise ValueError(
                    f"network_config is set but {', '.join(missing)} is missing"
                )
        return self

    @property
    def enabled(self) -> bool:
        """Whether ledger integration was requested."""
        return self.network_config is not None


class LogContext(BaseModel):
    """Strongly-typed context for structured logging.

    Keys are chosen so they never collide with ``logging.LogRecord``
    attributes when passed as ``extra``.
    """

    model_config = ConfigDict(
        extra="allow",
        str_strip_whitespace=True,
        strict=False,
        validate_assignment=True,
    )

    msp_id: str | None = Field(default=None, description="Organization MSP ID")
    user: str | None = Field(default=None, description="User the identity belongs to")
    peer_name: str | None = Field(default=None, description="Selected peer")
    endpoint: str | None = Field(default=None, description="Peer dial target")

    operation: str | None = Field(default=None, description="Current operation")
    component: str | None = Field(default=None, description="Component generating the log")

    error_code: str | None = Field(default=None, description="Structured error code")
    error_type: str | None = Field(default=None, description="Type of error encountered")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging frameworks."""
        return {k: v for k, v in self.model_dump().items() if v is not None}

    def with_error(self, error: Exception) -> LogContext:
        """Create a new context with error information."""
        return LogContext(
            **{
                **self.model_dump(),
                "error_code": error.__class__.__name__,
                "error_type": type(error).__module__ + "." + type(error).__name__,
            }
        )

    def with_operation(self, operation: str, component: str | None = None) -> LogContext:
        """Create a new context with operation information."""
        return LogContext(
            **{
                **self.model_dump(),
                "operation": operation,
                "component": component or self.component,
            }
        )
