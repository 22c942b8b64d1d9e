"""Domain value objects for the ledger gateway.

These value objects give type safety and validation to identifiers and
settings that would otherwise travel around as bare strings and floats.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import OperationCategory


class MspId(BaseModel):
    """Value object representing a membership service provider identifier.

    MSP IDs are case-sensitive and used verbatim as configuration keys.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    value: str = Field(..., min_length=1, max_length=128, description="The MSP identifier")

    @field_validator("value")
    @classmethod
    def validate_msp_id(cls, v: str) -> str:
        """MSP IDs must not contain whitespace or control characters."""
        if not v.strip():
            raise ValueError("MSP ID cannot be empty or whitespace")
        if any(c.isspace() or ord(c) < 32 for c in v):
            raise ValueError("MSP ID cannot contain whitespace or control characters")
        return v

    def __str__(self) -> str:
        return self.value

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, MspId):
            return self.value == other.value
        if isinstance(other, str):
            return self.value == other
        return False

    def __hash__(self) -> int:
        return hash(self.value)


class PeerEndpoint(BaseModel):
    """Value object representing a peer's ``host:port`` dial target.

    The value never carries a URL scheme.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    value: str = Field(..., min_length=3, description="Endpoint in host:port form")

    @field_validator("value")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Validate endpoint format.

        Endpoints must:
        - Not contain a scheme (``://``)
        - End with ``:<port>`` where port is 1-65535
        - Have a non-empty host
        """
        if "://" in v:
            raise ValueError(f"Endpoint '{v}' must not include a URL scheme")
        host, sep, port = v.rpartition(":")
        if not sep or not host or not port.isdigit():
            raise ValueError(f"Endpoint '{v}' must be in host:port form")
        if not 0 < int(port) < 65536:
            raise ValueError(f"Endpoint '{v}' has an out of range port")
        return v

    @property
    def host(self) -> str:
        """Host part, without IPv6 brackets."""
        return self.value.rpartition(":")[0].strip("[]")

    @property
    def port(self) -> int:
        return int(self.value.rpartition(":")[2])

    def __str__(self) -> str:
        return self.value

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, PeerEndpoint):
            return self.value == other.value
        if isinstance(other, str):
            return self.value == other
        return False

    def __hash__(self) -> int:
        return hash(self.value)


class TimeoutPolicy(BaseModel):
    """Timeout ceilings, in seconds, for each category of ledger call.

    Defaults match the gateway client defaults used for the organization's
    peers: queries and submissions are short, endorsement waits on several
    organizations, and commit-status waits for a block to be cut.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    evaluate: float = Field(default=5.0, gt=0, description="Evaluate (query) timeout")
    endorse: float = Field(default=15.0, gt=0, description="Endorse timeout")
    submit: float = Field(default=5.0, gt=0, description="Submit timeout")
    commit_status: float = Field(default=60.0, gt=0, description="Commit status timeout")

    def for_category(self, category: OperationCategory) -> float:
        """Return the ceiling for a category."""
        return float(getattr(self, OperationCategory(category).value))

    def effective_timeout(self, category: OperationCategory, requested: float | None = None) -> float:
        """Combine a caller deadline with the category ceiling.

        The caller may shorten the timeout but never extend it.
        """
        ceiling = self.for_category(category)
        if requested is None:
            return ceiling
        if requested <= 0:
            raise ValueError(f"Requested timeout must be positive, got {requested}")
        return min(float(requested), ceiling)
