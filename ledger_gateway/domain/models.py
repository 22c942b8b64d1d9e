"""Domain models resolved from the network configuration."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .value_objects import MspId, PeerEndpoint


def _as_msp_id(v: Any) -> MspId:
    if isinstance(v, MspId):
        return v
    if isinstance(v, str):
        return MspId(value=v)
    raise ValueError(f"Invalid MSP ID type: {type(v)}")


class PeerDescriptor(BaseModel):
    """A peer selected for the gateway connection."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Peer name in the network config")
    endpoint: PeerEndpoint = Field(..., description="Dial target without scheme")
    ca_cert_pem: bytes = Field(..., min_length=1, description="TLS CA certificate, PEM")

    @field_validator("endpoint", mode="before")
    @classmethod
    def parse_endpoint(cls, v: Any) -> PeerEndpoint:
        """Parse endpoint from string or PeerEndpoint object."""
        if isinstance(v, PeerEndpoint):
            return v
        if isinstance(v, str):
            return PeerEndpoint(value=v)
        raise ValueError(f"Invalid endpoint type: {type(v)}")


class UserCredential(BaseModel):
    """Certificate and private key of a user within an organization."""

    model_config = ConfigDict(frozen=True)

    msp_id: MspId
    username: str = Field(..., min_length=1)
    certificate_pem: bytes = Field(..., min_length=1)
    private_key_pem: bytes = Field(..., min_length=1, repr=False)

    @field_validator("msp_id", mode="before")
    @classmethod
    def parse_msp_id(cls, v: Any) -> MspId:
        return _as_msp_id(v)
