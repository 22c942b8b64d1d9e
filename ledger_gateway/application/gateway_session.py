"""Gateway session - identity, signer and channel under a timeout policy.

The session does not speak the ledger protocol itself. Callers pass an async
callable that receives a :class:`CallContext` carrying the channel, the
identity, the signer and the timeout for the call's category; the session
guarantees the call never runs past that category's ceiling.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

import grpc
from cryptography.hazmat.primitives import serialization

from ..domain.enums import OperationCategory
from ..domain.exceptions import (
    ChannelEstablishmentError,
    GatewayOperationError,
    IdentityMismatchError,
    OperationTimeoutError,
)
from ..domain.value_objects import TimeoutPolicy
from ..ports.channel import ChannelPort
from ..ports.identity import IdentityPort
from ..ports.signer import SignerPort

T = TypeVar("T")


@dataclass(frozen=True)
class CallContext:
    """Everything a ledger client needs to issue one call."""

    category: OperationCategory
    timeout: float
    channel: ChannelPort
    identity: IdentityPort
    signer: SignerPort

    @property
    def grpc_channel(self) -> Any:
        return self.channel.grpc_channel

    @property
    def msp_id(self) -> str:
        return str(self.identity.msp_id)

    @property
    def creator(self) -> bytes:
        """Credentials of the signing identity."""
        return self.identity.credentials

    def sign(self, payload: bytes) -> bytes:
        """Sign a payload with the session's bound signer."""
        return self.signer.sign(payload)


LedgerCall = Callable[[CallContext], Awaitable[T]]


def ensure_key_matches(identity: IdentityPort, signer: SignerPort) -> None:
    """Check that the signer holds the key certified by the identity.

    Raises:
        IdentityMismatchError: If the public keys differ
    """
    if _spki(identity.public_key) != _spki(signer.public_key):
        raise IdentityMismatchError(str(identity.msp_id))


def _spki(public_key: Any) -> bytes:
    return public_key.public_bytes(
        serialization.Encoding.DER,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )


class GatewaySession:
    """A ready-to-use handle on one peer for one identity.

    Sessions are only created fully populated and are never mutated
    afterwards, so one session can be shared by many concurrent tasks.
    """

    def __init__(
        self,
        identity: IdentityPort,
        signer: SignerPort,
        channel: ChannelPort,
        timeouts: TimeoutPolicy,
    ):
        self._identity = identity
        self._signer = signer
        self._channel = channel
        self._timeouts = timeouts

    @classmethod
    def open(
        cls,
        identity: IdentityPort,
        signer: SignerPort,
        channel: ChannelPort,
        timeout_policy: TimeoutPolicy | None = None,
    ) -> GatewaySession:
        """Aggregate already-built parts into a session.

        Raises:
            ValueError: If a part is missing or the channel is already closed
            IdentityMismatchError: If the signer's key is not the certificate's key
        """
        missing = [
            name
            for name, part in (("identity", identity), ("signer", signer), ("channel", channel))
            if part is None
        ]
        if missing:
            raise ValueError(f"Cannot open gateway session without {', '.join(missing)}")
        if channel.closed:
            raise ValueError(f"Cannot open gateway session on closed channel to {channel.target}")
        ensure_key_matches(identity, signer)
        return cls(identity, signer, channel, timeout_policy or TimeoutPolicy())

    @property
    def identity(self) -> IdentityPort:
        return self._identity

    @property
    def msp_id(self) -> str:
        return str(self._identity.msp_id)

    @property
    def channel(self) -> ChannelPort:
        return self._channel

    @property
    def target(self) -> str:
        return self._channel.target

    @property
    def timeouts(self) -> TimeoutPolicy:
        return self._timeouts

    @property
    def closed(self) -> bool:
        return self._channel.closed

    def context(
        self, category: OperationCategory, timeout: float | None = None
    ) -> CallContext:
        """Build the context for one call in ``category``.

        ``timeout`` may shorten the category ceiling but never extend it.
        """
        return CallContext(
            category=OperationCategory(category),
            timeout=self._timeouts.effective_timeout(category, timeout),
            channel=self._channel,
            identity=self._identity,
            signer=self._signer,
        )

    async def evaluate(self, call: LedgerCall[T], *, timeout: float | None = None) -> T:
        """Run a read-only query."""
        return await self._invoke(OperationCategory.EVALUATE, call, timeout)

    async def endorse(self, call: LedgerCall[T], *, timeout: float | None = None) -> T:
        """Send a transaction proposal for endorsement."""
        return await self._invoke(OperationCategory.ENDORSE, call, timeout)

    async def submit(self, call: LedgerCall[T], *, timeout: float | None = None) -> T:
        """Send an endorsed transaction for ordering."""
        return await self._invoke(OperationCategory.SUBMIT, call, timeout)

    async def commit_status(self, call: LedgerCall[T], *, timeout: float | None = None) -> T:
        """Wait for a submitted transaction to be committed."""
        return await self._invoke(OperationCategory.COMMIT_STATUS, call, timeout)

    async def _invoke(
        self,
        category: OperationCategory,
        call: LedgerCall[T],
        timeout: float | None,
    ) -> T:
        if self._channel.closed:
            raise GatewayOperationError(
                f"Gateway session to {self.target} is closed",
                details={"category": category.value},
            )

        context = self.context(category, timeout)
        try:
            async with asyncio.timeout(context.timeout) as deadline:
                return await call(context)
        except TimeoutError as e:
            if not deadline.expired():
                raise
            raise OperationTimeoutError(category.value, context.timeout) from e
        except grpc.aio.AioRpcError as e:
            if e.code() == grpc.StatusCode.DEADLINE_EXCEEDED:
                raise OperationTimeoutError(category.value, context.timeout) from e
            if e.code() == grpc.StatusCode.UNAVAILABLE:
                raise ChannelEstablishmentError(
                    f"Channel to {self.target} unavailable during {category.value}: {e.details()}",
                    endpoint=self.target,
                ) from e
            raise

    async def close(self) -> None:
        """Close the underlying channel."""
        await self._channel.close()

    async def __aenter__(self) -> GatewaySession:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"GatewaySession(msp_id={self.msp_id!r}, target={self.target!r})"
