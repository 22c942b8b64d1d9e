"""X.509 identities and private-key signers.

An identity says who is signing; a signer performs the signing. They are
built independently and only checked against each other when a session is
assembled.

Supported signing keys follow the Fabric gateway client:

- ECDSA on P-256 or P-384. Messages are hashed with SHA-256 and the DER
  signature is normalised to low-S, as peers reject high-S signatures.
- Ed25519, signing the message directly.
"""

from __future__ import annotations

from typing import Any

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)
from pydantic import BaseModel, ConfigDict, ValidationError

from ..application.gateway_session import ensure_key_matches
from ..domain.exceptions import CertParseError, IdentityError, KeyFormatError
from ..domain.value_objects import MspId
from ..ports.signer import SignerPort

# Group orders of the supported curves, used for low-S normalisation.
CURVE_ORDERS: dict[str, int] = {
    "secp256r1": int("FFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551", 16),
    "secp384r1": int(
        "FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFC7634D81F4372DDF"
        "581A0DB248B0A77AECEC196ACCC52973",
        16,
    ),
}


class X509Identity(BaseModel):
    """An MSP ID paired with the X.509 certificate that identifies the client."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    msp_id: MspId
    certificate: x509.Certificate

    @property
    def credentials(self) -> bytes:
        """Certificate in PEM form, as attached to proposals."""
        return self.certificate.public_bytes(serialization.Encoding.PEM)

    @property
    def public_key(self) -> Any:
        return self.certificate.public_key()


class ECDSASigner(SignerPort):
    """Signs with an ECDSA private key, producing low-S DER signatures."""

    def __init__(self, private_key: ec.EllipticCurvePrivateKey):
        curve = private_key.curve.name
        if curve not in CURVE_ORDERS:
            raise KeyFormatError(f"Unsupported ECDSA curve: {curve}", details={"curve": curve})
        self._key = private_key
        self._order = CURVE_ORDERS[curve]

    def sign(self, message: bytes) -> bytes:
        der = self._key.sign(message, ec.ECDSA(hashes.SHA256()))
        r, s = decode_dss_signature(der)
        if s > self._order // 2:
            s = self._order - s
        return encode_dss_signature(r, s)

    @property
    def public_key(self) -> ec.EllipticCurvePublicKey:
        return self._key.public_key()


class Ed25519Signer(SignerPort):
    """Signs with an Ed25519 private key."""

    def __init__(self, private_key: ed25519.Ed25519PrivateKey):
        self._key = private_key

    def sign(self, message: bytes) -> bytes:
        return self._key.sign(message)

    @property
    def public_key(self) -> ed25519.Ed25519PublicKey:
        return self._key.public_key()


class IdentityBuilder:
    """Turns PEM material from the network configuration into an identity and signer."""

    def build_identity(self, msp_id: MspId | str, certificate_pem: bytes) -> X509Identity:
        """Parse a certificate and bind it to an MSP ID.

        Raises:
            CertParseError: If the PEM is not a well-formed X.509 certificate
            IdentityError: If the MSP ID is blank
        """
        certificate = parse_certificate(certificate_pem)
        try:
            msp = msp_id if isinstance(msp_id, MspId) else MspId(value=msp_id)
        except ValidationError as e:
            raise IdentityError(f"Invalid MSP ID '{msp_id}'") from e
        return X509Identity(msp_id=msp, certificate=certificate)

    def build_signer(self, private_key_pem: bytes) -> SignerPort:
        """Load an unencrypted PEM private key into a signer.

        Raises:
            KeyFormatError: If the PEM does not decode to a supported key
        """
        try:
            private_key = serialization.load_pem_private_key(private_key_pem, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise KeyFormatError(f"Failed to load private key: {e}") from e

        if isinstance(private_key, ec.EllipticCurvePrivateKey):
            return ECDSASigner(private_key)
        if isinstance(private_key, ed25519.Ed25519PrivateKey):
            return Ed25519Signer(private_key)
        raise KeyFormatError(
            f"Unsupported private key algorithm: {type(private_key).__name__}",
            details={"algorithm": type(private_key).__name__},
        )

    def ensure_key_matches(self, identity: X509Identity, signer: SignerPort) -> None:
        """Check that the signer's key is the certificate's key.

        Raises:
            IdentityMismatchError: If the public keys differ
        """
        ensure_key_matches(identity, signer)


def parse_certificate(pem: bytes) -> x509.Certificate:
    """Parse a single PEM certificate.

    Raises:
        CertParseError: If the data is not a well-formed certificate
    """
    try:
        return x509.load_pem_x509_certificate(pem)
    except (ValueError, TypeError) as e:
        raise CertParseError(f"Failed to parse X.509 certificate: {e}") from e
