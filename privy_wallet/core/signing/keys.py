"""
P-256 Key Management

Parsing of authorization keys ("wallet-auth:<base64 PKCS8 DER>") and
generation of ephemeral key pairs for HPKE wallet export.
Uses the cryptography library for all cryptographic operations.

Keys only ever live in process memory: nothing here reads or writes files.
"""

import base64
import binascii
from dataclasses import dataclass
from typing import Tuple, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from privy_wallet.errors import AuthorizationError, HpkeError

AUTHORIZATION_KEY_PREFIX = "wallet-auth:"


@dataclass(frozen=True)
class EphemeralKeyPair:
    """
    A freshly generated P-256 key pair for a single export call.

    Attributes:
        private_key: Recipient private key, kept in memory only
        public_key: Base64-encoded DER SubjectPublicKeyInfo, sent to the API
    """
    private_key: ec.EllipticCurvePrivateKey
    public_key: str

    def __repr__(self) -> str:
        return f"EphemeralKeyPair(public_key={self.public_key!r})"


def generate_keypair() -> EphemeralKeyPair:
    """
    Generate a new ephemeral P-256 key pair.

    Returns:
        EphemeralKeyPair with the public half already encoded for the API

    Raises:
        HpkeError: If the underlying library fails to generate a key

    Example:
        >>> keys = generate_keypair()
        >>> keys.public_key  # send this as recipient_public_key
    """
    try:
        private_key = ec.generate_private_key(ec.SECP256R1())
        return EphemeralKeyPair(
            private_key=private_key,
            public_key=public_key_to_base64(private_key.public_key()),
        )
    except Exception as e:
        raise HpkeError(f"Failed to generate HPKE keys: {e}") from e


def public_key_to_base64(public_key: ec.EllipticCurvePublicKey) -> str:
    """
    Serialize a public key to base64 DER SubjectPublicKeyInfo.

    Args:
        public_key: EC public key object

    Returns:
        Base64-encoded SPKI (124 characters for P-256)
    """
    der = public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return base64.b64encode(der).decode("ascii")


def base64_to_public_key(b64_key: str) -> ec.EllipticCurvePublicKey:
    """
    Deserialize a base64 DER SubjectPublicKeyInfo string.

    Raises:
        ValueError: If the key is invalid or not a P-256 key
    """
    try:
        der = base64.b64decode(b64_key, validate=True)
        public_key = serialization.load_der_public_key(der)
    except Exception as e:
        raise ValueError(f"Invalid public key: {e}") from e

    if not isinstance(public_key, ec.EllipticCurvePublicKey) or not isinstance(
        public_key.curve, ec.SECP256R1
    ):
        raise ValueError(f"Not a P-256 public key: {type(public_key).__name__}")
    return public_key


def load_authorization_key(auth_key: str) -> ec.EllipticCurvePrivateKey:
    """
    Parse an authorization private key.

    Accepted forms:
        - "wallet-auth:<base64 PKCS8 DER>" (the format shown in the dashboard)
        - the same base64 body without the prefix
        - a full PEM document

    Args:
        auth_key: Authorization key string

    Returns:
        P-256 private key object

    Raises:
        AuthorizationError: If the key is malformed or not on P-256
    """
    if not isinstance(auth_key, str) or not auth_key.strip():
        raise AuthorizationError("Invalid authorization key: empty or not a string")

    key_body = auth_key.strip()
    if key_body.startswith(AUTHORIZATION_KEY_PREFIX):
        key_body = key_body[len(AUTHORIZATION_KEY_PREFIX):]

    try:
        if "-----BEGIN" in key_body:
            private_key = serialization.load_pem_private_key(
                key_body.encode("ascii"), password=None
            )
        else:
            der = base64.b64decode("".join(key_body.split()), validate=True)
            private_key = serialization.load_der_private_key(der, password=None)
    except (ValueError, TypeError, binascii.Error, UnsupportedAlgorithm) as e:
        raise AuthorizationError(f"Invalid authorization key: {e}") from e

    if not isinstance(private_key, ec.EllipticCurvePrivateKey):
        raise AuthorizationError(
            f"Invalid authorization key: expected an EC key, got {type(private_key).__name__}"
        )
    if not isinstance(private_key.curve, ec.SECP256R1):
        raise AuthorizationError(
            f"Invalid authorization key: expected curve secp256r1, got {private_key.curve.name}"
        )
    return private_key


def private_key_to_authorization_key(private_key: ec.EllipticCurvePrivateKey) -> str:
    """
    Encode a private key in the "wallet-auth:" configuration format.

    WARNING: The result is a secret. Handle with care.
    """
    der = private_key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    return AUTHORIZATION_KEY_PREFIX + base64.b64encode(der).decode("ascii")


def generate_authorization_key() -> Tuple[str, str]:
    """
    Generate a new authorization key.

    The public half is what gets registered with the API (e.g. as a key
    quorum member); the private half goes into PRIVY_AUTHORIZATION_KEY.

    Returns:
        Tuple of (authorization_key, public_key_b64)
    """
    private_key = ec.generate_private_key(ec.SECP256R1())
    return (
        private_key_to_authorization_key(private_key),
        public_key_to_base64(private_key.public_key()),
    )


def coerce_private_key(
    key: Union[str, ec.EllipticCurvePrivateKey],
) -> ec.EllipticCurvePrivateKey:
    """Accept either an already-loaded key or an authorization key string."""
    if isinstance(key, ec.EllipticCurvePrivateKey):
        if not isinstance(key.curve, ec.SECP256R1):
            raise AuthorizationError(
                f"Invalid authorization key: expected curve secp256r1, got {key.curve.name}"
            )
        return key
    return load_authorization_key(key)
