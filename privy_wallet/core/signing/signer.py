"""
ECDSA Request Signing

Signs canonical request bytes with a P-256 authorization key
(ECDSA over SHA-256, DER signature, base64-encoded) and verifies such
signatures.
"""

import base64
import logging
from typing import Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

from privy_wallet.core.signing.keys import base64_to_public_key, coerce_private_key
from privy_wallet.errors import AuthorizationError

logger = logging.getLogger(__name__)


def sign(
    private_key_material: Union[str, ec.EllipticCurvePrivateKey],
    message: bytes,
) -> str:
    """
    Sign a message with an authorization key.

    Args:
        private_key_material: "wallet-auth:..." string or a loaded P-256 key
        message: Bytes to sign (normally canonical JSON)

    Returns:
        Base64-encoded DER ECDSA signature

    Raises:
        AuthorizationError: If the key cannot be parsed or signing fails
    """
    private_key = coerce_private_key(private_key_material)
    try:
        signature = private_key.sign(message, ec.ECDSA(hashes.SHA256()))
    except Exception as e:
        raise AuthorizationError(f"Failed to sign request: {e}") from e
    return base64.b64encode(signature).decode("ascii")


def verify(
    public_key: Union[str, ec.EllipticCurvePublicKey],
    signature_b64: str,
    message: bytes,
) -> bool:
    """
    Verify a signature produced by sign().

    Args:
        public_key: P-256 public key object or base64 SPKI string
        signature_b64: Base64-encoded DER signature
        message: The signed bytes

    Returns:
        True if the signature is valid, False otherwise
    """
    try:
        if isinstance(public_key, str):
            public_key = base64_to_public_key(public_key)
        signature = base64.b64decode(signature_b64, validate=True)
    except ValueError as e:
        logger.debug(f"Signature verification input rejected: {e}")
        return False

    try:
        public_key.verify(signature, message, ec.ECDSA(hashes.SHA256()))
    except InvalidSignature:
        return False
    return True
