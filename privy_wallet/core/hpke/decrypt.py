"""
HPKE Wallet Export Decryption

Decrypts the HPKE-encrypted private key returned by the wallet export
endpoint. The response carries two base64 fields:
    - ciphertext: ChaCha20-Poly1305 output (plaintext + 16-byte tag)
    - encapsulated_key: sender's ephemeral P-256 public key (uncompressed point)

The recipient private key is the one generated for this export call
(see signing/keys.py generate_keypair).
"""

import base64
import binascii
import logging
from typing import Any, Mapping, Tuple, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.asymmetric import ec

from privy_wallet.core.hpke.context import setup_base_r, setup_base_s
from privy_wallet.core.hpke.suite import N_T
from privy_wallet.core.signing.keys import base64_to_public_key
from privy_wallet.errors import HpkeDecryptionError, HpkeError, HpkeInputError

logger = logging.getLogger(__name__)

BytesLike = Union[str, bytes]


def _to_bytes(value: BytesLike, field: str) -> bytes:
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode("utf-8")
    raise HpkeInputError(f"Invalid {field}: expected str or bytes, got {type(value).__name__}")


def _b64decode(value: Any, field: str) -> bytes:
    if not isinstance(value, (str, bytes)):
        raise HpkeInputError(f"Invalid {field}: expected a base64 string, got {type(value).__name__}")
    # Line-wrapped base64 is accepted; anything else outside the alphabet is not.
    empty = "" if isinstance(value, str) else b""
    value = empty.join(value.split())
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise HpkeInputError(f"Invalid {field}: malformed base64 ({e})") from e


def _check_private_key(private_key: Any) -> ec.EllipticCurvePrivateKey:
    if not isinstance(private_key, ec.EllipticCurvePrivateKey) or not isinstance(
        private_key.curve, ec.SECP256R1
    ):
        raise HpkeInputError(
            f"Recipient private key must be a P-256 EC private key, got {type(private_key).__name__}"
        )
    return private_key


def decrypt(
    ciphertext: str,
    encapsulated_key: str,
    private_key: ec.EllipticCurvePrivateKey,
    info: BytesLike = "",
    aad: BytesLike = "",
) -> bytes:
    """
    Decrypt an HPKE-encrypted payload.

    Args:
        ciphertext: Base64-encoded ciphertext
        encapsulated_key: Base64-encoded encapsulated key from the sender
        private_key: Recipient P-256 private key
        info: Application-specific context (empty for wallet export)
        aad: Additional authenticated data (empty for wallet export)

    Returns:
        Plaintext bytes (for wallet export: the wallet private key)

    Raises:
        HpkeInputError: Malformed base64, short ciphertext or wrong key type
        HpkeDecryptionError: Decapsulation or authentication failed

    Example:
        >>> keys = generate_keypair()
        >>> # ... export_raw(wallet_id, recipient_public_key=keys.public_key)
        >>> decrypt(data["ciphertext"], data["encapsulated_key"], keys.private_key)
    """
    ciphertext_bytes = _b64decode(ciphertext, "ciphertext")
    encapsulated_key_bytes = _b64decode(encapsulated_key, "encapsulated_key")
    private_key = _check_private_key(private_key)

    if len(ciphertext_bytes) < N_T:
        raise HpkeInputError(
            f"Invalid ciphertext: {len(ciphertext_bytes)} bytes is shorter than the {N_T}-byte tag"
        )

    try:
        context = setup_base_r(encapsulated_key_bytes, private_key, _to_bytes(info, "info"))
    except ValueError as e:
        raise HpkeDecryptionError(f"Failed to decrypt response: invalid encapsulated key ({e})") from e

    try:
        return context.open(_to_bytes(aad, "aad"), ciphertext_bytes)
    except InvalidTag as e:
        raise HpkeDecryptionError("Failed to decrypt response: authentication tag mismatch") from e


def encrypt(
    plaintext: bytes,
    recipient_public_key: Union[str, ec.EllipticCurvePublicKey],
    info: BytesLike = "",
    aad: BytesLike = "",
) -> Tuple[str, str]:
    """
    Encrypt to a recipient public key (the server side of an export).

    Args:
        plaintext: Bytes to encrypt
        recipient_public_key: Base64 SPKI string or P-256 public key object

    Returns:
        Tuple of (ciphertext_b64, encapsulated_key_b64)

    Raises:
        HpkeInputError: If the public key is invalid
    """
    if isinstance(recipient_public_key, str):
        try:
            recipient_public_key = base64_to_public_key(recipient_public_key)
        except ValueError as e:
            raise HpkeInputError(str(e)) from e

    enc, context = setup_base_s(recipient_public_key, _to_bytes(info, "info"))
    ciphertext = context.seal(_to_bytes(aad, "aad"), plaintext)
    return (
        base64.b64encode(ciphertext).decode("ascii"),
        base64.b64encode(enc).decode("ascii"),
    )


def decrypt_export_response(data: Mapping[str, Any], private_key: ec.EllipticCurvePrivateKey) -> bytes:
    """
    Decrypt the body of a successful wallet export response.

    Raises:
        HpkeInputError: If ciphertext or encapsulated_key is missing
        HpkeError: If decryption fails
    """
    if not isinstance(data, Mapping):
        raise HpkeInputError("Invalid export response: expected a JSON object")

    ciphertext = data.get("ciphertext")
    encapsulated_key = data.get("encapsulated_key")
    if not ciphertext or not encapsulated_key:
        raise HpkeInputError("Invalid export response: missing ciphertext or encapsulated_key")

    encryption_type = data.get("encryption_type")
    if encryption_type and encryption_type != "HPKE":
        raise HpkeInputError(f"Invalid export response: unsupported encryption_type {encryption_type!r}")

    try:
        return decrypt(ciphertext, encapsulated_key, private_key)
    except HpkeError as e:
        logger.error(f"Wallet export decryption failed: {e}")
        raise
