"""
HPKE Encryption Contexts

RFC 9180 base-mode setup for both directions. A context owns the AEAD key,
the base nonce and a sequence number that advances with every message.
Contexts are not thread-safe; create one per message stream.
"""

from typing import Tuple

from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from privy_wallet.core.hpke.suite import (
    HPKE_SUITE_ID,
    MODE_BASE,
    N_N,
    decap,
    encap,
    i2osp,
    key_schedule,
    labeled_expand,
)
from privy_wallet.errors import HpkeError


class MessageLimitReachedError(HpkeError):
    """The sequence number would overflow the nonce."""
    pass


class _Context:
    def __init__(self, key: bytes, base_nonce: bytes, exporter_secret: bytes):
        self._aead = ChaCha20Poly1305(key)
        self._base_nonce = base_nonce
        self._exporter_secret = exporter_secret
        self.seq = 0

    def _compute_nonce(self) -> bytes:
        seq_bytes = i2osp(self.seq, N_N)
        return bytes(a ^ b for a, b in zip(self._base_nonce, seq_bytes))

    def _increment_seq(self) -> None:
        if self.seq >= (1 << (8 * N_N)) - 1:
            raise MessageLimitReachedError("HPKE sequence number exhausted")
        self.seq += 1

    def export(self, exporter_context: bytes, length: int) -> bytes:
        """Derive a secret from the context (RFC 9180 section 5.3)."""
        return labeled_expand(self._exporter_secret, b"sec", exporter_context, length, HPKE_SUITE_ID)


class SenderContext(_Context):
    def seal(self, aad: bytes, plaintext: bytes) -> bytes:
        ciphertext = self._aead.encrypt(self._compute_nonce(), plaintext, aad)
        self._increment_seq()
        return ciphertext


class ReceiverContext(_Context):
    def open(self, aad: bytes, ciphertext: bytes) -> bytes:
        """
        Raises:
            cryptography.exceptions.InvalidTag: If authentication fails.
                The sequence number is not advanced in that case.
        """
        plaintext = self._aead.decrypt(self._compute_nonce(), ciphertext, aad)
        self._increment_seq()
        return plaintext


def setup_base_s(pk_r: ec.EllipticCurvePublicKey, info: bytes = b"") -> Tuple[bytes, SenderContext]:
    """
    Set up a sender context for a recipient public key.

    Returns:
        Tuple of (enc, context); enc must be transmitted with the ciphertext
    """
    shared_secret, enc = encap(pk_r)
    return enc, SenderContext(*key_schedule(MODE_BASE, shared_secret, info))


def setup_base_r(enc: bytes, sk_r: ec.EllipticCurvePrivateKey, info: bytes = b"") -> ReceiverContext:
    """
    Set up a receiver context from the sender's encapsulated key.

    Raises:
        ValueError: If enc is not a valid P-256 point
    """
    shared_secret = decap(enc, sk_r)
    return ReceiverContext(*key_schedule(MODE_BASE, shared_secret, info))
