"""
HPKE Module

RFC 9180 base mode with DHKEM(P-256, HKDF-SHA256), HKDF-SHA256 and
ChaCha20-Poly1305, the fixed suite used by the wallet export API.
"""

from privy_wallet.core.hpke.context import (
    MessageLimitReachedError,
    ReceiverContext,
    SenderContext,
    setup_base_r,
    setup_base_s,
)
from privy_wallet.core.hpke.decrypt import (
    decrypt,
    decrypt_export_response,
    encrypt,
)
from privy_wallet.core.hpke.suite import AEAD_ID, KDF_ID, KEM_ID

__all__ = [
    # Suite
    "KEM_ID",
    "KDF_ID",
    "AEAD_ID",
    # Contexts
    "ReceiverContext",
    "SenderContext",
    "MessageLimitReachedError",
    "setup_base_r",
    "setup_base_s",
    # Export helpers
    "decrypt",
    "decrypt_export_response",
    "encrypt",
]
