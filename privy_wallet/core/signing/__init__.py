"""
Request Signing Module

ECDSA P-256 request signing over canonical JSON payloads.
Supports local authorization keys and precomputed signatures.
"""

from privy_wallet.core.signing.canonical import (
    canonicalize,
    canonicalize_str,
)
from privy_wallet.core.signing.context import (
    AuthorizationContext,
    AuthorizationContextBuilder,
    build_signature_payload,
    format_request_for_signing,
)
from privy_wallet.core.signing.keys import (
    AUTHORIZATION_KEY_PREFIX,
    EphemeralKeyPair,
    base64_to_public_key,
    generate_authorization_key,
    generate_keypair,
    load_authorization_key,
    public_key_to_base64,
)
from privy_wallet.core.signing.signer import sign, verify

__all__ = [
    # Canonicalization
    "canonicalize",
    "canonicalize_str",
    # Keys
    "AUTHORIZATION_KEY_PREFIX",
    "EphemeralKeyPair",
    "base64_to_public_key",
    "generate_authorization_key",
    "generate_keypair",
    "load_authorization_key",
    "public_key_to_base64",
    # Signing
    "sign",
    "verify",
    "AuthorizationContext",
    "AuthorizationContextBuilder",
    "build_signature_payload",
    "format_request_for_signing",
]
