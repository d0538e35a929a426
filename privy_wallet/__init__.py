"""
privy_wallet

Python client for the Privy wallet API with automatic request signing
(ECDSA P-256 over canonical JSON) and HPKE wallet export.

Example:
    >>> from privy_wallet import PrivyAPIClient
    >>> client = PrivyAPIClient(app_id="...", app_secret="...")
    >>> private_key = client.wallets.export("wallet-id")
"""

from privy_wallet.api_client import PrivyAPIClient, Response
from privy_wallet.config import Settings, get_settings
from privy_wallet.core.export import WalletExporter
from privy_wallet.core.hpke import decrypt, decrypt_export_response, encrypt
from privy_wallet.core.signing import (
    AuthorizationContext,
    AuthorizationContextBuilder,
    EphemeralKeyPair,
    canonicalize,
    generate_authorization_key,
    generate_keypair,
)
from privy_wallet.errors import (
    APIConnectionError,
    ApiError,
    AuthenticationError,
    AuthorizationError,
    BadRequestError,
    EncodingError,
    ForbiddenError,
    HpkeDecryptionError,
    HpkeError,
    HpkeInputError,
    NotFoundError,
    PrivyError,
    RateLimitError,
    ServerError,
    ServiceUnavailableError,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "PrivyAPIClient",
    "Response",
    "Settings",
    "get_settings",
    "WalletExporter",
    # Crypto
    "AuthorizationContext",
    "AuthorizationContextBuilder",
    "EphemeralKeyPair",
    "canonicalize",
    "generate_authorization_key",
    "generate_keypair",
    "decrypt",
    "decrypt_export_response",
    "encrypt",
    # Errors
    "PrivyError",
    "EncodingError",
    "AuthorizationError",
    "HpkeError",
    "HpkeInputError",
    "HpkeDecryptionError",
    "ApiError",
    "APIConnectionError",
    "BadRequestError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "RateLimitError",
    "ServerError",
    "ServiceUnavailableError",
]
