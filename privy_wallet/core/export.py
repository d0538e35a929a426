"""
Wallet Export

Exports a wallet private key end to end:
    1. resolve the signing context (explicit, else the client default)
    2. generate an ephemeral P-256 key pair for this call only
    3. POST wallets/<id>/export with the ephemeral public key, signed
    4. on error, raise the transport's error without decrypting
    5. decrypt ciphertext/encapsulated_key with the ephemeral private key

Key pairs are never cached, so concurrent exports need no locking.
"""

import logging
from typing import Callable, Optional

from privy_wallet.core.hpke.decrypt import decrypt_export_response
from privy_wallet.core.signing.context import AuthorizationContext
from privy_wallet.core.signing.keys import EphemeralKeyPair, generate_keypair

logger = logging.getLogger(__name__)

ENCRYPTION_TYPE_HPKE = "HPKE"


class WalletExporter:
    """
    Runs the export flow against a transport.

    Args:
        client: Object exposing request(method, endpoint, payload, ...) and
            default_authorization_context (normally PrivyAPIClient)
        key_factory: Ephemeral key pair generator
    """

    def __init__(self, client, key_factory: Callable[[], EphemeralKeyPair] = generate_keypair):
        self.client = client
        self.key_factory = key_factory

    def resolve_context(
        self, authorization_context: Optional[AuthorizationContext] = None
    ) -> Optional[AuthorizationContext]:
        if authorization_context is not None:
            return authorization_context
        return getattr(self.client, "default_authorization_context", None)

    def export_raw(
        self,
        wallet_id: str,
        recipient_public_key: str,
        encryption_type: str = ENCRYPTION_TYPE_HPKE,
        authorization_signature: Optional[str] = None,
        authorization_context: Optional[AuthorizationContext] = None,
    ):
        """
        Request an encrypted export without decrypting it.

        Returns:
            Response from the transport (check .success)
        """
        payload = {
            "encryption_type": encryption_type,
            "recipient_public_key": recipient_public_key,
        }
        return self.client.request(
            "POST",
            f"wallets/{wallet_id}/export",
            payload,
            authorization_signature=authorization_signature,
            authorization_context=self.resolve_context(authorization_context),
        )

    def export(
        self,
        wallet_id: str,
        authorization_context: Optional[AuthorizationContext] = None,
        authorization_signature: Optional[str] = None,
    ) -> bytes:
        """
        Export and decrypt a wallet private key.

        Returns:
            Decrypted private key bytes

        Raises:
            ApiError: The transport's error for non-2xx responses
            AuthorizationError: If the request cannot be signed
            HpkeError: If key generation or decryption fails
        """
        context = self.resolve_context(authorization_context)
        if authorization_signature is None and (context is None or not context.can_sign):
            logger.warning(f"Exporting wallet {wallet_id} without an authorization signature")

        keys = self.key_factory()
        response = self.export_raw(
            wallet_id,
            recipient_public_key=keys.public_key,
            authorization_signature=authorization_signature,
            authorization_context=context,
        )
        response.raise_for_error()

        plaintext = decrypt_export_response(response.data, keys.private_key)
        logger.info(f"Exported wallet {wallet_id}")
        return plaintext
