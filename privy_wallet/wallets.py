"""
Wallet Service

Wallet endpoints exposed on PrivyAPIClient.wallets. Responses are returned
as-is (Response with decoded JSON data); only export() post-processes the
result by decrypting it.
"""
from typing import Any, Dict, List, Optional

from privy_wallet.core.export import ENCRYPTION_TYPE_HPKE, WalletExporter
from privy_wallet.core.signing.context import AuthorizationContext


class WalletService:
    """Wallet operations, bound to a PrivyAPIClient."""

    def __init__(self, client):
        self.client = client
        self._exporter = WalletExporter(client)

    def _context(self, authorization_context: Optional[AuthorizationContext]):
        return self._exporter.resolve_context(authorization_context)

    def create(self, idempotency_key: Optional[str] = None, **params):
        """POST wallets"""
        return self.client.request("POST", "wallets", params, idempotency_key=idempotency_key)

    def retrieve(self, wallet_id: str, params: Optional[Dict[str, Any]] = None):
        """GET wallets/<id>"""
        return self.client.request("GET", f"wallets/{wallet_id}", params)

    def list(self, params: Optional[Dict[str, Any]] = None):
        """GET wallets"""
        return self.client.request("GET", "wallets", params)

    def balance(self, wallet_id: str, params: Optional[Dict[str, Any]] = None):
        """GET wallets/<id>/balance"""
        return self.client.request("GET", f"wallets/{wallet_id}/balance", params)

    def transactions(self, wallet_id: str, params: Optional[Dict[str, Any]] = None):
        """GET wallets/<id>/transactions"""
        return self.client.request("GET", f"wallets/{wallet_id}/transactions", params)

    def create_owner(self, public_keys: List[str]):
        """
        Register authorization public keys as a key quorum (POST key_quorums).

        The returned quorum id can be set as a wallet's owner_id via update().
        Public keys are base64 SPKI, as printed by generate-authorization-key.
        """
        return self.client.request("POST", "key_quorums", {"public_keys": list(public_keys)})

    def update(
        self,
        wallet_id: str,
        authorization_signature: Optional[str] = None,
        authorization_context: Optional[AuthorizationContext] = None,
        **params,
    ):
        """PATCH wallets/<id> (signed)"""
        return self.client.request(
            "PATCH",
            f"wallets/{wallet_id}",
            params,
            authorization_signature=authorization_signature,
            authorization_context=self._context(authorization_context),
        )

    def export(
        self,
        wallet_id: str,
        authorization_signature: Optional[str] = None,
        authorization_context: Optional[AuthorizationContext] = None,
    ) -> bytes:
        """
        Export a wallet and decrypt its private key.

        Ephemeral HPKE keys are generated in memory for this call, the
        request is signed with the authorization context (or the client
        default) and the response is decrypted locally.

        Args:
            wallet_id: Wallet to export
            authorization_signature: Precomputed signature (skips local signing)
            authorization_context: Signing context (default: client default)

        Returns:
            The wallet private key as bytes (e.g. b"0xabc123...")

        Raises:
            ApiError: If the API request fails
            HpkeError: If decryption fails
        """
        return self._exporter.export(
            wallet_id,
            authorization_context=authorization_context,
            authorization_signature=authorization_signature,
        )

    def export_raw(
        self,
        wallet_id: str,
        recipient_public_key: str,
        encryption_type: str = ENCRYPTION_TYPE_HPKE,
        authorization_signature: Optional[str] = None,
        authorization_context: Optional[AuthorizationContext] = None,
    ):
        """
        Export a wallet and return the encrypted response.

        Use this to manage HPKE keys yourself; decrypt the result with
        privy_wallet.core.hpke.decrypt().
        """
        return self._exporter.export_raw(
            wallet_id,
            recipient_public_key=recipient_public_key,
            encryption_type=encryption_type,
            authorization_signature=authorization_signature,
            authorization_context=authorization_context,
        )
