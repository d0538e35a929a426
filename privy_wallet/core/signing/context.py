"""
Authorization Context

Holds the authorization keys and/or precomputed signatures used to sign
requests that modify wallets (export, update, ...).

Signed payload (canonicalized, see canonical.py):
    {
        "body": <request body>,
        "headers": {"privy-app-id": <app id>},
        "method": <UPPERCASE verb>,
        "url": <full request URL>,
        "version": 1
    }

Precedence:
    1. precomputed signatures (first one, returned verbatim)
    2. authorization keys (first one signs)
    3. nothing -> None

Only the first key produces a signature. Key quorums that need several
signatures must be satisfied with precomputed signatures.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from privy_wallet.core.signing.canonical import canonicalize
from privy_wallet.core.signing.signer import sign

logger = logging.getLogger(__name__)

SIGNATURE_VERSION = 1
APP_ID_HEADER = "privy-app-id"


def build_signature_payload(method: str, url: str, body: Any, app_id: str) -> Dict[str, Any]:
    """Build the payload that gets canonicalized and signed for a request."""
    return {
        "body": body,
        "headers": {APP_ID_HEADER: app_id},
        "method": str(method).upper(),
        "url": url,
        "version": SIGNATURE_VERSION,
    }


def format_request_for_signing(method: str, url: str, body: Any, app_id: str) -> bytes:
    """Canonical bytes of the signature payload."""
    return canonicalize(build_signature_payload(method, url, body, app_id))


def _as_tuple(values: Union[None, str, Iterable[str]]) -> Tuple[str, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(values)



def _check_signature(signature: str) -> str:
    if not isinstance(signature, str) or not signature.strip():
        raise ValueError("Authorization signature must be a non-empty string")
    return signature

@dataclass(frozen=True)
class AuthorizationContext:
    """
    Immutable signing configuration.

    Attributes:
        authorization_private_keys: "wallet-auth:..." keys, first one signs
        signatures: Precomputed base64 signatures, take precedence over keys

    Example:
        >>> context = AuthorizationContext(
        ...     authorization_private_keys=["wallet-auth:MIGHAgEA..."]
        ... )
        >>> context.sign_request("POST", url, body, app_id)
    """
    authorization_private_keys: Tuple[str, ...] = ()
    signatures: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "authorization_private_keys", _as_tuple(self.authorization_private_keys))
        object.__setattr__(self, "signatures", _as_tuple(self.signatures))
        for signature in self.signatures:
            _check_signature(signature)

    def __repr__(self) -> str:
        return (
            f"AuthorizationContext(keys={len(self.authorization_private_keys)}, "
            f"signatures={len(self.signatures)})"
        )

    @property
    def can_sign(self) -> bool:
        """True if at least one key or signature is available."""
        return bool(self.authorization_private_keys or self.signatures)

    def sign_request(self, method: str, url: str, body: Any, app_id: str) -> Optional[str]:
        """
        Produce the authorization signature for a request.

        Args:
            method: HTTP method (any case)
            url: Full URL of the request
            body: Request body (JSON-representable)
            app_id: Application ID sent in the privy-app-id header

        Returns:
            Base64 signature, or None if the context has nothing to sign with

        Raises:
            AuthorizationError: If the key cannot be parsed or signing fails
            EncodingError: If the body cannot be canonicalized
        """
        if self.signatures:
            return self.signatures[0]
        if not self.authorization_private_keys:
            return None

        if len(self.authorization_private_keys) > 1:
            logger.debug(
                f"{len(self.authorization_private_keys)} authorization keys configured, "
                f"signing with the first one only"
            )
        logger.debug(f"Signing {str(method).upper()} {url}")

        message = format_request_for_signing(method, url, body, app_id)
        return sign(self.authorization_private_keys[0], message)

    @classmethod
    def builder(cls) -> "AuthorizationContextBuilder":
        return AuthorizationContextBuilder()

    @classmethod
    def from_settings(cls, settings) -> Optional["AuthorizationContext"]:
        """
        Build the default context from configured keys.

        Returns:
            AuthorizationContext, or None if no key is configured
        """
        keys = settings.authorization_keys_list
        if not keys:
            return None
        return cls(authorization_private_keys=keys)


class AuthorizationContextBuilder:
    """Mutable accumulator for AuthorizationContext."""

    def __init__(self):
        self._authorization_private_keys: List[str] = []
        self._signatures: List[str] = []

    def add_authorization_private_key(self, key: str) -> "AuthorizationContextBuilder":
        self._authorization_private_keys.append(key)
        return self

    add_key = add_authorization_private_key

    def add_signature(self, signature: str) -> "AuthorizationContextBuilder":
        self._signatures.append(_check_signature(signature))
        return self

    def build(self) -> AuthorizationContext:
        return AuthorizationContext(
            authorization_private_keys=tuple(self._authorization_private_keys),
            signatures=tuple(self._signatures),
        )
