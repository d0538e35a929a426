"""
Error Types

Every failure raised by privy_wallet derives from PrivyError, so callers can
tell "could not produce a signature" (AuthorizationError), "could not reach
or parse the remote response" (ApiError and subclasses) and "could not
decrypt" (HpkeError) apart.
"""

from typing import Any, Optional


class PrivyError(Exception):
    """Base class for all privy_wallet errors."""
    pass


class EncodingError(PrivyError, ValueError):
    """Raised when a value cannot be canonicalized to JSON."""
    pass


class AuthorizationError(PrivyError):
    """Raised when an authorization key cannot be parsed or used for signing."""
    pass


class HpkeError(PrivyError):
    """Raised when HPKE key generation or decryption fails."""
    pass


class HpkeInputError(HpkeError):
    """Malformed HPKE input: bad base64, wrong key type, incomplete response."""
    pass


class HpkeDecryptionError(HpkeError):
    """Decapsulation or AEAD authentication failed."""
    pass


class ApiError(PrivyError):
    """
    Error returned by the remote API.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code (None for connection-level failures)
        body: Decoded response body, if any
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code!r}, message={self.message!r})"


class BadRequestError(ApiError):
    """400"""
    pass


class AuthenticationError(ApiError):
    """401 - invalid app credentials"""
    pass


class ForbiddenError(ApiError):
    """403"""
    pass


class NotFoundError(ApiError):
    """404"""
    pass


class RateLimitError(ApiError):
    """429"""
    pass


class ServerError(ApiError):
    """500 and other unexpected 5xx"""
    pass


class ServiceUnavailableError(ApiError):
    """503"""
    pass


class APIConnectionError(ApiError):
    """The request never produced an HTTP response (timeout, DNS, refused connection)."""
    pass
