"""
API Client for the Privy Wallet API

Synchronous HTTP transport on top of httpx. Handles:
- Basic authentication with app ID / app secret
- privy-app-id header on every request
- privy-authorization-signature header for requests that modify wallets
  (computed from an AuthorizationContext or passed in precomputed)
- Mapping of HTTP error statuses to typed ApiError subclasses

Non-2xx responses are returned as a Response carrying the error; requests
that never got a response (timeout, connection refused) raise
APIConnectionError. Nothing is retried.
"""
import base64
import logging
from typing import Any, Dict, Optional

import httpx

from privy_wallet.config import Settings, get_settings
from privy_wallet.core.signing.context import APP_ID_HEADER, AuthorizationContext
from privy_wallet.errors import (
    APIConnectionError,
    ApiError,
    AuthenticationError,
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    ServiceUnavailableError,
)

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "privy-authorization-signature"
IDEMPOTENCY_HEADER = "privy-idempotency-key"
USER_AGENT = "privy-wallet-python"


class Response:
    """
    Result of an API call.

    Attributes:
        status_code: HTTP status code
        data: Decoded JSON body (None on error or empty body)
        error: ApiError for non-2xx responses, else None
        headers: Response headers
    """

    def __init__(
        self,
        status_code: int,
        data: Any = None,
        error: Optional[ApiError] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.status_code = status_code
        self.data = data
        self.error = error
        self.headers = headers or {}

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def failure(self) -> bool:
        return not self.success

    def raise_for_error(self) -> "Response":
        """Raise the stored error, if any. Returns self for chaining."""
        if self.error is not None:
            raise self.error
        return self

    def __repr__(self) -> str:
        return f"<Response status_code={self.status_code} success={self.success}>"


def extract_error_message(data: Any) -> Optional[str]:
    """Pull an error message out of a JSON error body."""
    if not isinstance(data, dict):
        return None
    message = data.get("message")
    if isinstance(message, str) and message:
        return message
    error = data.get("error")
    if isinstance(error, str) and error:
        return error
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    return None


def build_error(status: int, data: Any) -> ApiError:
    """Map an HTTP error status to a typed error."""
    msg = extract_error_message(data)

    if status == 400:
        return BadRequestError(msg or "Bad request", status, data)
    if status == 401:
        return AuthenticationError(msg or "Invalid app credentials", status, data)
    if status == 403:
        return ForbiddenError(msg or "Forbidden", status, data)
    if status == 404:
        return NotFoundError(msg or "Resource not found", status, data)
    if status == 429:
        return RateLimitError(msg or "Rate limit exceeded", status, data)
    if status == 503:
        return ServiceUnavailableError(msg or "Service temporarily unavailable", status, data)
    if status >= 500:
        return ServerError(msg or "Internal server error", status, data)
    return ApiError(msg or f"API request failed (status: {status})", status, data)


class PrivyAPIClient:
    """
    HTTP client for the Privy API.

    Credentials default to the PRIVY_* settings (see config.py). An explicit
    authorization_context becomes the default context for signed requests;
    otherwise one is built from PRIVY_AUTHORIZATION_KEY, if set.

    Example:
        >>> with PrivyAPIClient() as client:
        ...     private_key = client.wallets.export(wallet_id)
    """

    def __init__(
        self,
        app_id: Optional[str] = None,
        app_secret: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        authorization_context: Optional[AuthorizationContext] = None,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize API client.

        Args:
            app_id: Application ID (default: PRIVY_APP_ID)
            app_secret: Application secret (default: PRIVY_APP_SECRET)
            base_url: API base URL (default: PRIVY_API_URL)
            timeout: Request timeout in seconds (default: PRIVY_TIMEOUT)
            authorization_context: Default signing context for wallet operations
            settings: Settings object to read defaults from (default: get_settings())
            transport: Custom httpx transport (used by tests)

        Raises:
            ValueError: If app ID or app secret is missing
        """
        settings = settings or get_settings()

        self.app_id = app_id or settings.privy_app_id
        self._app_secret = app_secret or settings.privy_app_secret
        if not self.app_id or not self.app_id.strip():
            raise ValueError("App ID must be provided (PRIVY_APP_ID)")
        if not self._app_secret or not self._app_secret.strip():
            raise ValueError("App secret must be provided (PRIVY_APP_SECRET)")

        self.base_url = (base_url or settings.privy_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.privy_timeout

        if authorization_context is None:
            authorization_context = AuthorizationContext.from_settings(settings)
        self._default_authorization_context = authorization_context

        credentials = base64.b64encode(f"{self.app_id}:{self._app_secret}".encode("utf-8")).decode("ascii")
        self.headers = {
            "Authorization": f"Basic {credentials}",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
            APP_ID_HEADER: self.app_id,
        }

        self._http = httpx.Client(timeout=self.timeout, transport=transport)
        self._wallets = None

        logger.info(f"PrivyAPIClient initialized: {self.base_url}")
        if self._default_authorization_context is not None:
            logger.info(f"Default authorization context: {self._default_authorization_context!r}")

    def __enter__(self) -> "PrivyAPIClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    @property
    def default_authorization_context(self) -> Optional[AuthorizationContext]:
        return self._default_authorization_context

    @property
    def wallets(self):
        if self._wallets is None:
            from privy_wallet.wallets import WalletService
            self._wallets = WalletService(self)
        return self._wallets

    def url_for(self, endpoint: str) -> str:
        """Full URL for an endpoint; this is also the URL that gets signed."""
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def send(
        self,
        method: str,
        path: str,
        headers: Dict[str, str],
        json_body: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Response:
        """
        Send one HTTP request.

        Args:
            method: HTTP method
            path: Endpoint path relative to base_url
            headers: Complete request headers
            json_body: JSON body (None for no body)
            params: Query parameters

        Returns:
            Response (with error set for non-2xx statuses)

        Raises:
            APIConnectionError: On timeouts and network failures
        """
        method = method.upper()
        url = self.url_for(path)

        try:
            http_response = self._http.request(
                method,
                url,
                headers=headers,
                json=json_body,
                params=params,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Request timed out: {method} {path}")
            raise APIConnectionError(f"Request timed out: {e}") from e
        except httpx.RequestError as e:
            logger.error(f"Request error: {method} {path}: {e}")
            raise APIConnectionError(f"Request failed: {e}") from e

        return self._handle_response(method, path, http_response)

    def request(
        self,
        method: str,
        endpoint: str,
        payload: Optional[Dict[str, Any]] = None,
        idempotency_key: Optional[str] = None,
        authorization_signature: Optional[str] = None,
        authorization_context: Optional[AuthorizationContext] = None,
    ) -> Response:
        """
        Make an API request.

        GET payloads become query parameters, anything else is sent as JSON.
        A signature header is attached when authorization_signature is given
        or when authorization_context can sign.

        Raises:
            ValueError: If authorization_signature is given but empty
            AuthorizationError: If the signature cannot be produced
            APIConnectionError: On timeouts and network failures
        """
        method = method.upper()
        headers = dict(self.headers)

        if method == "GET":
            body = None
            params = payload or None
        else:
            body = payload if payload is not None else {}
            params = None
            if idempotency_key:
                headers[IDEMPOTENCY_HEADER] = idempotency_key

        if authorization_signature is not None and not str(authorization_signature).strip():
            raise ValueError("Authorization signature must not be empty")

        signature = authorization_signature
        if signature is None and authorization_context is not None and authorization_context.can_sign:
            signature = authorization_context.sign_request(
                method=method,
                url=self.url_for(endpoint),
                body=body,
                app_id=self.app_id,
            )
        if signature:
            headers[SIGNATURE_HEADER] = signature

        return self.send(method, endpoint, headers, json_body=body, params=params)

    def _handle_response(self, method: str, path: str, http_response: httpx.Response) -> Response:
        status = http_response.status_code

        try:
            data = http_response.json() if http_response.content else None
        except ValueError:
            data = None

        if 200 <= status < 300:
            logger.debug(f"{method} {path} -> {status}")
            return Response(status, data=data, headers=dict(http_response.headers))

        error = build_error(status, data if data is not None else http_response.text)
        if status == 404:
            logger.debug(f"API 404: {method} {path}")
        else:
            logger.error(f"API error {status}: {method} {path}: {error.message}")
        return Response(status, error=error, headers=dict(http_response.headers))
