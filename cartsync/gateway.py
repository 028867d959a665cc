"""
Remote Gateway - HTTP transport to the storefront API

Features:
- Single httpx.AsyncClient per gateway
- Custom `token` auth header (the API does not use Authorization: Bearer)
- At most one retry on reads (GET), never on writes
- Failures translated into GatewayError with a user-facing message
"""

from typing import Any, Callable, Optional

import httpx
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from cartsync.config import Settings, get_settings
from cartsync.errors import (
    ERROR_ACCESS_DENIED,
    ERROR_AUTH_REQUIRED,
    ERROR_INVALID_RESPONSE,
    ERROR_NETWORK,
    ERROR_SERVER,
    ERROR_UNKNOWN,
    GatewayError,
)
from cartsync.logging import get_logger

logger = get_logger(__name__)

TOKEN_HEADER = "token"


def _message_for_response(response: httpx.Response) -> str:
    """Pick the message shown to the user for a failed response."""
    status = response.status_code
    if status == 401:
        return ERROR_AUTH_REQUIRED
    if status == 403:
        return ERROR_ACCESS_DENIED
    if status >= 500:
        return ERROR_SERVER

    # API error body: {"statusMsg": "fail", "message": "..."}
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    if response.text:
        return response.text[:200]
    return ERROR_UNKNOWN


def _is_retryable(error: BaseException) -> bool:
    """Transport failures and 5xx are worth one more try; 4xx are not."""
    return isinstance(error, GatewayError) and (error.status_code == 0 or error.status_code >= 500)


class RemoteGateway:
    """
    Performs requests against the remote collection endpoints.

    Usage:
        gateway = RemoteGateway.from_settings(token_provider=lambda: session.token)
        data = await gateway.get("/cart")
        await gateway.aclose()
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Callable[[], Optional[str]],
        timeout: float = 30.0,
        read_timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._token_provider = token_provider
        self._timeout = timeout
        self._read_timeout = read_timeout
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    @classmethod
    def from_settings(
        cls,
        token_provider: Callable[[], Optional[str]],
        settings: Optional[Settings] = None,
    ) -> "RemoteGateway":
        settings = settings or get_settings()
        return cls(
            settings.api_url,
            token_provider,
            timeout=settings.request_timeout,
            read_timeout=settings.read_timeout,
        )

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        token = self._token_provider()
        if token:
            headers[TOKEN_HEADER] = token
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        payload: Optional[dict] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        try:
            response = await self._client.request(
                method,
                path,
                json=payload,
                headers=self._headers(),
                timeout=timeout or self._timeout,
            )
        except httpx.TimeoutException as e:
            logger.warning("%s %s timed out: %s", method, path, e)
            raise GatewayError(ERROR_NETWORK) from e
        except httpx.TransportError as e:
            logger.warning("%s %s failed: %s", method, path, type(e).__name__)
            raise GatewayError(ERROR_NETWORK) from e

        if response.is_error:
            message = _message_for_response(response)
            logger.warning("%s %s -> %s: %s", method, path, response.status_code, message)
            raise GatewayError(message, response.status_code)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise GatewayError(ERROR_INVALID_RESPONSE, response.status_code) from e

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=0.1, max=1),
        retry=retry_if_exception(_is_retryable),
        reraise=True,
    )
    async def get(self, path: str) -> Any:
        """GET with one retry on transport/server failures."""
        return await self._request("GET", path, timeout=self._read_timeout)

    async def post(self, path: str, payload: dict) -> Any:
        return await self._request("POST", path, payload)

    async def put(self, path: str, payload: dict) -> Any:
        return await self._request("PUT", path, payload)

    async def delete(self, path: str) -> Any:
        return await self._request("DELETE", path)

    async def aclose(self) -> None:
        await self._client.aclose()
