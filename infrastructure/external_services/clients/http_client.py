import json
from typing import Any, Dict, Optional

import httpx

from app.config import settings
from infrastructure.utils.logging_config import logger
from .base_client import BaseClient, ExternalServiceError

# --- Shared HTTPX Client ---
_shared_http_client: Optional[httpx.AsyncClient] = None


async def get_shared_http_client() -> httpx.AsyncClient:
    """Gets or initializes a shared httpx.AsyncClient instance."""
    global _shared_http_client
    if _shared_http_client is None:
        timeout = httpx.Timeout(settings.HTTP_CLIENT_TIMEOUT, connect=5.0)
        limits = httpx.Limits(max_keepalive_connections=20, max_connections=100)
        _shared_http_client = httpx.AsyncClient(timeout=timeout, limits=limits, http2=True, follow_redirects=True)
        logger.info("Initialized shared httpx.AsyncClient.")
    return _shared_http_client


async def close_shared_http_client():
    """Closes the shared httpx.AsyncClient."""
    global _shared_http_client
    if _shared_http_client:
        logger.info("Closing shared httpx.AsyncClient...")
        await _shared_http_client.aclose()
        _shared_http_client = None


class HTTPClient(BaseClient):
    """
    Generic JSON-over-HTTP client.

    Uses the process-wide shared ``httpx.AsyncClient`` unless one is passed in
    (tests inject a client backed by ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        service_name: str = "HTTP Service",
        default_headers: Optional[Dict[str, str]] = None,
        default_timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if not base_url:
            raise ValueError("Base URL must be provided for HTTPClient")
        self.base_url = base_url.rstrip('/')
        self.service_name = service_name
        self.default_headers = default_headers or {}
        self.default_timeout = default_timeout
        self._client = client
        logger.debug(f"Initialized HTTPClient wrapper for {self.service_name} at {self.base_url}")

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None:
            return self._client
        return await get_shared_http_client()

    async def call(
        self,
        method: str,
        endpoint: str,
        data: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None
    ) -> Any:
        request_url = f"{self.base_url}{endpoint}"
        final_headers = self.default_headers.copy()
        if headers:
            final_headers.update(headers)

        payload_kwarg: Dict[str, Any] = {}
        if isinstance(data, dict):
            payload_kwarg['json'] = data
        elif data is not None:
            payload_kwarg['content'] = data

        request_kwargs: Dict[str, Any] = {}
        call_timeout = timeout if timeout is not None else self.default_timeout
        if call_timeout is not None:
            request_kwargs['timeout'] = call_timeout

        log_extra = {
            "service": self.service_name,
            "method": method.upper(),
            "url": request_url,
            "params": params or {},
        }
        logger.debug("Making HTTP request", extra=log_extra)

        try:
            client = await self._get_client()
            response = await client.request(
                method=method.upper(),
                url=request_url,
                params=params,
                headers=final_headers,
                **request_kwargs,
                **payload_kwarg
            )
            logger.debug("HTTP response received", extra={**log_extra, "status_code": response.status_code})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(f"HTTP error calling {self.service_name}: {e.response.status_code}", extra=log_extra)
            raise ExternalServiceError(
                message=f"HTTP Error: {e.response.status_code}", service_name=self.service_name,
                status_code=e.response.status_code, original_exception=e
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Request Error: {type(e).__name__} calling {request_url}", extra=log_extra)
            raise ExternalServiceError(
                message=f"Request Error: {type(e).__name__}", service_name=self.service_name,
                original_exception=e
            ) from e

        if response.status_code == 204:
            return None
        try:
            return response.json()
        except json.JSONDecodeError as e:
            logger.warning(f"Non-JSON response from {self.service_name}: {response.status_code}", extra=log_extra)
            raise ExternalServiceError(
                message="Invalid JSON response", service_name=self.service_name,
                status_code=response.status_code, original_exception=e
            ) from e

    async def get(self, endpoint: str, params: Optional[Dict] = None, headers: Optional[Dict] = None, timeout: Optional[float] = None) -> Any:
        return await self.call("GET", endpoint, params=params, headers=headers, timeout=timeout)

    async def post(self, endpoint: str, data: Any, headers: Optional[Dict] = None, timeout: Optional[float] = None) -> Any:
        return await self.call("POST", endpoint, data=data, headers=headers, timeout=timeout)

    async def delete(self, endpoint: str, headers: Optional[Dict] = None, timeout: Optional[float] = None) -> Any:
        return await self.call("DELETE", endpoint, headers=headers, timeout=timeout)

    async def close(self):
        # The shared client is closed at application shutdown; an injected one belongs to the caller.
        logger.debug(f"Close called on HTTPClient wrapper for {self.service_name}")
