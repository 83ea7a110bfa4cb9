"""Single-attempt HTTP transport for OpenAI-compatible chat APIs.

Transport.post() performs exactly one POST. It never retries; it only turns
timeouts, connection failures and non-2xx responses into ClientError values
from the error taxonomy.
"""

import asyncio
from typing import Any, Dict, Optional

import httpx

from openrouter_client.errors import NetworkError, ResponseError, error_from_response
from openrouter_client.telemetry import logger, sanitize_for_logging


class Transport:
    """Authenticated JSON POST with a hard per-attempt deadline."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float,
        app_url: Optional[str] = None,
        app_title: Optional[str] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.app_url = app_url
        self.app_title = app_title
        # Injected in tests (httpx.MockTransport); None means real network I/O.
        self._http_transport = http_transport

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": "Bearer {}".format(self._api_key),
            "Content-Type": "application/json",
        }
        if self.app_url:
            headers["HTTP-Referer"] = self.app_url
        if self.app_title:
            headers["X-Title"] = self.app_title
        return headers

    async def post(self, path: str, payload: Dict[str, Any]) -> Any:
        """Send one POST request and return the decoded JSON body.

        Args:
            path: Endpoint path appended to the base URL (e.g. "/chat/completions").
            payload: JSON-serializable request body.

        Returns:
            The decoded JSON body of a 2xx response.

        Raises:
            NetworkError: On timeout or connection-level failure.
            ResponseError: If the body cannot be decoded or a 2xx body is not JSON.
            ClientError: The classified error for any non-2xx status.
        """
        url = "{}{}".format(self.base_url, path)
        logger.debug(
            "Sending request to %s (timeout=%ss, has_api_key=%s, payload=%s)",
            url,
            self.timeout,
            bool(self._api_key),
            sanitize_for_logging(payload),
        )

        try:
            resp = await asyncio.wait_for(
                self._send(url, payload), timeout=self.timeout
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.debug("Request to %s timed out after %ss", url, self.timeout)
            raise NetworkError(
                "Request timeout after {}s".format(self.timeout), cause=exc
            ) from exc
        except httpx.DecodingError as exc:
            logger.debug("Undecodable response body from %s", url)
            raise ResponseError(
                "Invalid response: body could not be decoded ({})".format(exc)
            ) from exc
        except httpx.RequestError as exc:
            # TransportError plus TooManyRedirects and friends
            logger.debug("Network error calling %s: %s", url, type(exc).__name__)
            raise NetworkError(
                "Network request failed. Please check your connection.", cause=exc
            ) from exc

        if not resp.is_success:
            try:
                body = resp.json()
            except ValueError:
                body = {}
            logger.debug("Provider returned HTTP %d", resp.status_code)
            raise error_from_response(resp.status_code, body)

        try:
            return resp.json()
        except ValueError as exc:
            raise ResponseError(
                "Invalid response: body is not valid JSON", raw_response=resp.text
            ) from exc

    async def _send(self, url: str, payload: Dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._http_transport
        ) as client:
            return await client.post(url, json=payload, headers=self._headers())
