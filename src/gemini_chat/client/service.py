"""
HTTP service for the Gemini API

Sends built requests with httpx and turns HTTP-level outcomes into decoded
responses or low-level errors (`TransportError`, `RPCError`,
`ResponseDecodingError`). Classification into the public taxonomy happens in
the error handler, not here.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import aclosing
import logging
from typing import TYPE_CHECKING, Any

import httpx

from .._version import __version__
from ..constants import API_CLIENT_HEADER, API_CLIENT_NAME, API_KEY_HEADER
from ..core.codec import decode_json, decode_rpc_error, encode_body, response_from_wire, rpc_error_from_wire
from ..exceptions import ResponseDecodingError, TransportError, ValidationError
from .sse import iter_sse_data

if TYPE_CHECKING:
    from ..core.types import GenerateContentResponse
    from .request_builder import CountTokensRequest, GenerateContentRequest

log = logging.getLogger(__name__)


class GenerativeAIService:
    """Sends requests to the backend over a shared `httpx.AsyncClient`.

    A client passed in by the caller is used as-is and left open by `aclose()`.
    """

    def __init__(self, api_key: str, *, http_client: httpx.AsyncClient | None = None):
        if not api_key:
            raise ValidationError("API key required.")
        self._api_key = api_key
        self._owns_client = http_client is None
        self._client = http_client if http_client is not None else httpx.AsyncClient()

    @property
    def http_client(self) -> httpx.AsyncClient:
        return self._client

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        return {
            API_KEY_HEADER: self._api_key,
            API_CLIENT_HEADER: f"{API_CLIENT_NAME}/{__version__}",
            "Content-Type": "application/json",
        }

    def _build_http_request(
        self, request: GenerateContentRequest | CountTokensRequest
    ) -> httpx.Request:
        body = encode_body(request.body())
        log.debug("Sending request: POST %s", request.url)
        log.debug("Request body: %s", body.decode("utf-8"))
        return self._client.build_request(
            "POST",
            request.url,
            params=request.params,
            headers=self._headers(),
            content=body,
            timeout=request.options.timeout,
        )

    @staticmethod
    def _transport_error(error: httpx.HTTPError, timeout: float) -> TransportError:
        if isinstance(error, httpx.TimeoutException):
            log.error("Request timed out after %ss: %s", timeout, error)
            return TransportError(f"Request timed out after {timeout}s: {error}")
        log.error("Request failed: %s", error)
        return TransportError(f"Request failed: {error}")

    @staticmethod
    def _parse_error(status_code: int, data: bytes) -> Exception:
        """Decode an error body into an `RPCError`, or return the decoding error."""
        log.error("The server responded with an error: HTTP %d", status_code)
        try:
            return decode_rpc_error(data, http_status=status_code)
        except ResponseDecodingError as e:
            log.debug("Unrecognized error payload: %r", data[:2048])
            return e

    async def load_request(self, request: GenerateContentRequest | CountTokensRequest) -> Any:
        """Send a unary request and return its decoded response."""
        http_request = self._build_http_request(request)
        try:
            response = await self._client.send(http_request)
        except httpx.HTTPError as e:
            raise self._transport_error(e, request.options.timeout) from e

        if not response.is_success:
            raise self._parse_error(response.status_code, response.content)

        try:
            return request.decode(response.content)
        except ResponseDecodingError:
            log.error("Error decoding server JSON: %s", response.text[:2048])
            raise

    async def load_request_stream(
        self, request: GenerateContentRequest
    ) -> AsyncIterator[GenerateContentResponse]:
        """Send a streaming request and yield each decoded chunk.

        The HTTP response is closed when the generator completes, fails or is
        closed by the consumer.
        """
        http_request = self._build_http_request(request)
        try:
            response = await self._client.send(http_request, stream=True)
        except httpx.HTTPError as e:
            raise self._transport_error(e, request.options.timeout) from e

        try:
            if not response.is_success:
                try:
                    data = await response.aread()
                except httpx.HTTPError as e:
                    raise self._transport_error(e, request.options.timeout) from e
                raise self._parse_error(response.status_code, data)

            try:
                async with aclosing(iter_sse_data(response.aiter_lines())) as events:
                    async for payload in events:
                        wire = decode_json(payload, status_code=response.status_code)
                        error = rpc_error_from_wire(wire, http_status=response.status_code)
                        if error is not None:
                            log.error("Stream returned an error payload: %r", error)
                            raise error
                        chunk = response_from_wire(wire)
                        log.debug("Stream chunk: %s", payload)
                        yield chunk
            except httpx.HTTPError as e:
                raise self._transport_error(e, request.options.timeout) from e
        finally:
            await response.aclose()
