"""Remote API client for the business-management REST API.

Every request carries JSON headers, a fresh X-Request-ID and, when the session
holds one, a bearer token. Every response is normalised: 2xx bodies are
validated into ``Envelope[model]``, anything else becomes a typed error from
:mod:`nexen_client.errors`. This layer never retries.

SECURITY: Never logs the bearer token or request bodies.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import ValidationError

from nexen_client.errors import (
    ResponseDecodeError,
    ServerRejectedError,
    TransportError,
    error_for_status,
)
from nexen_client.models.responses import Envelope
from nexen_client.session import SessionStore

logger = logging.getLogger(__name__)


class ApiClient:
    """Async HTTP client that speaks the envelope protocol.

    Parameters
    ----------
    base_url:
        Base URL for the API (e.g. "https://erp.example.com/api").
    session:
        Session store supplying the bearer token; a 401 clears it.
    timeout_seconds:
        HTTP timeout per request (default 30).
    transport:
        Optional httpx transport, used by tests to route requests to an
        in-process application or a mock handler.
    """

    def __init__(
        self,
        base_url: str,
        session: SessionStore | None = None,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session if session is not None else SessionStore()
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout_seconds,
            transport=transport,
            headers={"Accept": "application/json", "Content-Type": "application/json"},
        )

    @property
    def session(self) -> SessionStore:
        return self._session

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Mapping[str, Any] | None = None,
        model: Any = Any,
    ) -> Envelope:
        """Perform one request and return the decoded envelope.

        Raises
        ------
        TransportError
            If the server could not be reached or the request timed out.
        ServerRejectedError
            On any non-2xx status (a subclass keyed on the status code), or
            ``ResponseDecodeError`` when a 2xx body is not a valid envelope.
        """
        method = method.upper()
        request_id = str(uuid.uuid4())
        headers = {"X-Request-ID": request_id}
        if self._session.token:
            headers["Authorization"] = f"Bearer {self._session.token}"
        query = {k: v for k, v in (params or {}).items() if v is not None} or None

        start = time.monotonic()
        try:
            response = await self._client.request(
                method, path, json=json, params=query, headers=headers
            )
        except httpx.TransportError as exc:
            logger.warning(
                "%s %s failed: %s",
                method,
                path,
                type(exc).__name__,
                extra={
                    "request_id": request_id,
                    "method": method,
                    "path": path,
                    "error_reason": type(exc).__name__,
                },
            )
            raise TransportError(method=method, path=path) from exc

        duration_ms = round((time.monotonic() - start) * 1000, 1)
        logger.info(
            "%s %s -> %d",
            method,
            path,
            response.status_code,
            extra={
                "request_id": request_id,
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        if response.is_success:
            return self._decode(response, model)
        raise self._rejection(response)

    async def get(self, path: str, **kwargs: Any) -> Envelope:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Envelope:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Envelope:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> Envelope:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Envelope:
        return await self.request("DELETE", path, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Response normalisation
    # ------------------------------------------------------------------

    @staticmethod
    def _decode(response: httpx.Response, model: Any) -> Envelope:
        if response.status_code == 204 or not response.content:
            return Envelope[model](success=True)
        try:
            body = response.json()
        except ValueError as exc:
            raise ResponseDecodeError(
                "Response body is not valid JSON", path=response.request.url.path
            ) from exc
        if not isinstance(body, dict):
            raise ResponseDecodeError(
                "Response body is not an envelope object", path=response.request.url.path
            )
        try:
            return Envelope[model].model_validate(body)
        except ValidationError as exc:
            raise ResponseDecodeError(
                f"Response envelope failed validation: {exc.error_count()} error(s)",
                path=response.request.url.path,
            ) from exc

    def _rejection(self, response: httpx.Response) -> ServerRejectedError:
        message: str | None = None
        field_errors: dict[str, list[str]] | None = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            if isinstance(body.get("message"), str) and body["message"]:
                message = body["message"]
            field_errors = _field_errors(body.get("errors"))

        if response.status_code == 401:
            logger.warning("Session rejected by server; clearing stored token")
            self._session.clear()

        return error_for_status(response.status_code, message, field_errors)


def _field_errors(raw: Any) -> dict[str, list[str]] | None:
    if not isinstance(raw, dict):
        return None
    return {
        str(field): [str(m) for m in messages] if isinstance(messages, list) else [str(messages)]
        for field, messages in raw.items()
    }
