"""Authenticated JSON transport for the ClickUp REST API."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import httpx

from clickup_cli.config import DEFAULT_BASE_URL

logger = logging.getLogger(__name__)

QueryParams = Sequence[tuple[str, str]]


@dataclass(slots=True)
class RemoteApiError(Exception):
    """Non-2xx response from the remote API."""

    status_code: int
    body: str
    method: str = ""
    path: str = ""

    def __str__(self) -> str:
        return f"ClickUp API error ({self.status_code}): {self.body}"


class ApiTransport:
    """httpx client wrapper issuing one request per call, without retries."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {
            "Authorization": api_key,
            "Content-Type": "application/json",
        }
        options: dict[str, Any] = {}
        if timeout_seconds is not None:
            options["timeout"] = httpx.Timeout(timeout_seconds)
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=headers,
            transport=transport or httpx.HTTPTransport(retries=0),
            **options,
        )

    def request(
        self,
        method: str,
        path: str,
        *,
        params: QueryParams | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        Raises ``RemoteApiError`` for any non-2xx status. Transport failures
        propagate as ``httpx.HTTPError``.
        """

        logger.debug("%s %s params=%s", method, path, list(params or ()))
        try:
            response = self._client.request(
                method,
                path,
                params=list(params) if params else None,
                json=body,
            )
        except httpx.HTTPError as exc:
            logger.warning("Transport error on %s %s: %s", method, path, exc)
            raise

        if not response.is_success:
            raise RemoteApiError(
                status_code=response.status_code,
                body=response.text,
                method=method,
                path=path,
            )
        if not response.content:
            return {}
        return response.json()

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> ApiTransport:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
