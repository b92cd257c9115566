"""HTTP adapter for the NAD amplifier control API."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional
from urllib.parse import quote

import aiohttp

from ..config import AmplifierConfig

LOGGER = logging.getLogger(__name__)


class AmplifierRequestError(RuntimeError):
    """Raised when the amplifier API rejects a request or cannot be reached.

    ``status`` is the HTTP status code, or ``0`` when no response was
    received at all.
    """

    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"{message} ({status})")
        self.status = status
        self.message = message


class AmplifierClient:
    """Non-blocking client for the amplifier's state and command endpoints."""

    def __init__(
        self,
        config: AmplifierConfig,
        *,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.config = config

        self._base_url = self.config.url.rstrip("/") + "/" + self.config.api_path.strip("/")
        self._session: Optional[aiohttp.ClientSession] = session
        self._owns_session = session is None

    async def __aenter__(self) -> "AmplifierClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    async def fetch_state(self, variable: str) -> Mapping[str, Any]:
        """Read a single variable via ``GET <api>/state/<variable>``.

        Raises:
            AmplifierRequestError: If the request fails or the reply is malformed.
        """

        url = f"{self._base_url}/state/{quote(variable, safe='')}"
        return await self._request("GET", url)

    async def send_command(self, payload: Mapping[str, str]) -> Mapping[str, Any]:
        """Submit a command body via ``POST <api>``.

        Raises:
            AmplifierRequestError: If the request fails or the reply is malformed.
        """

        return await self._request("POST", self._base_url, payload=dict(payload))

    async def aclose(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=None)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def _request(
        self, method: str, url: str, *, payload: Optional[dict] = None
    ) -> Mapping[str, Any]:
        session = await self._ensure_session()
        LOGGER.debug("%s %s %s", method, url, payload if payload is not None else "")

        try:
            async with session.request(method, url, json=payload) as response:
                if response.status >= 400:
                    message = await _error_message(response)
                    raise AmplifierRequestError(response.status, message)

                try:
                    data = await response.json(content_type=None)
                except ValueError as exc:
                    raise AmplifierRequestError(
                        response.status, "Malformed reply from amplifier API"
                    ) from exc
        except aiohttp.ClientError as exc:
            raise AmplifierRequestError(0, str(exc) or type(exc).__name__) from exc

        if not isinstance(data, Mapping):
            raise AmplifierRequestError(
                response.status, "Malformed reply from amplifier API"
            )
        return data


async def _error_message(response: aiohttp.ClientResponse) -> str:
    """Extract a human readable message from an error response.

    The amplifier API replies with ``{"status": ..., "message": ...}``; other
    servers in between may answer with plain text.
    """

    detail = (await response.text(errors="replace")).strip()
    try:
        body = json.loads(detail)
    except ValueError:
        body = None
    if isinstance(body, Mapping) and body.get("message"):
        return str(body["message"])
    return detail or response.reason or f"HTTP {response.status}"
