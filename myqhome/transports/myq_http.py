"""MyQ cloud API client implemented with httpx."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from myqhome.core.errors import VendorResponseError, VendorTimeoutError, VendorTransportError

DEFAULT_ENDPOINT = "https://myq.thomasmunduchira.com"
DEFAULT_TIMEOUT_S = 2.25
LOGGER = logging.getLogger(__name__)


class MyQHTTPClient:
    """Issue single, unretried requests against the MyQ cloud API.

    Every method returns the decoded JSON body as-is; interpreting
    ``returnCode`` is left to the caller.
    """

    def __init__(
        self,
        *,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.timeout_s = timeout_s
        self._transport = transport

    async def list_devices(self, access_token: str) -> Any:
        return await self._request("GET", "/devices", access_token)

    async def get_door_state(self, access_token: str, appliance_id: str) -> Any:
        return await self._request("GET", "/door/state", access_token, params={"id": appliance_id})

    async def set_state(self, access_token: str, device_kind: str, appliance_id: str, state: int) -> Any:
        if device_kind not in {"door", "light"}:
            raise ValueError(f"Unknown device kind '{device_kind}'")
        return await self._request(
            "PUT",
            f"/{device_kind}/state",
            access_token,
            json={"id": appliance_id, "state": state},
        )

    async def _request(
        self,
        method: str,
        path: str,
        access_token: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        LOGGER.debug("%s %s%s", method, self.endpoint, path)
        try:
            async with httpx.AsyncClient(
                base_url=self.endpoint,
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self.timeout_s,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, params=params, json=json)
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise VendorTimeoutError(
                f"{method} {path} timed out after {self.timeout_s}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise VendorTransportError(f"{method} {path} failed: {exc}") from exc
        except (httpx.InvalidURL, UnicodeError) as exc:
            # Raised while building the request, e.g. a non-ASCII token in the header.
            raise VendorTransportError(f"{method} {path} could not be built: {exc}") from exc

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise VendorResponseError(f"{method} {path} returned invalid JSON") from exc
