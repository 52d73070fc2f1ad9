"""Vendor client interfaces."""

from __future__ import annotations

from typing import Any, Protocol


class VendorClient(Protocol):
    async def list_devices(self, access_token: str) -> Any:
        """Fetch the account's device list."""

    async def get_door_state(self, access_token: str, appliance_id: str) -> Any:
        """Fetch the state of one door."""

    async def set_state(self, access_token: str, device_kind: str, appliance_id: str, state: int) -> Any:
        """Set a light or door to state 0 or 1."""
