"""Vendor device to appliance descriptor projection."""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Any, Iterable

from myqhome.core.model import ApplianceDescriptor, VendorDevice

LIGHT_TYPE_ID = 3
DEFAULT_MANUFACTURER = "Chamberlain/LiftMaster"
DEFAULT_TYPE_NAME = "MyQ Device"
UNKNOWN_TYPE_ID = "Unknown"
DESCRIPTOR_VERSION = "1.00"

_LIGHT_TYPES = ("LIGHT",)
_LIGHT_ACTIONS = ("turnOff", "turnOn")
# Doors may be closed but never opened, so no turnOn.
_DOOR_TYPES = ("SMARTLOCK", "SWITCH")
_DOOR_ACTIONS = ("turnOff", "getLockState", "setLockState")


@dataclass(frozen=True)
class _Projection:
    next_index: int
    appliances: tuple[ApplianceDescriptor, ...]


def capabilities_for(type_id: Any) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Return (appliance types, actions) for a vendor typeId."""
    if type_id == LIGHT_TYPE_ID and not isinstance(type_id, bool):
        return _LIGHT_TYPES, _LIGHT_ACTIONS
    return _DOOR_TYPES, _DOOR_ACTIONS


def _step(state: _Projection, device: VendorDevice, manufacturer_name: str) -> _Projection:
    if not device.id:
        return state

    appliance_types, actions = capabilities_for(device.type_id)
    synthesized = not device.name
    friendly_name = f"Device {state.next_index}" if synthesized else str(device.name)
    type_name = str(device.type_name) if device.type_name else DEFAULT_TYPE_NAME
    type_id = device.type_id if device.type_id else UNKNOWN_TYPE_ID

    appliance = ApplianceDescriptor(
        appliance_id=str(device.id),
        appliance_types=appliance_types,
        manufacturer_name=manufacturer_name,
        model_name=type_name,
        version=DESCRIPTOR_VERSION,
        friendly_name=friendly_name,
        friendly_description=type_name,
        is_reachable=device.online is True,
        actions=actions,
        additional_appliance_details={"typeId": type_id},
    )
    return _Projection(
        next_index=state.next_index + 1 if synthesized else state.next_index,
        appliances=state.appliances + (appliance,),
    )


def project_devices(
    devices: Iterable[VendorDevice],
    *,
    manufacturer_name: str = DEFAULT_MANUFACTURER,
) -> list[ApplianceDescriptor]:
    """Project vendor devices into appliance descriptors.

    Devices without an id are dropped. Unnamed devices are called "Device N",
    where N counts the unnamed devices seen so far.
    """
    result = reduce(
        lambda state, device: _step(state, device, manufacturer_name),
        devices,
        _Projection(next_index=1, appliances=()),
    )
    return list(result.appliances)


def parse_device_list(result: Any) -> list[VendorDevice]:
    """Extract vendor devices from a GET /devices body.

    Anything that is not a mapping with a list of mappings under "devices"
    counts as no devices.
    """
    if not isinstance(result, dict):
        return []
    devices = result.get("devices") or []
    if not isinstance(devices, list):
        return []
    return [VendorDevice.from_dict(raw) for raw in devices if isinstance(raw, dict)]
