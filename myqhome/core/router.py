"""Directive routing and handler implementations."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from types import MappingProxyType

from myqhome.core.envelope import DEFAULT_DEPENDENT_SERVICE_NAME, build_envelope, error_envelope
from myqhome.core.error_map import ErrorKind, check_result, translate_failure
from myqhome.core.errors import DirectiveRejectedError, VendorError
from myqhome.core.model import ApplianceDescriptor, Directive, ResponseEnvelope
from myqhome.core.projector import DEFAULT_MANUFACTURER, parse_device_list, project_devices
from myqhome.core.protocol import (
    LOCKED,
    NAMESPACE_CONTROL,
    NAMESPACE_DISCOVERY,
    NAMESPACE_QUERY,
    REQUEST_DISCOVER,
    REQUEST_GET_LOCK_STATE,
    REQUEST_SET_LOCK_STATE,
    REQUEST_TURN_OFF,
    REQUEST_TURN_ON,
    RESPONSE_DISCOVER,
    RESPONSE_GET_LOCK_STATE,
    RESPONSE_SET_LOCK_STATE,
    RESPONSE_TURN_OFF,
    RESPONSE_TURN_ON,
    UNLOCKED,
)
from myqhome.transports.base import VendorClient

LOGGER = logging.getLogger(__name__)

STATE_CLOSED = 0
STATE_OPEN = 1
DOOR_LOCKED_STATE = 2
LIGHT_TYPE_ID = "3"

Handler = Callable[..., Awaitable[ResponseEnvelope]]


class DirectiveRouter:
    def __init__(
        self,
        vendor: VendorClient,
        *,
        manufacturer_name: str = DEFAULT_MANUFACTURER,
        dependent_service_name: str = DEFAULT_DEPENDENT_SERVICE_NAME,
    ) -> None:
        self.vendor = vendor
        self.manufacturer_name = manufacturer_name
        self.dependent_service_name = dependent_service_name

    async def route(self, directive: Directive) -> ResponseEnvelope:
        namespace = directive.header.namespace
        handlers = ROUTES.get(namespace)
        if handlers is None:
            LOGGER.error("Unsupported namespace: %s", namespace)
            return self._error(ErrorKind.UNEXPECTED_INFORMATION, faulting_parameter=namespace)

        handler = handlers.get(directive.header.name)
        if handler is None:
            LOGGER.error("Unsupported operation: %s", directive.header.name)
            return self._error(ErrorKind.UNSUPPORTED_OPERATION)

        try:
            return await handler(self, directive)
        except DirectiveRejectedError as exc:
            LOGGER.info("%s: %s", exc.kind.value, exc)
            return self._error(exc.kind, faulting_parameter=exc.faulting_parameter)
        except VendorError as exc:
            LOGGER.warning("Vendor call failed: %s", exc)
            return self._error(translate_failure(exc))

    async def discover(self, access_token: str) -> list[ApplianceDescriptor]:
        """Return the account's appliances; vendor failures yield an empty list.

        Discovery must never answer with an error directive, so any failure is
        logged and reported as no devices.
        """
        try:
            result = await self.vendor.list_devices(access_token)
        except VendorError as exc:
            LOGGER.warning("handleDiscovery - Error: %s", exc)
            return []
        return project_devices(parse_device_list(result), manufacturer_name=self.manufacturer_name)

    async def set_state(self, access_token: str, appliance_id: str, type_id: object, state: int) -> None:
        if str(type_id) == LIGHT_TYPE_ID:
            device_kind = "light"
        else:
            device_kind = "door"
            if state == STATE_OPEN:
                # Opening a door needs a PIN confirmation the control channel cannot carry.
                raise DirectiveRejectedError(
                    ErrorKind.UNSUPPORTED_OPERATION,
                    f"Refusing to open door {appliance_id}",
                )
        check_result(await self.vendor.set_state(access_token, device_kind, appliance_id, state))

    async def get_lock_state(self, access_token: str, appliance_id: str) -> str:
        result = check_result(await self.vendor.get_door_state(access_token, appliance_id))
        door_state = result.get("doorState")
        if door_state == DOOR_LOCKED_STATE and not isinstance(door_state, bool):
            return LOCKED
        return UNLOCKED

    async def _handle_discover(self, directive: Directive) -> ResponseEnvelope:
        appliances = await self.discover(directive.access_token or "")
        return build_envelope(
            NAMESPACE_DISCOVERY,
            RESPONSE_DISCOVER,
            {"discoveredAppliances": [appliance.to_payload() for appliance in appliances]},
        )

    async def _handle_set_lock_state(self, directive: Directive) -> ResponseEnvelope:
        token, appliance_id, type_id = _resolve_target(directive)
        lock_state = directive.payload.get("lockState")
        state = STATE_CLOSED if lock_state == LOCKED else STATE_OPEN
        await self.set_state(token, appliance_id, type_id, state)
        return build_envelope(NAMESPACE_CONTROL, RESPONSE_SET_LOCK_STATE, {"lockState": lock_state})

    async def _handle_turn_on(self, directive: Directive) -> ResponseEnvelope:
        token, appliance_id, type_id = _resolve_target(directive)
        await self.set_state(token, appliance_id, type_id, STATE_OPEN)
        return build_envelope(NAMESPACE_CONTROL, RESPONSE_TURN_ON)

    async def _handle_turn_off(self, directive: Directive) -> ResponseEnvelope:
        token, appliance_id, type_id = _resolve_target(directive)
        await self.set_state(token, appliance_id, type_id, STATE_CLOSED)
        return build_envelope(NAMESPACE_CONTROL, RESPONSE_TURN_OFF)

    async def _handle_get_lock_state(self, directive: Directive) -> ResponseEnvelope:
        token, appliance_id, _ = _resolve_target(directive)
        lock_state = await self.get_lock_state(token, appliance_id)
        return build_envelope(NAMESPACE_QUERY, RESPONSE_GET_LOCK_STATE, {"lockState": lock_state})

    def _error(self, kind: ErrorKind, *, faulting_parameter: str | None = None) -> ResponseEnvelope:
        return error_envelope(
            kind,
            faulting_parameter=faulting_parameter,
            dependent_service_name=self.dependent_service_name,
        )


def _resolve_target(directive: Directive) -> tuple[str, str, object]:
    appliance = directive.appliance
    if appliance is None:
        raise DirectiveRejectedError(
            ErrorKind.UNEXPECTED_INFORMATION,
            "Directive payload has no appliance",
            faulting_parameter="appliance",
        )
    appliance_id = appliance.get("applianceId")
    if not appliance_id:
        raise DirectiveRejectedError(
            ErrorKind.UNEXPECTED_INFORMATION,
            "Appliance has no applianceId",
            faulting_parameter="appliance.applianceId",
        )
    details = appliance.get("additionalApplianceDetails")
    type_id = details.get("typeId") if isinstance(details, Mapping) else None
    return directive.access_token or "", str(appliance_id), type_id


ROUTES: Mapping[str, Mapping[str, Handler]] = MappingProxyType(
    {
        NAMESPACE_DISCOVERY: MappingProxyType(
            {REQUEST_DISCOVER: DirectiveRouter._handle_discover}
        ),
        NAMESPACE_CONTROL: MappingProxyType(
            {
                REQUEST_SET_LOCK_STATE: DirectiveRouter._handle_set_lock_state,
                REQUEST_TURN_ON: DirectiveRouter._handle_turn_on,
                REQUEST_TURN_OFF: DirectiveRouter._handle_turn_off,
            }
        ),
        NAMESPACE_QUERY: MappingProxyType(
            {REQUEST_GET_LOCK_STATE: DirectiveRouter._handle_get_lock_state}
        ),
    }
)
