"""Core data models used across the router, projector, and entry points."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class DirectiveHeader:
    namespace: str
    name: str
    message_id: str = ""
    payload_version: str = ""


@dataclass(frozen=True)
class Directive:
    header: DirectiveHeader
    payload: Mapping[str, Any] = field(default_factory=dict)

    @property
    def access_token(self) -> str | None:
        token = self.payload.get("accessToken")
        return token if isinstance(token, str) else None

    @property
    def appliance(self) -> Mapping[str, Any] | None:
        appliance = self.payload.get("appliance")
        return appliance if isinstance(appliance, Mapping) else None


@dataclass(frozen=True)
class VendorDevice:
    id: Any = None
    name: Any = None
    type_id: Any = None
    type_name: Any = None
    online: Any = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> VendorDevice:
        return cls(
            id=raw.get("id"),
            name=raw.get("name"),
            type_id=raw.get("typeId"),
            type_name=raw.get("typeName"),
            online=raw.get("online"),
        )


@dataclass(frozen=True)
class ApplianceDescriptor:
    appliance_id: str
    appliance_types: tuple[str, ...]
    manufacturer_name: str
    model_name: str
    version: str
    friendly_name: str
    friendly_description: str
    is_reachable: bool
    actions: tuple[str, ...]
    additional_appliance_details: Mapping[str, Any]

    def to_payload(self) -> dict[str, Any]:
        return {
            "applianceTypes": list(self.appliance_types),
            "applianceId": self.appliance_id,
            "manufacturerName": self.manufacturer_name,
            "modelName": self.model_name,
            "version": self.version,
            "friendlyName": self.friendly_name,
            "friendlyDescription": self.friendly_description,
            "isReachable": self.is_reachable,
            "actions": list(self.actions),
            "additionalApplianceDetails": dict(self.additional_appliance_details),
        }


@dataclass(frozen=True)
class ResponseHeader:
    message_id: str
    namespace: str
    name: str
    payload_version: str


@dataclass(frozen=True)
class ResponseEnvelope:
    header: ResponseHeader
    payload: Mapping[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "header": {
                "messageId": self.header.message_id,
                "namespace": self.header.namespace,
                "name": self.header.name,
                "payloadVersion": self.header.payload_version,
            },
            "payload": copy.deepcopy(dict(self.payload)),
        }
