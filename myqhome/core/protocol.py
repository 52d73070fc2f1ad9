"""Namespace and directive names of the ConnectedHome v2 protocol."""

from __future__ import annotations

PAYLOAD_VERSION = "2"

NAMESPACE_DISCOVERY = "Alexa.ConnectedHome.Discovery"
NAMESPACE_CONTROL = "Alexa.ConnectedHome.Control"
NAMESPACE_QUERY = "Alexa.ConnectedHome.Query"

# discovery
REQUEST_DISCOVER = "DiscoverAppliancesRequest"
RESPONSE_DISCOVER = "DiscoverAppliancesResponse"

# control
REQUEST_SET_LOCK_STATE = "SetLockStateRequest"
RESPONSE_SET_LOCK_STATE = "SetLockStateConfirmation"
REQUEST_TURN_ON = "TurnOnRequest"
RESPONSE_TURN_ON = "TurnOnConfirmation"
REQUEST_TURN_OFF = "TurnOffRequest"
RESPONSE_TURN_OFF = "TurnOffConfirmation"

# query
REQUEST_GET_LOCK_STATE = "GetLockStateRequest"
RESPONSE_GET_LOCK_STATE = "GetLockStateResponse"

LOCKED = "LOCKED"
UNLOCKED = "UNLOCKED"
