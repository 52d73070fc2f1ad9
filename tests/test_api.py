from __future__ import annotations

from typing import Any

import httpx
import pytest

from myqhome import api
from myqhome.api import Adapter, AdapterConfig, handler
from myqhome.core.errors import DirectiveValidationError, VendorTransportError
from myqhome.transports.myq_http import MyQHTTPClient


class FakeVendor:
    def __init__(self, *, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[str] = []

    async def list_devices(self, access_token: str) -> Any:
        self.calls.append("list_devices")
        if self.error:
            raise self.error
        return {"returnCode": 0, "devices": [{"id": "1", "name": "Garage", "typeId": 2, "online": True}]}

    async def get_door_state(self, access_token: str, appliance_id: str) -> Any:
        self.calls.append("get_door_state")
        return {"returnCode": 0, "doorState": 2}

    async def set_state(self, access_token: str, device_kind: str, appliance_id: str, state: int) -> Any:
        self.calls.append("set_state")
        return {"returnCode": 0}


class RecordingCallback:
    def __init__(self) -> None:
        self.calls: list[tuple[Any, Any]] = []

    def __call__(self, error: Any, response: Any) -> None:
        self.calls.append((error, response))


def _adapter(vendor: FakeVendor | None = None) -> Adapter:
    return Adapter(vendor=vendor or FakeVendor(), config=AdapterConfig())


def _event(namespace: str, name: str, **payload: Any) -> dict[str, Any]:
    return {
        "header": {"namespace": namespace, "name": name, "messageId": "request-id", "payloadVersion": "2"},
        "payload": {"accessToken": "token", **payload},
    }


def test_handler_calls_back_once_with_response() -> None:
    callback = RecordingCallback()
    handler(_event("Alexa.ConnectedHome.Discovery", "DiscoverAppliancesRequest"), None, callback, adapter=_adapter())

    assert len(callback.calls) == 1
    error, response = callback.calls[0]
    assert error is None
    assert response["header"]["name"] == "DiscoverAppliancesResponse"
    assert response["header"]["messageId"] != "request-id"
    assert response["payload"]["discoveredAppliances"][0]["friendlyName"] == "Garage"


def test_handler_discovery_failure_still_succeeds() -> None:
    callback = RecordingCallback()
    adapter = _adapter(FakeVendor(error=VendorTransportError("down")))
    handler(_event("Alexa.ConnectedHome.Discovery", "DiscoverAppliancesRequest"), None, callback, adapter=adapter)

    [(error, response)] = callback.calls
    assert error is None
    assert response["payload"] == {"discoveredAppliances": []}


def test_handler_unknown_namespace() -> None:
    callback = RecordingCallback()
    handler(_event("Alexa.ConnectedHome.System", "HealthCheckRequest"), None, callback, adapter=_adapter())

    [(_, response)] = callback.calls
    assert response["header"]["name"] == "UnexpectedInformationReceivedError"
    assert response["payload"]["faultingParameter"] == "Alexa.ConnectedHome.System"


@pytest.mark.parametrize("event", [None, {}, {"header": "nope"}, "garbage"])
def test_handler_malformed_event_calls_back_with_none(event: Any) -> None:
    callback = RecordingCallback()
    handler(event, None, callback, adapter=_adapter())
    assert callback.calls == [(None, None)]


def test_handler_swallows_internal_failures(monkeypatch: pytest.MonkeyPatch) -> None:
    adapter = _adapter()

    def boom(raw: Any) -> dict[str, Any]:
        raise RuntimeError("unexpected")

    monkeypatch.setattr(adapter, "handle", boom)
    callback = RecordingCallback()
    handler(_event("Alexa.ConnectedHome.Control", "TurnOffRequest"), None, callback, adapter=adapter)
    assert callback.calls == [(None, None)]


def test_handler_builds_default_adapter(monkeypatch: pytest.MonkeyPatch) -> None:
    vendor = FakeVendor()
    monkeypatch.setattr(api, "MyQHTTPClient", lambda **kwargs: vendor)
    monkeypatch.setenv("XDG_CONFIG_HOME", "/nonexistent")
    monkeypatch.delenv("MYQHOME_ENDPOINT", raising=False)
    monkeypatch.delenv("MYQHOME_REQUEST_TIMEOUT_S", raising=False)

    callback = RecordingCallback()
    handler(_event("Alexa.ConnectedHome.Query", "GetLockStateRequest", appliance={"applianceId": "1"}), None, callback)

    [(_, response)] = callback.calls
    assert response["payload"] == {"lockState": "LOCKED"}
    assert vendor.calls == ["get_door_state"]


def test_adapter_handle_rejects_malformed_directive() -> None:
    with pytest.raises(DirectiveValidationError):
        _adapter().handle({"payload": {}})


def test_adapter_door_open_makes_no_vendor_call() -> None:
    vendor = FakeVendor()
    response = _adapter(vendor).handle(
        _event(
            "Alexa.ConnectedHome.Control",
            "TurnOnRequest",
            appliance={"applianceId": "1", "additionalApplianceDetails": {"typeId": "2"}},
        )
    )
    assert response["header"]["name"] == "UnsupportedOperationError"
    assert vendor.calls == []


def test_adapter_discover() -> None:
    [appliance] = _adapter().discover("token")
    assert appliance.appliance_id == "1"
    assert appliance.actions == ("turnOff", "getLockState", "setLockState")


def test_response_message_ids_are_unique() -> None:
    adapter = _adapter()
    event = _event("Alexa.ConnectedHome.Discovery", "DiscoverAppliancesRequest")
    ids = {adapter.handle(event)["header"]["messageId"] for _ in range(20)}
    assert len(ids) == 20
    assert "request-id" not in ids


def _unserialisable_events() -> list[dict[Any, Any]]:
    tuple_key = _event("Alexa.ConnectedHome.Discovery", "DiscoverAppliancesRequest")
    tuple_key[("extra", 1)] = "x"
    circular = _event("Alexa.ConnectedHome.Discovery", "DiscoverAppliancesRequest")
    circular["payload"]["self"] = circular
    return [tuple_key, circular]


@pytest.mark.parametrize("event", _unserialisable_events(), ids=["tuple-key", "circular"])
def test_handler_unserialisable_event_still_calls_back(event: dict[Any, Any]) -> None:
    callback = RecordingCallback()
    handler(event, None, callback, adapter=_adapter())

    [(error, response)] = callback.calls
    assert error is None
    assert response["header"]["name"] == "DiscoverAppliancesResponse"


def test_adapter_builds_client_from_config() -> None:
    adapter = Adapter(config=AdapterConfig(endpoint="https://myq.example.com", request_timeout_s=4.0))
    assert isinstance(adapter.vendor, MyQHTTPClient)
    assert adapter.vendor.timeout_s == 4.0
    assert adapter.vendor.endpoint == "https://myq.example.com"


def test_configured_timeout_reaches_transport(monkeypatch: pytest.MonkeyPatch) -> None:
    requests: list[httpx.Request] = []

    def respond(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"returnCode": 0, "devices": []})

    def client(**kwargs: Any) -> MyQHTTPClient:
        return MyQHTTPClient(transport=httpx.MockTransport(respond), **kwargs)

    monkeypatch.setattr(api, "MyQHTTPClient", client)
    adapter = Adapter(config=AdapterConfig(endpoint="https://myq.example.com", request_timeout_s=4.0))
    adapter.handle(_event("Alexa.ConnectedHome.Discovery", "DiscoverAppliancesRequest"))

    [request] = requests
    assert request.url.host == "myq.example.com"
    assert request.extensions["timeout"] == {"connect": 4.0, "read": 4.0, "write": 4.0, "pool": 4.0}
