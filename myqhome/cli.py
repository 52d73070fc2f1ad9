"""Typer CLI entrypoint."""

from __future__ import annotations

import json
import logging
from typing import Any

import typer

from myqhome.api import Adapter
from myqhome.core.directive import load_directive
from myqhome.core.errors import MyQHomeError
from myqhome.core.error_map import ERROR_DIRECTIVE_NAMES
from myqhome.core.envelope import new_message_id
from myqhome.core.protocol import (
    NAMESPACE_CONTROL,
    NAMESPACE_DISCOVERY,
    NAMESPACE_QUERY,
    PAYLOAD_VERSION,
    REQUEST_DISCOVER,
    REQUEST_GET_LOCK_STATE,
    REQUEST_SET_LOCK_STATE,
    REQUEST_TURN_OFF,
    REQUEST_TURN_ON,
)

app = typer.Typer(help="Drive MyQ garage doors and lights through ConnectedHome directives")

_ERROR_NAMES = frozenset(ERROR_DIRECTIVE_NAMES.values())


def _token_option() -> Any:
    return typer.Option(..., "--token", envvar="MYQHOME_ACCESS_TOKEN", help="MyQ access token")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log adapter activity")) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="**** %(name)s %(message)s")


def _build_adapter() -> Adapter:
    adapter = Adapter()
    for warning in getattr(adapter, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return adapter


def _directive(namespace: str, name: str, payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "header": {
            "namespace": namespace,
            "name": name,
            "messageId": new_message_id(),
            "payloadVersion": PAYLOAD_VERSION,
        },
        "payload": payload,
    }


def _appliance(appliance_id: str, type_id: str) -> dict[str, Any]:
    return {"applianceId": appliance_id, "additionalApplianceDetails": {"typeId": type_id}}


def _run(raw: dict[str, Any]) -> dict[str, Any]:
    try:
        response = _build_adapter().handle(raw)
    except MyQHomeError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    name = response["header"]["name"]
    if name in _ERROR_NAMES:
        detail = json.dumps(response["payload"]) if response["payload"] else ""
        typer.echo(f"Error: {name} {detail}".rstrip(), err=True)
        raise typer.Exit(code=1)
    return response


@app.command("handle")
def handle(source: str = typer.Argument(..., help="Directive JSON file, or - for stdin")) -> None:
    """Run one directive through the adapter and print the response."""
    try:
        raw = load_directive(source)
    except MyQHomeError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    typer.echo(json.dumps(_run(raw), indent=2))


@app.command("discover")
def discover(token: str = _token_option()) -> None:
    """List appliances discovered on the account."""
    response = _run(_directive(NAMESPACE_DISCOVERY, REQUEST_DISCOVER, {"accessToken": token}))
    appliances = response["payload"]["discoveredAppliances"]
    if not appliances:
        typer.echo("No appliances discovered")
        return
    for appliance in appliances:
        reachable = "online" if appliance["isReachable"] else "offline"
        type_id = appliance["additionalApplianceDetails"]["typeId"]
        typer.echo(
            f"{appliance['applianceId']}: {appliance['friendlyName']} "
            f"[{', '.join(appliance['applianceTypes'])}] typeId={type_id} {reachable}"
        )
        typer.echo(f"  actions: {', '.join(appliance['actions'])}")


@app.command("turn-on")
def turn_on(
    appliance_id: str,
    type_id: str = typer.Option("3", "--type-id", help="Vendor typeId from discovery; lights are 3"),
    token: str = _token_option(),
) -> None:
    """Turn a light on. Doors cannot be opened."""
    payload = {"accessToken": token, "appliance": _appliance(appliance_id, type_id)}
    _run(_directive(NAMESPACE_CONTROL, REQUEST_TURN_ON, payload))
    typer.echo(f"Turned on {appliance_id}")


@app.command("turn-off")
def turn_off(
    appliance_id: str,
    type_id: str = typer.Option(..., "--type-id", help="Vendor typeId from discovery"),
    token: str = _token_option(),
) -> None:
    """Turn a light off or close a door."""
    payload = {"accessToken": token, "appliance": _appliance(appliance_id, type_id)}
    _run(_directive(NAMESPACE_CONTROL, REQUEST_TURN_OFF, payload))
    typer.echo(f"Turned off {appliance_id}")


@app.command("set-lock")
def set_lock(
    appliance_id: str,
    lock_state: str = typer.Argument(..., help="LOCKED or UNLOCKED"),
    type_id: str = typer.Option("Unknown", "--type-id", help="Vendor typeId from discovery"),
    token: str = _token_option(),
) -> None:
    """Set the lock state of a door."""
    payload = {
        "accessToken": token,
        "appliance": _appliance(appliance_id, type_id),
        "lockState": lock_state.upper(),
    }
    response = _run(_directive(NAMESPACE_CONTROL, REQUEST_SET_LOCK_STATE, payload))
    typer.echo(f"{appliance_id}: {response['payload']['lockState']}")


@app.command("get-lock")
def get_lock(appliance_id: str, token: str = _token_option()) -> None:
    """Print the lock state of a door."""
    payload = {"accessToken": token, "appliance": {"applianceId": appliance_id}}
    response = _run(_directive(NAMESPACE_QUERY, REQUEST_GET_LOCK_STATE, payload))
    typer.echo(f"{appliance_id}: {response['payload']['lockState']}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
