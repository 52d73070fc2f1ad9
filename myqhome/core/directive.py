"""Inbound directive parsing and validation."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

from jsonschema import ValidationError

from myqhome.core.errors import DirectiveValidationError
from myqhome.core.model import Directive, DirectiveHeader
from myqhome.core.schema import load_schema_validator

_REDACTED = "<redacted>"


def parse_directive(raw: Any) -> Directive:
    try:
        load_schema_validator("directive.schema.json").validate(raw)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise DirectiveValidationError(f"Invalid directive{where}: {exc.message}") from exc

    header = raw["header"]
    return Directive(
        header=DirectiveHeader(
            namespace=header["namespace"],
            name=header["name"],
            message_id=header.get("messageId", ""),
            payload_version=header.get("payloadVersion", ""),
        ),
        payload=dict(raw.get("payload") or {}),
    )


def load_directive(source: str) -> Any:
    """Read a directive document from a JSON file, or stdin when source is "-"."""
    try:
        if source == "-":
            content = sys.stdin.read()
        else:
            content = Path(source).read_text(encoding="utf-8")
    except OSError as exc:
        raise DirectiveValidationError(f"Could not read directive {source}: {exc}") from exc

    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise DirectiveValidationError(f"Invalid JSON in {source}: {exc}") from exc


def redact(raw: Any) -> Any:
    """Return a copy of a directive document safe for logging."""
    if not isinstance(raw, dict):
        return raw
    payload = raw.get("payload")
    if isinstance(payload, dict) and "accessToken" in payload:
        return {**raw, "payload": {**payload, "accessToken": _REDACTED}}
    return raw
