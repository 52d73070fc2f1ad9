"""Response envelope construction."""

from __future__ import annotations

import uuid
from typing import Any, Mapping

from myqhome.core.error_map import ErrorKind
from myqhome.core.model import ResponseEnvelope, ResponseHeader
from myqhome.core.protocol import NAMESPACE_CONTROL, PAYLOAD_VERSION

DEFAULT_DEPENDENT_SERVICE_NAME = "MyQ Service"


def new_message_id() -> str:
    return str(uuid.uuid4())


def build_envelope(namespace: str, name: str, payload: Mapping[str, Any] | None = None) -> ResponseEnvelope:
    """Wrap a payload in a response envelope with a fresh message id.

    The inbound directive's message id is never reused.
    """
    header = ResponseHeader(
        message_id=new_message_id(),
        namespace=namespace,
        name=name,
        payload_version=PAYLOAD_VERSION,
    )
    return ResponseEnvelope(header=header, payload=dict(payload or {}))


def error_envelope(
    kind: ErrorKind,
    *,
    faulting_parameter: str | None = None,
    dependent_service_name: str = DEFAULT_DEPENDENT_SERVICE_NAME,
) -> ResponseEnvelope:
    payload: dict[str, Any] = {}
    if kind is ErrorKind.UNEXPECTED_INFORMATION:
        payload["faultingParameter"] = faulting_parameter
    elif kind is ErrorKind.DEPENDENT_SERVICE_UNAVAILABLE:
        payload["dependentServiceName"] = dependent_service_name
    return build_envelope(NAMESPACE_CONTROL, kind.directive_name, payload)
