"""Stable public API for invoking the myqhome adapter.

This module is the supported integration surface: `handler` is the entry
function a serverless runtime calls once per directive, and `Adapter` exposes
the same behaviour to scripts and tests.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any

from myqhome.core.config import AdapterConfig, LoadedConfig, load_config
from myqhome.core.directive import parse_directive, redact
from myqhome.core.error_map import ErrorKind, translate
from myqhome.core.errors import (
    ConfigLoadError,
    ConfigValidationError,
    DirectiveRejectedError,
    DirectiveValidationError,
    MyQHomeError,
    VendorError,
    VendorResponseError,
    VendorReturnCodeError,
    VendorTimeoutError,
    VendorTransportError,
)
from myqhome.core.model import ApplianceDescriptor, Directive, DirectiveHeader, ResponseEnvelope
from myqhome.core.router import DirectiveRouter
from myqhome.transports.base import VendorClient
from myqhome.transports.myq_http import MyQHTTPClient

__all__ = [
    "MyQHomeError",
    "ConfigLoadError",
    "ConfigValidationError",
    "DirectiveRejectedError",
    "DirectiveValidationError",
    "VendorError",
    "VendorResponseError",
    "VendorReturnCodeError",
    "VendorTimeoutError",
    "VendorTransportError",
    "AdapterConfig",
    "ApplianceDescriptor",
    "Directive",
    "DirectiveHeader",
    "ErrorKind",
    "ResponseEnvelope",
    "VendorClient",
    "Adapter",
    "handler",
    "translate",
]

LOGGER = logging.getLogger(__name__)

Callback = Callable[[Any, Any], Any]


def _log(title: str, data: Any) -> None:
    try:
        rendered = json.dumps(data, default=str)
    except (TypeError, ValueError):
        rendered = repr(data)
    LOGGER.info("%s: %s", title, rendered)


class Adapter:
    """Translate ConnectedHome directives into MyQ API calls.

    An `Adapter` holds no per-directive state; one instance may serve any
    number of directives.
    """

    def __init__(
        self,
        *,
        vendor: VendorClient | None = None,
        config: AdapterConfig | None = None,
    ) -> None:
        warnings: tuple[str, ...] = ()
        if config is None:
            loaded: LoadedConfig = load_config()
            config = loaded.config
            warnings = loaded.warnings
        self.config = config
        self.load_warnings = warnings
        self.vendor = vendor or MyQHTTPClient(endpoint=config.endpoint, timeout_s=config.request_timeout_s)
        self._router = DirectiveRouter(
            self.vendor,
            manufacturer_name=config.manufacturer_name,
            dependent_service_name=config.dependent_service_name,
        )

    async def handle_async(self, directive: Directive) -> ResponseEnvelope:
        return await self._router.route(directive)

    def handle(self, raw: Any) -> dict[str, Any]:
        """Validate a raw directive mapping and return the response mapping.

        Raises `DirectiveValidationError` for malformed input; every protocol
        level failure is returned as an error envelope instead.
        """
        directive = parse_directive(raw)
        envelope = asyncio.run(self.handle_async(directive))
        return envelope.to_dict()

    def discover(self, access_token: str) -> list[ApplianceDescriptor]:
        return asyncio.run(self._router.discover(access_token))


def handler(event: Any, context: Any, callback: Callback, *, adapter: Adapter | None = None) -> None:
    """Serverless entry point; calls ``callback(None, response)`` exactly once.

    The response is None when no envelope could be produced, e.g. for a
    malformed directive or an unexpected internal failure.
    """
    response: dict[str, Any] | None = None
    try:
        _log("Received Directive", redact(event))
        response = (adapter or Adapter()).handle(event)
    except Exception:
        LOGGER.exception("Error handling directive")
    try:
        _log("Response", response)
    except Exception:
        LOGGER.exception("Error logging response")
    callback(None, response)
