"""Vendor return-code to protocol error translation."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Mapping

from myqhome.core.errors import VendorError, VendorResponseError, VendorReturnCodeError

LOGGER = logging.getLogger(__name__)


class ErrorKind(Enum):
    UNSUPPORTED_OPERATION = "UnsupportedOperation"
    UNEXPECTED_INFORMATION = "UnexpectedInformation"
    INVALID_ACCESS_TOKEN = "InvalidAccessToken"
    DEPENDENT_SERVICE_UNAVAILABLE = "DependentServiceUnavailable"

    @property
    def directive_name(self) -> str:
        return ERROR_DIRECTIVE_NAMES[self]


ERROR_DIRECTIVE_NAMES: dict[ErrorKind, str] = {
    ErrorKind.UNSUPPORTED_OPERATION: "UnsupportedOperationError",
    ErrorKind.UNEXPECTED_INFORMATION: "UnexpectedInformationReceivedError",
    ErrorKind.INVALID_ACCESS_TOKEN: "InvalidAccessTokenError",
    ErrorKind.DEPENDENT_SERVICE_UNAVAILABLE: "DependentServiceUnavailableError",
}

# 14, 16 and 17 all mean the access token is invalid or expired.
_RETURN_CODE_KINDS: dict[int, ErrorKind] = {
    14: ErrorKind.INVALID_ACCESS_TOKEN,
    16: ErrorKind.INVALID_ACCESS_TOKEN,
    17: ErrorKind.INVALID_ACCESS_TOKEN,
}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def translate(return_code: Any) -> ErrorKind:
    """Pick the protocol error for a failed vendor returnCode.

    Codes outside the table, including a missing or non-integer code, mean the
    vendor service could not serve the request.
    """
    if _is_int(return_code):
        kind = _RETURN_CODE_KINDS.get(return_code, ErrorKind.DEPENDENT_SERVICE_UNAVAILABLE)
    else:
        kind = ErrorKind.DEPENDENT_SERVICE_UNAVAILABLE
    LOGGER.info("ErrorHandler: %r -> %s", return_code, kind.value)
    return kind


def translate_failure(exc: VendorError) -> ErrorKind:
    if isinstance(exc, VendorReturnCodeError):
        return translate(exc.return_code)
    LOGGER.info("ErrorHandler: %s -> %s", type(exc).__name__, ErrorKind.DEPENDENT_SERVICE_UNAVAILABLE.value)
    return ErrorKind.DEPENDENT_SERVICE_UNAVAILABLE


def check_result(result: Any) -> Mapping[str, Any]:
    """Return a successful vendor result or raise the matching vendor error."""
    if not result or not isinstance(result, Mapping):
        raise VendorResponseError(f"Vendor returned no usable result: {result!r}")
    return_code = result.get("returnCode")
    if not _is_int(return_code) or return_code != 0:
        raise VendorReturnCodeError(return_code)
    return result
