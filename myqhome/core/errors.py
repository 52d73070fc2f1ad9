"""Domain-specific errors for myqhome."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from myqhome.core.error_map import ErrorKind


class MyQHomeError(Exception):
    """Base error for myqhome."""


class ConfigValidationError(MyQHomeError):
    """Raised when the config file does not conform to schema or semantics."""


class ConfigLoadError(MyQHomeError):
    """Raised when reading the config file fails."""


class DirectiveValidationError(MyQHomeError):
    """Raised when an inbound directive is not a well-formed directive."""


class DirectiveRejectedError(MyQHomeError):
    """Raised by a handler that must answer with a protocol error directive."""

    def __init__(self, kind: ErrorKind, message: str, *, faulting_parameter: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.faulting_parameter = faulting_parameter


class VendorError(MyQHomeError):
    """Base vendor API error."""


class VendorTransportError(VendorError):
    """Raised when the vendor endpoint cannot be reached or answers non-2xx."""


class VendorTimeoutError(VendorTransportError):
    """Raised when a vendor request exceeds its timeout."""


class VendorResponseError(VendorError):
    """Raised when the vendor answers with an empty or malformed body."""


class VendorReturnCodeError(VendorError):
    """Raised when the vendor answers with a non-zero returnCode."""

    def __init__(self, return_code: object) -> None:
        super().__init__(f"Vendor returned returnCode={return_code!r}")
        self.return_code = return_code
