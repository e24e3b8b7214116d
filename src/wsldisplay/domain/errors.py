"""Error taxonomy for display lookups.

Every error carries a stable ``code`` (surfaced in ``LookupResult.error``)
and the pipeline ``step`` it belongs to. Resolution errors are never
retried; probe errors are raised only for failures the retry loop
cannot recover from.
"""

from __future__ import annotations

from typing import Any


class DisplayLookupError(Exception):
    """Base class for all failures that end a lookup."""

    code = "LOOKUP_FAILED"
    step = "lookup"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_detail(self) -> dict[str, Any]:
        data: dict[str, Any] = {"step": self.step, **self.detail}
        if self.__cause__ is not None:
            data["cause"] = f"{type(self.__cause__).__name__}: {self.__cause__}"
        return data


# --- Resolution ---


class HostResolutionError(DisplayLookupError):
    code = "RESOLVE_FAILED"
    step = "resolve"


class ReadError(HostResolutionError):
    code = "READ_ERROR"


class DecodeError(HostResolutionError):
    code = "DECODE_ERROR"


class AddressParseError(HostResolutionError):
    code = "PARSE_ERROR"


class NotFoundError(HostResolutionError):
    code = "NOT_FOUND"


class RouteValidationError(HostResolutionError):
    code = "VALIDATION_ERROR"


class ExecError(HostResolutionError):
    code = "EXEC_ERROR"


# --- Probe ---


class PortOverflowError(DisplayLookupError):
    code = "PORT_OVERFLOW"
    step = "probe"


class FatalProbeError(DisplayLookupError):
    """A connect failure that retries cannot fix (bad family, unreachable net)."""

    code = "PROBE_IO_ERROR"
    step = "probe"
