"""Enums and value types shared across the resolve → probe pipeline."""

from __future__ import annotations

import ipaddress
from enum import StrEnum

HostAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


class Strategy(StrEnum):
    """How the host address is discovered."""

    ROUTE = "route"
    RESOLV = "resolv"


class ProbeOutcome(StrEnum):
    """Non-error result of probing the display port."""

    REACHABLE = "reachable"
    UNREACHABLE = "unreachable"


class FailureKind(StrEnum):
    """Classification of a failed connect attempt."""

    REFUSED = "refused"
    TIMED_OUT = "timed_out"
    FATAL = "fatal"


class RetryAction(StrEnum):
    """What the probe loop does after a failed attempt."""

    RETRY_IMMEDIATELY = "retry_immediately"
    RETRY_AFTER_DELAY = "retry_after_delay"
    ABORT = "abort"


class LookupStatus(StrEnum):
    """Terminal states of a display lookup."""

    SUCCEEDED = "succeeded"
    ABSENT = "absent"
    FAILED = "failed"
