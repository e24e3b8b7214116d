"""LookupResult and LookupFailure — the contract between service and CLI.

INVARIANT: ``DisplayService.locate`` never raises for an expected failure;
every terminal state is expressed as a LookupResult.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from wsldisplay.domain.types import LookupStatus


class LookupFailure(BaseModel):
    """Structured error payload within a LookupResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class LookupResult(BaseModel):
    """Terminal state of one display lookup.

    Attributes:
        status: ``succeeded``, ``absent`` or ``failed``.
        op: Name of the operation (always ``"get_display"`` today).
        host: Resolved host address, when resolution got that far.
        display: Requested display number.
        port: TCP port probed, when it could be computed.
        attempts: Connect attempts made (0 if probing never started).
        warnings: Non-fatal issues encountered along the way.
        error: Structured error when ``status`` is ``failed``.
        meta: Timing and the strategy used.
    """

    model_config = {"frozen": True}

    status: LookupStatus
    op: str = "get_display"
    host: str | None = None
    display: int
    port: int | None = None
    attempts: int = 0
    warnings: list[str] = Field(default_factory=list)
    error: LookupFailure | None = None
    meta: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return self.status is LookupStatus.SUCCEEDED

    @property
    def display_value(self) -> str | None:
        """``host:display`` for a successful lookup, else None."""
        if not self.ok or self.host is None:
            return None
        return f"{self.host}:{self.display}"
