"""DisplayService — resolve the host, probe its X11 port, report.

Pipeline: RESOLVING → PROBING → {SUCCEEDED, ABSENT, FAILED}

One-shot: a failed resolution is reported, never retried. Only the probe
loop retries, and only within its own budget.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import structlog

from wsldisplay.domain.display import display_port, format_display
from wsldisplay.domain.errors import DisplayLookupError
from wsldisplay.domain.types import LookupStatus, ProbeOutcome
from wsldisplay.infrastructure.probe import Connector, open_connection, probe
from wsldisplay.infrastructure.resolver import resolve_host
from wsldisplay.services.result import LookupFailure, LookupResult

if TYPE_CHECKING:
    from wsldisplay.config.settings import DisplaySettings

logger = structlog.get_logger(__name__)


class DisplayService:
    """Locates a reachable X display on the virtualization host."""

    def __init__(
        self,
        settings: DisplaySettings,
        *,
        connect: Connector = open_connection,
    ) -> None:
        self._settings = settings
        self._connect = connect
        self._log = logger.bind(strategy=settings.strategy.value)

    def locate(self) -> LookupResult:
        """Run the full pipeline and return its terminal state."""
        probe_cfg = self._settings.probe
        warnings: list[str] = []
        state: dict[str, Any] = {"display": probe_cfg.display, "warnings": warnings}
        start = time.perf_counter()

        try:
            # RESOLVING
            host = resolve_host(self._settings.strategy, self._settings.resolver, warnings)
            state["host"] = str(host)
            self._log.debug("lookup.resolved", host=state["host"])

            # PROBING
            port = display_port(probe_cfg.display)
            state["port"] = port
            report = probe(
                host,
                port,
                timeout=probe_cfg.timeout,
                retries=probe_cfg.retries,
                connect=self._connect,
                log=self._log,
            )
        except DisplayLookupError as exc:
            self._log.debug("lookup.failed", code=exc.code, step=exc.step)
            return LookupResult(
                status=LookupStatus.FAILED,
                error=LookupFailure(
                    code=exc.code,
                    message=exc.message,
                    detail=exc.to_detail(),
                ),
                meta=self._meta(start),
                **state,
            )

        state["attempts"] = report.attempts
        if report.outcome is ProbeOutcome.REACHABLE:
            self._log.debug("lookup.succeeded", display=format_display(host, probe_cfg.display))
            status = LookupStatus.SUCCEEDED
        else:
            self._log.debug("lookup.absent", attempts=report.attempts)
            status = LookupStatus.ABSENT
        return LookupResult(status=status, meta=self._meta(start), **state)

    def _meta(self, start: float) -> dict[str, Any]:
        return {
            "strategy": self._settings.strategy.value,
            "elapsed_ms": round((time.perf_counter() - start) * 1000, 2),
        }
