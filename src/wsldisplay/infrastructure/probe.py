"""TCP probe for an X11 display port.

Each attempt is a bare connect bounded by the timeout; the socket is closed
as soon as the handshake completes. What happens after a failed attempt is
decided by :data:`RETRY_POLICY`:

* refused   — the remote answered immediately, so wait ``timeout`` before
  trying again
* timed out — the timeout already consumed the wait, retry at once
* anything else — abort with :class:`FatalProbeError`
"""

from __future__ import annotations

import socket
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog

from wsldisplay.domain.errors import FatalProbeError
from wsldisplay.domain.types import FailureKind, HostAddress, ProbeOutcome, RetryAction

logger = structlog.get_logger(__name__)

Connector = Callable[[tuple[str, int], float], Any]

RETRY_POLICY: dict[FailureKind, RetryAction] = {
    FailureKind.REFUSED: RetryAction.RETRY_AFTER_DELAY,
    FailureKind.TIMED_OUT: RetryAction.RETRY_IMMEDIATELY,
    FailureKind.FATAL: RetryAction.ABORT,
}


@dataclass(frozen=True)
class ProbeReport:
    """Outcome of a probe plus how many connect attempts it took."""

    outcome: ProbeOutcome
    attempts: int


def classify_failure(exc: OSError) -> FailureKind:
    """Map a connect error onto the retry policy's failure kinds.

    ``OSError`` construction already maps ``ECONNREFUSED`` and ``ETIMEDOUT``
    onto these subclasses, and ``socket.timeout`` is ``TimeoutError``.
    """
    if isinstance(exc, ConnectionRefusedError):
        return FailureKind.REFUSED
    if isinstance(exc, TimeoutError):
        return FailureKind.TIMED_OUT
    return FailureKind.FATAL


def open_connection(address: tuple[str, int], timeout: float) -> socket.socket:
    return socket.create_connection(address, timeout=timeout)


def probe(
    host: HostAddress | str,
    port: int,
    *,
    timeout: float,
    retries: int,
    connect: Connector = open_connection,
    sleep: Callable[[float], None] = time.sleep,
    log: Any = None,
) -> ProbeReport:
    """Try to open a TCP connection to ``host:port`` up to *retries* times.

    Args:
        host: Address to probe.
        port: TCP port (already range-checked).
        timeout: Per-attempt connect timeout in seconds; also the pause
            after a refused attempt.
        retries: Total number of attempts, at least 1.
        connect: Opens a connection; must return something closeable.
        sleep: Pacing function, injectable for tests.
        log: Bound structlog logger for per-attempt diagnostics.

    Raises:
        FatalProbeError: A failure the retry loop cannot recover from.
    """
    if timeout <= 0:
        msg = f"timeout must be positive, got {timeout}"
        raise ValueError(msg)
    if retries < 1:
        msg = f"retries must be at least 1, got {retries}"
        raise ValueError(msg)

    log = log or logger
    address = (str(host), port)

    for attempt in range(1, retries + 1):
        start = time.perf_counter()
        try:
            conn = connect(address, timeout)
        except OSError as exc:
            elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
            kind = classify_failure(exc)
            action = RETRY_POLICY[kind]
            log.debug(
                "probe.attempt",
                attempt=attempt,
                retries=retries,
                host=address[0],
                port=port,
                result=kind.value,
                error=str(exc),
                elapsed_ms=elapsed_ms,
            )
            if action is RetryAction.ABORT:
                msg = f"Connecting to {address[0]}:{port} failed: {exc}"
                raise FatalProbeError(msg, host=address[0], port=port, attempt=attempt) from exc
            if action is RetryAction.RETRY_AFTER_DELAY and attempt < retries:
                sleep(timeout)
            continue

        conn.close()
        log.debug(
            "probe.attempt",
            attempt=attempt,
            retries=retries,
            host=address[0],
            port=port,
            result=ProbeOutcome.REACHABLE.value,
            elapsed_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return ProbeReport(ProbeOutcome.REACHABLE, attempt)

    return ProbeReport(ProbeOutcome.UNREACHABLE, retries)
