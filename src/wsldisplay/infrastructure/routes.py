"""Host discovery from the default IPv4 route.

Runs ``ip -json -4 route show default`` (or a configured equivalent) and
takes the gateway of the first record. Only the two fields we need are
modelled; everything else iproute2 emits is ignored.
"""

from __future__ import annotations

import json
import subprocess
from collections.abc import Sequence
from typing import Any

import structlog
from pydantic import AliasChoices, BaseModel, Field

from wsldisplay.domain.display import parse_host_address
from wsldisplay.domain.errors import (
    AddressParseError,
    DecodeError,
    ExecError,
    NotFoundError,
    RouteValidationError,
)
from wsldisplay.domain.types import HostAddress

logger = structlog.get_logger(__name__)

DEFAULT_DESTINATION = "default"


class RouteRecord(BaseModel):
    """One entry of the route query output.

    iproute2 names the destination ``dst``; ``destination`` is accepted too.
    """

    model_config = {"frozen": True, "extra": "ignore"}

    destination: Any = Field(default=None, validation_alias=AliasChoices("dst", "destination"))
    gateway: Any = None


def run_route_query(command: Sequence[str], *, timeout: float = 5.0) -> str:
    """Run the route query and return its stdout decoded as UTF-8.

    Raises ExecError when the command cannot run or exits non-zero, and
    DecodeError when it ran but printed something that is not UTF-8.
    """
    argv = list(command)
    if not argv:
        raise ExecError("Route query command is empty")
    try:
        proc = subprocess.run(
            argv,
            capture_output=True,
            check=True,
            timeout=timeout,
        )
    except subprocess.CalledProcessError as exc:
        stderr = (exc.stderr or b"").decode("utf-8", errors="replace").strip()
        msg = f"{argv[0]} exited with status {exc.returncode}"
        if stderr:
            msg = f"{msg}: {stderr}"
        raise ExecError(msg, command=argv, returncode=exc.returncode) from exc
    except subprocess.TimeoutExpired as exc:
        msg = f"{argv[0]} did not finish within {timeout}s"
        raise ExecError(msg, command=argv) from exc
    except OSError as exc:
        msg = f"Failed to run {argv[0]}"
        raise ExecError(msg, command=argv) from exc
    try:
        return proc.stdout.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError("Route query output is not valid UTF-8", command=argv) from exc


def parse_default_route(output: str, warnings: list[str]) -> HostAddress:
    """Decode route query *output* and return the default gateway.

    More than one record is not fatal: a warning is appended to *warnings*
    and the first record is used.
    """
    try:
        decoded = json.loads(output)
    except json.JSONDecodeError as exc:
        raise DecodeError("Route query output is not valid JSON") from exc

    if not isinstance(decoded, list) or not all(isinstance(r, dict) for r in decoded):
        raise DecodeError("Route query output is not an array of route records")
    if not decoded:
        raise NotFoundError("No default route found")

    if len(decoded) > 1:
        warnings.append(f"Found {len(decoded)} default routes, using the first one")
        logger.debug("routes.multiple_defaults", count=len(decoded))

    record = RouteRecord.model_validate(decoded[0])
    if record.destination != DEFAULT_DESTINATION:
        msg = f"Expected a default route, got destination {record.destination!r}"
        raise RouteValidationError(msg, destination=record.destination)

    if not isinstance(record.gateway, str):
        msg = "Default route has no gateway address"
        raise AddressParseError(msg, gateway=record.gateway)
    return parse_host_address(record.gateway, source="default route gateway")


def resolve_from_default_route(
    command: Sequence[str],
    warnings: list[str],
    *,
    timeout: float = 5.0,
) -> HostAddress:
    """Run the route query and return the gateway of the default route."""
    output = run_route_query(command, timeout=timeout)
    address = parse_default_route(output, warnings)
    logger.debug("routes.gateway", address=str(address))
    return address
