"""Display number ↔ TCP port arithmetic and host address parsing."""

from __future__ import annotations

import ipaddress

from wsldisplay.domain.errors import AddressParseError, PortOverflowError
from wsldisplay.domain.types import HostAddress

DISPLAY_PORT_BASE = 6000
MAX_PORT = 65535


def display_port(display: int, *, base: int = DISPLAY_PORT_BASE) -> int:
    """Return the X11 TCP port for *display*.

    Raises PortOverflowError instead of wrapping when the sum leaves the
    16-bit port space.
    """
    if display < 0:
        msg = f"Display number must be non-negative, got {display}"
        raise PortOverflowError(msg, display=display)
    port = base + display
    if port > MAX_PORT:
        msg = f"Display {display} maps to port {port}, which exceeds {MAX_PORT}"
        raise PortOverflowError(msg, display=display, port=port)
    return port


def parse_host_address(raw: str, *, source: str) -> HostAddress:
    """Parse *raw* as an IPv4/IPv6 literal, naming *source* on failure."""
    try:
        return ipaddress.ip_address(raw)
    except ValueError as exc:
        msg = f"Invalid host IP address {raw!r} from {source}"
        raise AddressParseError(msg, value=raw, source=source) from exc


def format_display(host: HostAddress, display: int) -> str:
    """Render the ``DISPLAY`` value, e.g. ``172.30.192.1:1``."""
    return f"{host}:{display}"
