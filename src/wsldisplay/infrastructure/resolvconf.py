"""Host discovery from the ``nameserver`` directive of resolv.conf.

WSL2 writes the host's address as the first nameserver, so the first
matching line wins and later ones are ignored.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from wsldisplay.domain.display import parse_host_address
from wsldisplay.domain.errors import DecodeError, NotFoundError, ReadError
from wsldisplay.domain.types import HostAddress

logger = structlog.get_logger(__name__)

NAMESERVER_KEYWORD = "nameserver"


def find_nameserver(text: str) -> str | None:
    """Return the address token of the first ``nameserver`` line, if any."""
    for line in text.splitlines():
        words = line.split()
        if len(words) >= 2 and words[0] == NAMESERVER_KEYWORD:
            return words[1]
    return None


def resolve_from_resolv_conf(path: Path) -> HostAddress:
    """Read *path* and return the first nameserver as the host address."""
    try:
        raw = path.read_bytes()
    except OSError as exc:
        msg = f"Failed to read {path}"
        raise ReadError(msg, path=str(path)) from exc

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        msg = f"{path} is not valid UTF-8"
        raise DecodeError(msg, path=str(path)) from exc

    token = find_nameserver(text)
    if token is None:
        msg = f"Unable to get host IP address from {path}: no nameserver line"
        raise NotFoundError(msg, path=str(path))

    address = parse_host_address(token, source=str(path))
    logger.debug("resolv_conf.nameserver", path=str(path), address=str(address))
    return address
