"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, the config file only contains
overrides. Probe knobs live under ``[probe]``, resolver knobs under
``[resolver]``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_RESOLV_CONF = Path("/etc/resolv.conf")
DEFAULT_ROUTE_COMMAND = ("ip", "-json", "-4", "route", "show", "default")


class ProbeConfig(BaseModel):
    """[probe] section — validated probe parameters for one invocation."""

    model_config = {"frozen": True}

    display: int = Field(default=1, ge=0, le=65535)
    timeout_ms: int = Field(default=500, gt=0)
    retries: int = Field(default=1, ge=1)

    @property
    def timeout(self) -> float:
        """Connect timeout in seconds."""
        return self.timeout_ms / 1000


class ResolverConfig(BaseModel):
    """[resolver] section."""

    model_config = {"frozen": True}

    resolv_conf: Path = DEFAULT_RESOLV_CONF
    route_command: tuple[str, ...] = DEFAULT_ROUTE_COMMAND
    command_timeout_s: float = Field(default=5.0, gt=0)
