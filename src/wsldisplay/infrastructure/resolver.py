"""Strategy dispatch for host address discovery.

Strategies are plain functions keyed by :class:`Strategy`; exactly one runs
per invocation.
"""

from __future__ import annotations

from collections.abc import Callable

from wsldisplay.config.models import ResolverConfig
from wsldisplay.domain.types import HostAddress, Strategy
from wsldisplay.infrastructure.resolvconf import resolve_from_resolv_conf
from wsldisplay.infrastructure.routes import resolve_from_default_route


def _via_resolv_conf(config: ResolverConfig, warnings: list[str]) -> HostAddress:
    return resolve_from_resolv_conf(config.resolv_conf)


def _via_default_route(config: ResolverConfig, warnings: list[str]) -> HostAddress:
    return resolve_from_default_route(
        config.route_command,
        warnings,
        timeout=config.command_timeout_s,
    )


_STRATEGIES: dict[Strategy, Callable[[ResolverConfig, list[str]], HostAddress]] = {
    Strategy.RESOLV: _via_resolv_conf,
    Strategy.ROUTE: _via_default_route,
}


def resolve_host(
    strategy: Strategy,
    config: ResolverConfig,
    warnings: list[str],
) -> HostAddress:
    """Discover the host address with *strategy*.

    Raises a :class:`~wsldisplay.domain.errors.HostResolutionError` subclass
    on failure. Non-fatal findings are appended to *warnings*.
    """
    return _STRATEGIES[strategy](config, warnings)
