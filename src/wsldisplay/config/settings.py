"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags the user actually passed
  2. Env vars     — ``WSLDISPLAY_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``--config`` or :func:`~wsldisplay.config.discovery.find_config`
  4. Code defaults — baked into the section models

Nested sections are deep-merged across sources, so ``--retries 3`` on the
command line keeps a ``[probe] timeout_ms`` coming from the TOML file.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from wsldisplay.config.discovery import find_config
from wsldisplay.config.models import ProbeConfig, ResolverConfig
from wsldisplay.domain.types import Strategy

EXIT_ABSENT = 1
EXIT_FAILURE = 2


class ConfigError(click.ClickException):
    """Invalid configuration; exits with the failure code, not click's default 1."""

    exit_code = EXIT_FAILURE


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a discovered or explicit TOML file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            try:
                raw = toml_path.read_text(encoding="utf-8")
                self._data = tomllib.loads(raw)
            except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
                msg = f"Invalid config file {toml_path}: {exc}"
                raise ConfigError(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class DisplaySettings(BaseSettings):
    """Everything one invocation needs, frozen after construction.

    Stored on the :class:`~wsldisplay.commands._context.AppContext` and
    handed to the service; components never read flags from anywhere else.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "WSLDISPLAY_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI-only flags ---
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- Pipeline ---
    strategy: Strategy = Strategy.ROUTE
    probe: ProbeConfig = Field(default_factory=ProbeConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        probe: dict[str, Any] | None = None,
        resolver: dict[str, Any] | None = None,
        **cli_flags: Any,
    ) -> DisplaySettings:
        """Construct settings from a CLI invocation.

        *probe* and *resolver* hold only the section keys the user passed;
        ``None`` entries are dropped so lower-priority sources still apply.
        """
        toml_path: Path | None
        if config_path:
            toml_path = Path(config_path)
            if not toml_path.is_file():
                msg = f"Config file not found: {toml_path}"
                raise ConfigError(msg)
        else:
            toml_path = find_config()

        # Unset flags arrive as None (options) or False (switches).
        overrides: dict[str, Any] = {
            k: v for k, v in cli_flags.items() if v is not None and v is not False
        }
        for section, values in (("probe", probe), ("resolver", resolver)):
            present = {k: v for k, v in (values or {}).items() if v is not None}
            if present:
                overrides[section] = present

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None
