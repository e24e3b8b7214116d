"""structlog configuration for wsldisplay.

wsldisplay is meant to be captured by the shell, as in
``export DISPLAY=$(wsldisplay)``, so stdout carries nothing but the ``host:N``
value (or the ``--json`` payload). Every diagnostic, including the
per-attempt connect events logged under ``-v``, goes to stderr where command
substitution leaves it on the terminal.

Renderers:
- Human (default): console renderer, colored only when stderr is a TTY
- JSON (``--log-json``): one object per line, for wrapping the tool in scripts

Only the ``wsldisplay`` logger is lowered to DEBUG by ``-v``; third-party
loggers stay at WARNING.
"""

from __future__ import annotations

import logging
import sys

import structlog

LOGGER_NAME = "wsldisplay"


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Route wsldisplay diagnostics to stderr.

    Called once per invocation by :class:`~wsldisplay.commands._context.AppContext`.
    Repeated calls replace the root handler rather than adding another one.

    Args:
        verbose: Show resolution steps and each connect attempt (DEBUG).
            When False only warnings and errors are logged.
        log_json: Emit JSON lines instead of the console renderer.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(LOGGER_NAME).setLevel(level)
