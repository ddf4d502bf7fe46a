"""structlog setup shared by every process that loads cluster configuration."""

from __future__ import annotations

import sys

import structlog


def configure_logging() -> None:
    """Install the structlog processor chain: JSON on stderr, colourised console on a TTY.

    Called by ``load_cluster_configs_from_env``; embedders calling the loaders directly call it themselves.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if sys.stderr.isatty() else structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )
