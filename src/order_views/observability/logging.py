"""Observability – structlog configuration and the ``get_logger`` helper.

Loggers are structlog bound loggers routed through the stdlib ``logging``
tree, so handlers, levels and pytest's ``caplog`` keep working. Events are
short snake_case names with key/value context::

    log = get_logger(__name__)
    log.error("order_rejected", order_id="O1", error="customer_id: missing")
"""
from __future__ import annotations

import logging
from typing import Any

import structlog


def configure_logging(level: int | str = logging.INFO, *, json: bool = True) -> None:
    """Install structlog processors and a single root handler.

    ``json=False`` renders with the structlog console renderer, for local
    runs.
    """
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    renderer: Any = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a structlog logger, optionally bound to *initial_values*."""
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


def bind_processor(processor_id: str) -> None:
    """Attach ``processor_id`` to every log event in the current context."""
    structlog.contextvars.bind_contextvars(processor_id=processor_id)


__all__ = ["bind_processor", "configure_logging", "get_logger"]
