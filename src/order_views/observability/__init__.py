"""Observability – structured logging."""
from order_views.observability.logging import bind_processor, configure_logging, get_logger

__all__ = ["bind_processor", "configure_logging", "get_logger"]
