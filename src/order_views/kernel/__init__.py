"""Kernel – framework-agnostic building blocks (errors, Result, clock)."""

from order_views.kernel.clock import Clock, FrozenClock, SystemClock, now_ms
from order_views.kernel.errors import (
    ConfigError,
    DomainError,
    InfrastructureError,
    OrderViewsError,
    PersistenceError,
    SerializationError,
    UnknownCommandError,
    ValidationError,
)
from order_views.kernel.result import Err, Ok, Result

__all__ = [
    "Clock",
    "ConfigError",
    "DomainError",
    "Err",
    "FrozenClock",
    "InfrastructureError",
    "Ok",
    "OrderViewsError",
    "PersistenceError",
    "Result",
    "SerializationError",
    "SystemClock",
    "UnknownCommandError",
    "ValidationError",
    "now_ms",
]
