"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    OrderViewsError
    ├── DomainError            (domain.py)
    │   ├── ValidationError
    │   └── UnknownCommandError
    └── InfrastructureError    (infrastructure.py)
        ├── PersistenceError
        ├── SerializationError
        └── ConfigError
            ├── MissingRequiredSettingError
            └── InvalidSettingValueError
"""

from order_views.kernel.errors.base import OrderViewsError
from order_views.kernel.errors.domain import DomainError, UnknownCommandError, ValidationError
from order_views.kernel.errors.infrastructure import (
    ConfigError,
    InfrastructureError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
    PersistenceError,
    SerializationError,
)

__all__ = [
    "ConfigError",
    "DomainError",
    "InfrastructureError",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "OrderViewsError",
    "PersistenceError",
    "SerializationError",
    "UnknownCommandError",
    "ValidationError",
]
