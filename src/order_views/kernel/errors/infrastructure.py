"""Infrastructure errors – storage, payload and configuration failures."""

from __future__ import annotations

from typing import Any

from order_views.kernel.errors.base import OrderViewsError


class InfrastructureError(OrderViewsError):
    code = "infrastructure_error"


class PersistenceError(InfrastructureError):
    """A view gateway read, write or liveness query failed or timed out.

    ``operation`` is the gateway method name (``save``, ``get_customer`` ...);
    ``timed_out`` separates deadline overruns from driver errors.
    """

    code = "persistence_error"

    def __init__(
        self,
        operation: str,
        message: str | None = None,
        *,
        timed_out: bool = False,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message or f"Persistence operation '{operation}' failed", cause=cause)
        self.operation = operation
        self.timed_out = timed_out

    def log_context(self) -> dict[str, Any]:
        return {**super().log_context(), "operation": self.operation, "timed_out": self.timed_out}


class SerializationError(InfrastructureError):
    """A stream record body could not be decoded into an order."""

    code = "serialization_error"

    def __init__(self, message: str, *, payload: Any = None, cause: BaseException | None = None) -> None:
        super().__init__(message, cause=cause)
        self.payload = payload

    @property
    def payload_size(self) -> int | None:
        if isinstance(self.payload, (bytes, bytearray, str)):
            return len(self.payload)
        return None

    def log_context(self) -> dict[str, Any]:
        return {**super().log_context(), "payload_size": self.payload_size}


class ConfigError(InfrastructureError):
    """Settings could not be loaded or failed validation.

    ``setting`` is the environment key (``PROCESSOR_BATCH_SIZE``) or field
    name at fault, when one is known.
    """

    code = "config_error"

    def __init__(self, message: str, *, setting: str | None = None, cause: BaseException | None = None) -> None:
        super().__init__(message, cause=cause)
        self.setting = setting

    def log_context(self) -> dict[str, Any]:
        return {**super().log_context(), "setting": self.setting}


class MissingRequiredSettingError(ConfigError):
    code = "missing_required_setting"

    def __init__(self, setting: str) -> None:
        super().__init__(f"Required setting '{setting}' is missing", setting=setting)


class InvalidSettingValueError(ConfigError):
    code = "invalid_setting_value"

    def __init__(self, setting: str, value: object, reason: str) -> None:
        super().__init__(f"Setting '{setting}' has invalid value {value!r}: {reason}", setting=setting)
        self.value = value
        self.reason = reason


__all__ = [
    "ConfigError",
    "InfrastructureError",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "PersistenceError",
    "SerializationError",
]
