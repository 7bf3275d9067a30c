"""Unit tests for the kernel error hierarchy."""
from __future__ import annotations

import pytest

from order_views.kernel.errors import (
    ConfigError,
    DomainError,
    InfrastructureError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
    OrderViewsError,
    PersistenceError,
    SerializationError,
    UnknownCommandError,
    ValidationError,
)


# ---------------------------------------------------------------------------
# OrderViewsError
# ---------------------------------------------------------------------------


class TestOrderViewsError:
    def test_str_is_message(self) -> None:
        err = OrderViewsError("boom")
        assert str(err) == "boom"
        assert err.message == "boom"
        assert err.code == "order_views_error"

    def test_cause_is_chained_and_logged(self) -> None:
        cause = RuntimeError("root")
        err = OrderViewsError("wrapped", cause=cause)
        assert err.__cause__ is cause
        assert err.log_context() == {
            "error": "wrapped",
            "error_code": "order_views_error",
            "cause": "RuntimeError('root')",
        }

    def test_log_context_without_cause(self) -> None:
        assert "cause" not in OrderViewsError("m").log_context()

    def test_failure_result(self) -> None:
        assert OrderViewsError("nope").failure(order_id="O1") == {
            "success": False,
            "error": "nope",
            "order_id": "O1",
        }

    def test_repr_includes_class_name(self) -> None:
        assert repr(OrderViewsError("m")) == "OrderViewsError('m')"


# ---------------------------------------------------------------------------
# Domain errors
# ---------------------------------------------------------------------------


class TestDomainErrors:
    def test_validation_error_message(self) -> None:
        err = ValidationError("customer_id: missing", order_id="O1")
        assert str(err) == "Invalid order format: customer_id: missing"
        assert err.explanation == "customer_id: missing"
        assert err.order_id == "O1"
        assert err.code == "validation_error"

    def test_validation_error_fields(self) -> None:
        err = ValidationError("customer_id: missing; total: must be positive, got -1")
        assert err.fields == ["customer_id", "total"]

    def test_validation_error_log_context(self) -> None:
        ctx = ValidationError("quantity: must be positive, got 0", order_id="O7").log_context()
        assert ctx["error_code"] == "validation_error"
        assert ctx["order_id"] == "O7"
        assert ctx["invalid_fields"] == ["quantity"]

    def test_validation_error_failure_carries_order_id(self) -> None:
        err = ValidationError("order_id: missing")
        assert err.failure() == {
            "success": False,
            "error": "Invalid order format: order_id: missing",
            "order_id": None,
        }

    def test_unknown_command(self) -> None:
        err = UnknownCommandError("frobnicate")
        assert str(err) == "Unknown command type: frobnicate"
        assert err.kind == "frobnicate"
        assert err.log_context()["kind"] == "frobnicate"
        assert err.failure() == {"success": False, "error": "Unknown command type: frobnicate"}

    @pytest.mark.parametrize("cls", [ValidationError, UnknownCommandError])
    def test_domain_errors_share_base(self, cls) -> None:
        assert issubclass(cls, DomainError)
        assert issubclass(cls, OrderViewsError)


# ---------------------------------------------------------------------------
# Infrastructure errors
# ---------------------------------------------------------------------------


class TestInfrastructureErrors:
    def test_persistence_default_message(self) -> None:
        err = PersistenceError("save")
        assert str(err) == "Persistence operation 'save' failed"
        assert err.operation == "save"
        assert err.timed_out is False

    def test_persistence_log_context(self) -> None:
        err = PersistenceError("get_timeline", "slow", timed_out=True, cause=TimeoutError())
        ctx = err.log_context()
        assert ctx["operation"] == "get_timeline"
        assert ctx["timed_out"] is True
        assert ctx["error_code"] == "persistence_error"
        assert "cause" in ctx

    def test_persistence_custom_message(self) -> None:
        assert str(PersistenceError("save", "disk full")) == "disk full"

    def test_serialization_payload_size(self) -> None:
        err = SerializationError("bad json", payload=b"{")
        assert err.payload == b"{"
        assert err.payload_size == 1
        assert err.log_context()["payload_size"] == 1
        assert isinstance(err, InfrastructureError)

    def test_serialization_payload_size_unknown_for_objects(self) -> None:
        assert SerializationError("bad", payload=object()).payload_size is None
        assert SerializationError("bad").payload_size is None


# ---------------------------------------------------------------------------
# Config errors
# ---------------------------------------------------------------------------


class TestConfigErrors:
    def test_invalid_value(self) -> None:
        err = InvalidSettingValueError("PROCESSOR_BATCH_SIZE", "lots", "not an int")
        assert str(err) == "Setting 'PROCESSOR_BATCH_SIZE' has invalid value 'lots': not an int"
        assert err.setting == "PROCESSOR_BATCH_SIZE"
        assert err.value == "lots"
        assert err.reason == "not an int"
        assert err.log_context()["setting"] == "PROCESSOR_BATCH_SIZE"

    def test_missing_setting(self) -> None:
        err = MissingRequiredSettingError("DATABASE_URL")
        assert str(err) == "Required setting 'DATABASE_URL' is missing"
        assert err.code == "missing_required_setting"

    def test_generic_config_error_has_no_setting(self) -> None:
        assert ConfigError("broken").log_context()["setting"] is None

    @pytest.mark.parametrize("cls", [MissingRequiredSettingError, InvalidSettingValueError])
    def test_config_errors_join_hierarchy(self, cls) -> None:
        assert issubclass(cls, ConfigError)
        assert issubclass(cls, InfrastructureError)
        assert issubclass(cls, OrderViewsError)
