"""Domain errors – malformed orders and unroutable commands."""

from __future__ import annotations

from typing import Any

from order_views.kernel.errors.base import OrderViewsError


class DomainError(OrderViewsError):
    code = "domain_error"


class ValidationError(DomainError):
    """An inbound order failed structural or range validation.

    ``explanation`` is the validator's ``"field: reason; ..."`` text and
    ``order_id`` is whatever the caller supplied, possibly ``None``.
    """

    code = "validation_error"

    def __init__(self, explanation: str, *, order_id: Any = None) -> None:
        super().__init__(f"Invalid order format: {explanation}")
        self.explanation = explanation
        self.order_id = order_id

    @property
    def fields(self) -> list[str]:
        """Names of the failing fields, in validation order."""
        return [clause.split(":", 1)[0] for clause in self.explanation.split("; ") if clause]

    def log_context(self) -> dict[str, Any]:
        return {**super().log_context(), "order_id": self.order_id, "invalid_fields": self.fields}

    def failure(self, **extra: Any) -> dict[str, Any]:
        return super().failure(order_id=self.order_id, **extra)


class UnknownCommandError(DomainError):
    code = "unknown_command"

    def __init__(self, kind: Any) -> None:
        super().__init__(f"Unknown command type: {kind}")
        self.kind = kind

    def log_context(self) -> dict[str, Any]:
        return {**super().log_context(), "kind": self.kind}


__all__ = ["DomainError", "UnknownCommandError", "ValidationError"]
