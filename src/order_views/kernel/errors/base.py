"""Root error class for the order-views error hierarchy."""

from __future__ import annotations

from typing import Any, ClassVar


class OrderViewsError(Exception):
    """Root of the error hierarchy.

    Errors never escape the command dispatcher; they are turned into
    failure results and structured log events. ``code`` names the failure
    in logs and :meth:`log_context` supplies its key/value pairs.
    """

    code: ClassVar[str] = "order_views_error"

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"

    def log_context(self) -> dict[str, Any]:
        """Fields merged into the log event that reports this error."""
        context: dict[str, Any] = {"error": self.message, "error_code": self.code}
        if self.__cause__ is not None:
            context["cause"] = repr(self.__cause__)
        return context

    def failure(self, **extra: Any) -> dict[str, Any]:
        """Command failure result for this error."""
        return {"success": False, "error": self.message, **extra}


__all__ = ["OrderViewsError"]
