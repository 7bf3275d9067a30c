"""Order validation.

:func:`validate` is side-effect free and never raises for bad input: an
invalid order is an ordinary outcome reported as ``Err(explanation)``.
The explanation lists one ``field: reason`` clause per failing field, in
declaration order, joined with ``"; "``.
"""
from __future__ import annotations

import math
from typing import Any, Callable, Mapping

from order_views.kernel.result import Err, Ok, Result
from order_views.views.order import ORDER_FIELDS, Order, OrderStatus

_STATUSES = frozenset(s.value for s in OrderStatus)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _string(value: Any) -> str | None:
    if not isinstance(value, str):
        return f"expected string, got {type(value).__name__}"
    return None


def _positive_int(value: Any) -> str | None:
    if not _is_int(value):
        return f"expected integer, got {type(value).__name__}"
    if value <= 0:
        return f"must be positive, got {value}"
    return None


def _positive_number(value: Any) -> str | None:
    if not _is_number(value):
        return f"expected number, got {type(value).__name__}"
    try:
        finite = math.isfinite(value)
    except OverflowError:
        return "must be finite, got an integer too large for a float"
    if not finite:
        return f"must be finite, got {value}"
    if value <= 0:
        return f"must be positive, got {value}"
    return None


def _status(value: Any) -> str | None:
    if not isinstance(value, str) or value not in _STATUSES:
        return f"must be one of {sorted(_STATUSES)}, got {value!r}"
    return None


_CHECKS: dict[str, Callable[[Any], str | None]] = {
    "order_id": _string,
    "customer_id": _positive_int,
    "product_id": _string,
    "quantity": _positive_int,
    "unit_price": _positive_number,
    "total": _positive_number,
    "timestamp": _positive_int,
    "status": _status,
}


def explain(order: Any) -> list[str]:
    """Return every validation failure for *order* (empty when valid).

    An :class:`Order` instance is checked through its ``to_dict`` form.
    """
    if isinstance(order, Order):
        order = order.to_dict()
    if not isinstance(order, Mapping):
        return [f"order: expected mapping, got {type(order).__name__}"]

    problems: list[str] = []
    for name in ORDER_FIELDS:
        if name not in order or order[name] is None:
            problems.append(f"{name}: missing")
            continue
        reason = _CHECKS[name](order[name])
        if reason is not None:
            problems.append(f"{name}: {reason}")
    return problems


def validate(order: Any) -> Result[Order, str]:
    """Check presence, type and range of every order field.

    Returns ``Ok(Order)`` with a frozen :class:`Order` or
    ``Err(explanation)``.
    """
    problems = explain(order)
    if problems:
        return Err("; ".join(problems))
    if isinstance(order, Order):
        return Ok(order)
    return Ok(
        Order(
            order_id=order["order_id"],
            customer_id=order["customer_id"],
            product_id=order["product_id"],
            quantity=order["quantity"],
            unit_price=float(order["unit_price"]),
            total=float(order["total"]),
            timestamp=order["timestamp"],
            status=OrderStatus(order["status"]),
        )
    )


def is_valid_order(order: Any) -> bool:
    return not explain(order)


__all__ = ["explain", "is_valid_order", "validate"]
