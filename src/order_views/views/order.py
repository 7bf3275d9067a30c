"""Inbound order event – the immutable record every view is derived from."""
from __future__ import annotations

import dataclasses
import enum
import json
import math
from typing import Any, Mapping

from order_views.kernel.errors import SerializationError

ORDER_FIELDS: tuple[str, ...] = (
    "order_id",
    "customer_id",
    "product_id",
    "quantity",
    "unit_price",
    "total",
    "timestamp",
    "status",
)

_INTEGRAL_FIELDS = ("customer_id", "quantity", "timestamp")
_FLOAT_FIELDS = ("unit_price", "total")


class OrderStatus(enum.StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DENIED = "denied"


@dataclasses.dataclass(frozen=True, slots=True)
class Order:
    """A validated order as received from the stream.

    Instances are produced by :func:`order_views.views.validation.validate`;
    constructing one directly skips validation.
    """

    order_id: str
    customer_id: int
    product_id: str
    quantity: int
    unit_price: float
    total: float
    timestamp: int
    status: OrderStatus

    @property
    def is_accepted(self) -> bool:
        return self.status is OrderStatus.ACCEPTED

    def to_dict(self) -> dict[str, Any]:
        data = dataclasses.asdict(self)
        data["status"] = str(self.status)
        return data


def normalize_keys(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Return *payload* with ``kebab-case`` keys rewritten to ``snake_case``."""
    return {str(k).replace("-", "_"): v for k, v in payload.items()}


def _coerce_integral(name: str, value: Any) -> Any:
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) and value.is_integer() else value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise SerializationError(f"{name}: cannot coerce {value!r} to int", payload=value) from exc
    return value


def _coerce_float(name: str, value: Any) -> Any:
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, float):
        return value
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            # left as int; the validator reports it as not finite
            return value
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as exc:
            raise SerializationError(f"{name}: cannot coerce {value!r} to float", payload=value) from exc
    return value


def deserialize_order(raw: bytes | str | Mapping[str, Any]) -> dict[str, Any]:
    """Decode a stream message body into an order mapping.

    Integral fields (``customer_id``, ``quantity``, ``timestamp``) become
    ``int`` and monetary fields (``unit_price``, ``total``) become ``float``.
    Missing fields are left missing so the validator can report them.

    Raises:
        SerializationError: the body is not a JSON object or a numeric
            field cannot be coerced.
    """
    if isinstance(raw, Mapping):
        parsed: Any = raw
    else:
        try:
            parsed = json.loads(raw)
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Failed to deserialize order: {exc}", payload=raw) from exc
    if not isinstance(parsed, Mapping):
        raise SerializationError(
            f"Failed to deserialize order: expected a JSON object, got {type(parsed).__name__}",
            payload=raw,
        )

    order = normalize_keys(parsed)
    for name in _INTEGRAL_FIELDS:
        if name in order:
            order[name] = _coerce_integral(name, order[name])
    for name in _FLOAT_FIELDS:
        if name in order:
            order[name] = _coerce_float(name, order[name])
    return order


__all__ = ["ORDER_FIELDS", "Order", "OrderStatus", "deserialize_order", "normalize_keys"]
