"""View model – the four materialized views and their constructors.

Every type here is a frozen dataclass. Aggregation never mutates an
instance; it builds a replacement with :func:`dataclasses.replace` and
copies the containing mapping. ``ViewState`` is the snapshot the
:class:`~order_views.application.store.ViewStore` swaps atomically.
"""
from __future__ import annotations

import dataclasses
from typing import Any, Mapping

from order_views.views.order import Order

DEFAULT_TIMELINE_MAX_SIZE = 100


@dataclasses.dataclass(frozen=True, slots=True)
class CustomerStats:
    customer_id: int
    total_orders: int = 0
    total_spent: float = 0.0
    last_order_id: str | None = None
    last_order_timestamp: int | None = None
    first_order_timestamp: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


@dataclasses.dataclass(frozen=True, slots=True)
class ProductStats:
    product_id: str
    total_quantity: float = 0.0
    total_revenue: float = 0.0
    order_count: int = 0
    avg_quantity: float = 0.0
    last_order_timestamp: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


@dataclasses.dataclass(frozen=True, slots=True)
class TimelineEntry:
    order_id: str
    customer_id: int
    product_id: str
    quantity: int
    unit_price: float
    total: float
    status: str
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


@dataclasses.dataclass(frozen=True, slots=True)
class ProcessingStats:
    processor_id: str
    processed_count: int = 0
    error_count: int = 0
    total_revenue_accepted: float = 0.0
    last_processed_timestamp: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


@dataclasses.dataclass(frozen=True)
class ViewState:
    """Aggregate root: one per running engine."""

    processing_stats: ProcessingStats
    customer_stats: Mapping[int, CustomerStats] = dataclasses.field(default_factory=dict)
    product_stats: Mapping[str, ProductStats] = dataclasses.field(default_factory=dict)
    timeline: tuple[TimelineEntry, ...] = ()

    @property
    def processor_id(self) -> str:
        return self.processing_stats.processor_id

    def customer(self, customer_id: int) -> CustomerStats | None:
        return self.customer_stats.get(customer_id)

    def product(self, product_id: str) -> ProductStats | None:
        return self.product_stats.get(product_id)

    def summary(self) -> dict[str, Any]:
        """Derived counts reported by the ``get-stats`` command."""
        return {
            "customer_count": len(self.customer_stats),
            "product_count": len(self.product_stats),
            "timeline_size": len(self.timeline),
            "processing_stats": self.processing_stats,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "customer_stats": {k: v.to_dict() for k, v in self.customer_stats.items()},
            "product_stats": {k: v.to_dict() for k, v in self.product_stats.items()},
            "timeline": [e.to_dict() for e in self.timeline],
            "processing_stats": self.processing_stats.to_dict(),
        }


def new_customer_stats(customer_id: int, first_order: Order) -> CustomerStats:
    """Zeroed customer stats whose first-order timestamp comes from *first_order*."""
    return CustomerStats(customer_id=customer_id, first_order_timestamp=first_order.timestamp)


def new_product_stats(product_id: str) -> ProductStats:
    return ProductStats(product_id=product_id)


def new_processing_stats(processor_id: str, now_ms: int | None = None) -> ProcessingStats:
    return ProcessingStats(processor_id=processor_id, last_processed_timestamp=now_ms)


def extract_timeline_entry(order: Order) -> TimelineEntry:
    """Project *order* onto the fields the timeline keeps."""
    return TimelineEntry(
        order_id=order.order_id,
        customer_id=order.customer_id,
        product_id=order.product_id,
        quantity=order.quantity,
        unit_price=order.unit_price,
        total=order.total,
        status=str(order.status),
        timestamp=order.timestamp,
    )


__all__ = [
    "DEFAULT_TIMELINE_MAX_SIZE",
    "CustomerStats",
    "ProcessingStats",
    "ProductStats",
    "TimelineEntry",
    "ViewState",
    "extract_timeline_entry",
    "new_customer_stats",
    "new_processing_stats",
    "new_product_stats",
]
