"""Pure aggregation of orders into materialized views.

Nothing in this module performs I/O, logs, or reads shared state. Each
function takes a snapshot and returns a new one, so the
:class:`~order_views.application.store.ViewStore` may re-run a transform
after losing a compare-and-set race without observable effects.

The only impure input is the wall clock used for
``last_processed_timestamp``. Callers that apply a transform through the
store should resolve ``now_ms`` once, before calling ``update``, so that
every retry yields the same snapshot.

Customer and product views count every order regardless of status;
``total_revenue_accepted`` counts accepted orders only.
"""
from __future__ import annotations

import dataclasses
from typing import Iterable, Protocol

from order_views.kernel.clock import now_ms as _system_now_ms
from order_views.views.model import (
    DEFAULT_TIMELINE_MAX_SIZE,
    CustomerStats,
    ProcessingStats,
    ProductStats,
    TimelineEntry,
    ViewState,
    extract_timeline_entry,
    new_customer_stats,
    new_processing_stats,
    new_product_stats,
)
from order_views.views.order import Order


class AggregationConfig(Protocol):
    timeline_max_size: int


def _timeline_max_size(config: AggregationConfig | None) -> int:
    size = getattr(config, "timeline_max_size", None)
    return DEFAULT_TIMELINE_MAX_SIZE if size is None else size


def update_customer_stats(current: CustomerStats | None, order: Order) -> CustomerStats:
    """Fold *order* into a customer's stats, creating them on first sight.

    ``first_order_timestamp`` is fixed by the first order and never moves.
    """
    stats = current or new_customer_stats(order.customer_id, order)
    return dataclasses.replace(
        stats,
        total_orders=stats.total_orders + 1,
        total_spent=stats.total_spent + order.total,
        last_order_id=order.order_id,
        last_order_timestamp=order.timestamp,
    )


def calculate_avg_quantity(total_quantity: float, order_count: int) -> float:
    if order_count == 0:
        return 0.0
    return float(total_quantity) / order_count


def update_product_stats(current: ProductStats | None, order: Order) -> ProductStats:
    stats = current or new_product_stats(order.product_id)
    total_quantity = float(stats.total_quantity) + order.quantity
    order_count = stats.order_count + 1
    return dataclasses.replace(
        stats,
        total_quantity=total_quantity,
        total_revenue=stats.total_revenue + order.total,
        order_count=order_count,
        avg_quantity=calculate_avg_quantity(total_quantity, order_count),
        last_order_timestamp=order.timestamp,
    )


def add_to_timeline(
    timeline: tuple[TimelineEntry, ...],
    order: Order,
    max_size: int = DEFAULT_TIMELINE_MAX_SIZE,
) -> tuple[TimelineEntry, ...]:
    """Prepend *order*'s projection, dropping the oldest entries beyond *max_size*."""
    return ((extract_timeline_entry(order),) + tuple(timeline))[:max_size]


def increment_processed(
    stats: ProcessingStats,
    order: Order,
    *,
    now_ms: int | None = None,
) -> ProcessingStats:
    revenue = stats.total_revenue_accepted
    if order.is_accepted:
        revenue += order.total
    return dataclasses.replace(
        stats,
        processed_count=stats.processed_count + 1,
        total_revenue_accepted=revenue,
        last_processed_timestamp=_system_now_ms() if now_ms is None else now_ms,
    )


def init_views(processor_id: str, *, now_ms: int | None = None) -> ViewState:
    """Empty views for a freshly started processor."""
    stamp = _system_now_ms() if now_ms is None else now_ms
    return ViewState(processing_stats=new_processing_stats(processor_id, stamp))


def aggregate_order(
    state: ViewState,
    order: Order,
    config: AggregationConfig | None = None,
    *,
    now_ms: int | None = None,
) -> ViewState:
    """Fold one validated order into every view."""
    customer_stats = dict(state.customer_stats)
    customer_stats[order.customer_id] = update_customer_stats(
        state.customer_stats.get(order.customer_id), order
    )

    product_stats = dict(state.product_stats)
    product_stats[order.product_id] = update_product_stats(
        state.product_stats.get(order.product_id), order
    )

    return ViewState(
        customer_stats=customer_stats,
        product_stats=product_stats,
        timeline=add_to_timeline(state.timeline, order, _timeline_max_size(config)),
        processing_stats=increment_processed(state.processing_stats, order, now_ms=now_ms),
    )


def aggregate_batch(
    state: ViewState,
    orders: Iterable[Order],
    config: AggregationConfig | None = None,
    *,
    now_ms: int | None = None,
) -> ViewState:
    stamp = _system_now_ms() if now_ms is None else now_ms
    for order in orders:
        state = aggregate_order(state, order, config, now_ms=stamp)
    return state


def increment_errors(state: ViewState) -> ViewState:
    """Count one rejected order; every other view is left untouched."""
    stats = state.processing_stats
    return dataclasses.replace(
        state,
        processing_stats=dataclasses.replace(stats, error_count=stats.error_count + 1),
    )


__all__ = [
    "AggregationConfig",
    "add_to_timeline",
    "aggregate_batch",
    "aggregate_order",
    "calculate_avg_quantity",
    "increment_errors",
    "increment_processed",
    "init_views",
    "update_customer_stats",
    "update_product_stats",
]
