"""Views – order record, materialized view types and validation."""
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
from order_views.views.order import ORDER_FIELDS, Order, OrderStatus, deserialize_order
from order_views.views.validation import explain, is_valid_order, validate

__all__ = [
    "DEFAULT_TIMELINE_MAX_SIZE",
    "ORDER_FIELDS",
    "CustomerStats",
    "Order",
    "OrderStatus",
    "ProcessingStats",
    "ProductStats",
    "TimelineEntry",
    "ViewState",
    "deserialize_order",
    "explain",
    "extract_timeline_entry",
    "is_valid_order",
    "new_customer_stats",
    "new_processing_stats",
    "new_product_stats",
    "validate",
]
