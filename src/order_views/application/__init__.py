"""Application – aggregation, the view store, the gateway port and command dispatch."""
from order_views.application.aggregator import (
    add_to_timeline,
    aggregate_batch,
    aggregate_order,
    calculate_avg_quantity,
    increment_errors,
    increment_processed,
    init_views,
    update_customer_stats,
    update_product_stats,
)
from order_views.application.commands import (
    Command,
    CommandDispatcher,
    CommandKind,
    ExecutionContext,
    execute,
    result_to_dict,
)
from order_views.application.gateway import ViewGateway
from order_views.application.processing import process_batch, process_record
from order_views.application.store import ViewStore

__all__ = [
    "Command",
    "CommandDispatcher",
    "CommandKind",
    "ExecutionContext",
    "ViewGateway",
    "ViewStore",
    "add_to_timeline",
    "aggregate_batch",
    "aggregate_order",
    "calculate_avg_quantity",
    "execute",
    "increment_errors",
    "increment_processed",
    "init_views",
    "process_batch",
    "process_record",
    "result_to_dict",
    "update_customer_stats",
    "update_product_stats",
]
