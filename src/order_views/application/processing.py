"""Application – turn raw stream records into ``consume`` commands."""
from __future__ import annotations

from typing import Any, Iterable

from order_views.application.aggregator import increment_errors
from order_views.application.commands import Command, CommandKind, ExecutionContext, execute
from order_views.kernel.errors import SerializationError
from order_views.observability.logging import get_logger
from order_views.views.order import deserialize_order

log = get_logger(__name__)


async def process_record(ctx: ExecutionContext, raw: bytes | str | Any) -> dict[str, Any]:
    """Deserialize one record body and consume it.

    A body that cannot be decoded counts as an error in the processing
    stats, the same as an order that fails validation.
    """
    try:
        order = deserialize_order(raw)
    except SerializationError as exc:
        log.error("record_deserialize_failed", **exc.log_context())
        ctx.view_store.update(increment_errors)
        return {"success": False, "error": str(exc)}
    return await execute(ctx, Command(CommandKind.CONSUME, order))


async def process_batch(ctx: ExecutionContext, records: Iterable[bytes | str | Any]) -> dict[str, int]:
    """Consume *records* in order and report ``{total, success, errors}``."""
    total = success = 0
    for raw in records:
        result = await process_record(ctx, raw)
        total += 1
        if result["success"]:
            success += 1
    return {"total": total, "success": success, "errors": total - success}


__all__ = ["process_batch", "process_record"]
