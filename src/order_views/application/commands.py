"""Application – command dispatch over the materialized views.

A single entry point, :func:`execute`, routes a :class:`Command` to the
handler for its :class:`CommandKind`. The set of kinds is closed: the
dispatcher matches every member explicitly and anything else becomes an
"Unknown command type" failure.

Every handler returns a plain dict with a ``success`` flag and never lets a
collaborator's exception escape. During ``consume`` a failed save is
logged only; the in-memory views have already advanced and remain the
source of truth until the next successful save.
"""
from __future__ import annotations

import dataclasses
import enum
from typing import Any, Mapping, assert_never

from order_views.application.aggregator import aggregate_order, increment_errors, init_views
from order_views.application.gateway import ViewGateway
from order_views.application.store import ViewStore
from order_views.config.settings import ProcessorSettings
from order_views.kernel.clock import SYSTEM_CLOCK, Clock
from order_views.kernel.errors import OrderViewsError, PersistenceError, UnknownCommandError, ValidationError
from order_views.kernel.result import Err
from order_views.observability.logging import get_logger
from order_views.views.model import ViewState
from order_views.views.order import normalize_keys
from order_views.views.validation import validate

log = get_logger(__name__)

DEFAULT_TIMELINE_LIMIT = 100


class CommandKind(enum.StrEnum):
    CONSUME = "consume"
    PERSIST = "persist"
    QUERY_CUSTOMER = "query-customer"
    QUERY_PRODUCT = "query-product"
    QUERY_TIMELINE = "query-timeline"
    HEALTH_CHECK = "health-check"
    GET_STATS = "get-stats"
    RESET = "reset"

    @classmethod
    def parse(cls, value: Any) -> "CommandKind | None":
        """Resolve *value* to a kind; ``query_customer`` and ``query-customer`` both match."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower().replace("_", "-"))
        except ValueError:
            return None


@dataclasses.dataclass(frozen=True)
class Command:
    """A tagged request: ``kind`` selects the handler, ``data`` is its input."""

    kind: CommandKind | str
    data: Any = dataclasses.field(default_factory=dict)

    @classmethod
    def of(cls, command: "Command | Mapping[str, Any]") -> "Command":
        """Accept a :class:`Command` or a mapping with ``kind`` (or ``type``) and ``data``."""
        if isinstance(command, Command):
            return command
        kind = command.get("kind", command.get("type"))
        data = command.get("data")
        return cls(kind=kind, data={} if data is None else data)


@dataclasses.dataclass
class ExecutionContext:
    """Collaborators shared by every command.

    ``gateway`` is ``None`` when the processor runs without durable storage;
    ``consume`` still works, storage-bound commands report failure.
    """

    view_store: ViewStore
    gateway: ViewGateway | None
    config: ProcessorSettings = dataclasses.field(default_factory=ProcessorSettings)
    clock: Clock = SYSTEM_CLOCK

    @classmethod
    def create(
        cls,
        config: ProcessorSettings,
        gateway: ViewGateway | None = None,
        *,
        clock: Clock = SYSTEM_CLOCK,
    ) -> "ExecutionContext":
        """Build a context around freshly initialised views."""
        store = ViewStore(init_views(config.processor_id, now_ms=clock.now_ms()))
        return cls(view_store=store, gateway=gateway, config=config, clock=clock)


def _field(data: Any, name: str, default: Any = None) -> Any:
    if isinstance(data, Mapping):
        if name in data:
            return data[name]
        return data.get(name.replace("_", "-"), default)
    return getattr(data, name, default)


def _error_context(exc: Exception) -> dict[str, Any]:
    if isinstance(exc, OrderViewsError):
        return exc.log_context()
    return {"error": str(exc), "error_code": type(exc).__name__}


def _require_gateway(ctx: ExecutionContext) -> ViewGateway:
    if ctx.gateway is None:
        raise PersistenceError("gateway", "Persistence gateway not available")
    return ctx.gateway


async def _save_best_effort(ctx: ExecutionContext, state: ViewState, order_id: Any) -> None:
    if ctx.gateway is None:
        return
    try:
        await ctx.gateway.save(state)
        log.debug("views_persisted", order_id=order_id)
    except Exception as exc:  # noqa: BLE001
        log.error("views_persist_failed", **{"order_id": order_id, **_error_context(exc)})


async def _consume(ctx: ExecutionContext, data: Any) -> dict[str, Any]:
    order_id = _field(data, "order_id")
    try:
        result = validate(normalize_keys(data) if isinstance(data, Mapping) else data)
        if isinstance(result, Err):
            raise ValidationError(result.error, order_id=order_id)
        order = result.value

        stamp = ctx.clock.now_ms()
        updated = ctx.view_store.update(
            lambda views: aggregate_order(views, order, ctx.config, now_ms=stamp)
        )
        log.debug("order_aggregated", order_id=order.order_id)
    except ValidationError as exc:
        log.error("order_consume_failed", **exc.log_context())
        ctx.view_store.update(increment_errors)
        return exc.failure()
    except Exception as exc:  # noqa: BLE001
        log.error("order_consume_failed", **{"order_id": order_id, **_error_context(exc)})
        ctx.view_store.update(increment_errors)
        return {"success": False, "error": str(exc), "order_id": order_id}

    await _save_best_effort(ctx, updated, order.order_id)
    return {"success": True, "order_id": order.order_id, "views": updated}


async def _persist(ctx: ExecutionContext) -> dict[str, Any]:
    if ctx.gateway is None:
        log.warning("views_persist_skipped", reason="gateway not available")
        return {"success": False, "error": "Persistence gateway not available"}
    try:
        log.info("views_persisting")
        await ctx.gateway.save(ctx.view_store.read())
        return {"success": True}
    except Exception as exc:  # noqa: BLE001
        log.error("views_persist_failed", **_error_context(exc))
        return {"success": False, "error": f"Failed to save views: {exc}"}


async def _query_customer(ctx: ExecutionContext, data: Any) -> dict[str, Any]:
    customer_id = _field(data, "customer_id")
    try:
        stats = await _require_gateway(ctx).get_customer(customer_id)
        return {"success": True, "data": stats}
    except Exception as exc:  # noqa: BLE001
        log.error("customer_query_failed", customer_id=customer_id, **_error_context(exc))
        return {"success": False, "error": str(exc)}


async def _query_product(ctx: ExecutionContext, data: Any) -> dict[str, Any]:
    product_id = _field(data, "product_id")
    try:
        stats = await _require_gateway(ctx).get_product(product_id)
        return {"success": True, "data": stats}
    except Exception as exc:  # noqa: BLE001
        log.error("product_query_failed", product_id=product_id, **_error_context(exc))
        return {"success": False, "error": str(exc)}


async def _query_timeline(ctx: ExecutionContext, data: Any) -> dict[str, Any]:
    limit = _field(data, "limit", DEFAULT_TIMELINE_LIMIT)
    try:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
            raise ValueError(f"limit must be a positive integer, got {limit!r}")
        entries = await _require_gateway(ctx).get_timeline(limit)
        return {"success": True, "data": entries, "count": len(entries)}
    except Exception as exc:  # noqa: BLE001
        log.error("timeline_query_failed", limit=limit, **_error_context(exc))
        return {"success": False, "error": str(exc)}


async def _health_check(ctx: ExecutionContext) -> dict[str, Any]:
    stats = ctx.view_store.read().processing_stats
    try:
        await _require_gateway(ctx).liveness_probe()
        return {"success": True, "status": "healthy", "stats": stats, "cassandra": "connected"}
    except Exception as exc:  # noqa: BLE001
        log.error("health_check_failed", **_error_context(exc))
        return {"success": False, "status": "unhealthy", "error": str(exc)}


def _get_stats(ctx: ExecutionContext) -> dict[str, Any]:
    return {"success": True, "stats": ctx.view_store.read().summary()}


def _reset(ctx: ExecutionContext) -> dict[str, Any]:
    processor_id = ctx.config.processor_id
    log.warning("views_reset", processor_id=processor_id)
    ctx.view_store.reset(init_views(processor_id, now_ms=ctx.clock.now_ms()))
    return {"success": True, "message": "Views reset to initial state"}


async def _route(ctx: ExecutionContext, kind: CommandKind, data: Any) -> dict[str, Any]:
    match kind:
        case CommandKind.CONSUME:
            return await _consume(ctx, data)
        case CommandKind.PERSIST:
            return await _persist(ctx)
        case CommandKind.QUERY_CUSTOMER:
            return await _query_customer(ctx, data)
        case CommandKind.QUERY_PRODUCT:
            return await _query_product(ctx, data)
        case CommandKind.QUERY_TIMELINE:
            return await _query_timeline(ctx, data)
        case CommandKind.HEALTH_CHECK:
            return await _health_check(ctx)
        case CommandKind.GET_STATS:
            return _get_stats(ctx)
        case CommandKind.RESET:
            return _reset(ctx)
        case _:
            assert_never(kind)


async def execute(ctx: ExecutionContext, command: Command | Mapping[str, Any]) -> dict[str, Any]:
    """Run *command* against *ctx* and return its structured result.

    Example::

        await execute(ctx, Command(CommandKind.CONSUME, order))
        await execute(ctx, {"kind": "query-timeline", "data": {"limit": 10}})
    """
    try:
        cmd = Command.of(command)
        kind = CommandKind.parse(cmd.kind)
        if kind is None:
            error = UnknownCommandError(cmd.kind)
            log.warning("unknown_command", **error.log_context())
            return error.failure()
        return await _route(ctx, kind, cmd.data)
    except Exception as exc:  # noqa: BLE001
        log.error("command_failed", **_error_context(exc))
        return {"success": False, "error": str(exc)}


class CommandDispatcher:
    """Binds an :class:`ExecutionContext` so callers only pass commands."""

    def __init__(self, context: ExecutionContext) -> None:
        self._context = context

    @property
    def context(self) -> ExecutionContext:
        return self._context

    async def dispatch(self, command: Command | Mapping[str, Any]) -> dict[str, Any]:
        return await execute(self._context, command)


def result_to_dict(result: Mapping[str, Any]) -> dict[str, Any]:
    """Render a command result with every view converted to plain dicts."""

    def _plain(value: Any) -> Any:
        if hasattr(value, "to_dict"):
            return value.to_dict()
        if isinstance(value, Mapping):
            return {k: _plain(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [_plain(v) for v in value]
        return value

    return {k: _plain(v) for k, v in result.items()}


__all__ = [
    "DEFAULT_TIMELINE_LIMIT",
    "Command",
    "CommandDispatcher",
    "CommandKind",
    "ExecutionContext",
    "execute",
    "result_to_dict",
]
