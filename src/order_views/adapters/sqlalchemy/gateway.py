"""SQLAlchemy adapter – SqlAlchemyViewGateway.

Implements :class:`~order_views.application.gateway.ViewGateway` over an
async SQLAlchemy session factory. Every call runs under
``asyncio.timeout(timeout)``; timeouts and driver errors are re-raised as
:class:`~order_views.kernel.errors.PersistenceError` so the dispatcher can
report them without knowing the backend.
"""
from __future__ import annotations

import asyncio
import contextlib
from typing import Any, AsyncIterator, Callable

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from order_views.adapters.sqlalchemy.tables import (
    TIMELINE_BUCKET,
    CustomerStatsRow,
    ProcessingStatsRow,
    ProductStatsRow,
    TimelineRow,
)
from order_views.application.gateway import ViewGateway
from order_views.kernel.errors import PersistenceError
from order_views.observability.logging import get_logger
from order_views.views.model import (
    DEFAULT_TIMELINE_MAX_SIZE,
    CustomerStats,
    ProcessingStats,
    ProductStats,
    TimelineEntry,
    ViewState,
)

log = get_logger(__name__)


def _customer_from_row(row: CustomerStatsRow) -> CustomerStats:
    return CustomerStats(
        customer_id=row.customer_id,
        total_orders=row.total_orders,
        total_spent=row.total_spent,
        last_order_id=row.last_order_id,
        last_order_timestamp=row.last_order_timestamp,
        first_order_timestamp=row.first_order_timestamp,
    )


def _product_from_row(row: ProductStatsRow) -> ProductStats:
    return ProductStats(
        product_id=row.product_id,
        total_quantity=row.total_quantity,
        total_revenue=row.total_revenue,
        order_count=row.order_count,
        avg_quantity=row.avg_quantity,
        last_order_timestamp=row.last_order_timestamp,
    )


def _timeline_from_row(row: TimelineRow) -> TimelineEntry:
    return TimelineEntry(
        order_id=row.order_id,
        customer_id=row.customer_id,
        product_id=row.product_id,
        quantity=row.quantity,
        unit_price=row.unit_price,
        total=row.total,
        status=row.status,
        timestamp=row.timestamp,
    )


def _processing_from_row(row: ProcessingStatsRow) -> ProcessingStats:
    return ProcessingStats(
        processor_id=row.processor_id,
        processed_count=row.processed_count,
        error_count=row.error_count,
        total_revenue_accepted=row.total_revenue_accepted,
        last_processed_timestamp=row.last_processed_timestamp,
    )


class SqlAlchemyViewGateway(ViewGateway):
    """Durable view storage in any SQLAlchemy async database.

    Parameters
    ----------
    session_factory:
        Zero-argument callable returning an :class:`AsyncSession`, e.g.
        :class:`~order_views.adapters.sqlalchemy.session.SqlAlchemySessionFactory`.
    timeout:
        Seconds allowed for each gateway call.
    timeline_limit:
        Newest timeline entries written per :meth:`save`.
    """

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        *,
        timeout: float = 5.0,
        timeline_limit: int = DEFAULT_TIMELINE_MAX_SIZE,
    ) -> None:
        self._factory = session_factory
        self._timeout = timeout
        self._timeline_limit = timeline_limit

    @contextlib.asynccontextmanager
    async def _guard(self, operation: str) -> AsyncIterator[None]:
        try:
            async with asyncio.timeout(self._timeout):
                yield
        except TimeoutError as exc:
            raise PersistenceError(
                operation,
                f"Persistence operation '{operation}' timed out after {self._timeout}s",
                timed_out=True,
                cause=exc,
            ) from exc
        except SQLAlchemyError as exc:
            raise PersistenceError(
                operation, f"Persistence operation '{operation}' failed: {exc}", cause=exc
            ) from exc

    async def save(self, state: ViewState) -> None:
        async with self._guard("save"):
            async with self._factory() as session, session.begin():
                for stats in state.customer_stats.values():
                    await session.merge(CustomerStatsRow(**stats.to_dict()))
                for stats in state.product_stats.values():
                    await session.merge(ProductStatsRow(**stats.to_dict()))
                for entry in state.timeline[: self._timeline_limit]:
                    await session.merge(TimelineRow(bucket_id=TIMELINE_BUCKET, **entry.to_dict()))
                await session.merge(ProcessingStatsRow(**state.processing_stats.to_dict()))
        log.debug(
            "views_saved",
            customers=len(state.customer_stats),
            products=len(state.product_stats),
            timeline=min(len(state.timeline), self._timeline_limit),
        )

    async def _get(self, operation: str, model: Any, key: Any) -> Any:
        async with self._guard(operation):
            async with self._factory() as session:
                return await session.get(model, key)

    async def get_customer(self, customer_id: int) -> CustomerStats | None:
        row = await self._get("get_customer", CustomerStatsRow, customer_id)
        return None if row is None else _customer_from_row(row)

    async def get_product(self, product_id: str) -> ProductStats | None:
        row = await self._get("get_product", ProductStatsRow, product_id)
        return None if row is None else _product_from_row(row)

    async def get_processing_stats(self, processor_id: str) -> ProcessingStats | None:
        row = await self._get("get_processing_stats", ProcessingStatsRow, processor_id)
        return None if row is None else _processing_from_row(row)

    async def get_timeline(self, limit: int) -> list[TimelineEntry]:
        stmt = (
            select(TimelineRow)
            .where(TimelineRow.bucket_id == TIMELINE_BUCKET)
            .order_by(TimelineRow.timestamp.desc(), TimelineRow.order_id.desc())
            .limit(limit)
        )
        async with self._guard("get_timeline"):
            async with self._factory() as session:
                rows = (await session.execute(stmt)).scalars().all()
        return [_timeline_from_row(r) for r in rows]

    async def liveness_probe(self) -> None:
        async with self._guard("liveness_probe"):
            async with self._factory() as session:
                await session.execute(text("SELECT 1"))

    async def close(self) -> None:
        """Release the pooled connections held by the session factory."""
        dispose = getattr(self._factory, "dispose", None)
        if dispose is not None:
            await dispose()
        log.debug("gateway_closed")


__all__ = ["SqlAlchemyViewGateway"]
