"""Application – ViewGateway port (durable storage of view snapshots)."""
from __future__ import annotations

import abc

from order_views.views.model import CustomerStats, ProcessingStats, ProductStats, TimelineEntry, ViewState


class ViewGateway(abc.ABC):
    """Port – durable copy of the materialized views.

    Stored views are derived from the in-memory snapshot and lag behind it
    by at most one save. Implementations raise
    :class:`~order_views.kernel.errors.PersistenceError` on failure and
    bound every call with a timeout.
    """

    @abc.abstractmethod
    async def save(self, state: ViewState) -> None:
        """Upsert every view in *state*."""

    @abc.abstractmethod
    async def get_customer(self, customer_id: int) -> CustomerStats | None: ...

    @abc.abstractmethod
    async def get_product(self, product_id: str) -> ProductStats | None: ...

    @abc.abstractmethod
    async def get_timeline(self, limit: int) -> list[TimelineEntry]:
        """Return at most *limit* entries, newest first."""

    @abc.abstractmethod
    async def get_processing_stats(self, processor_id: str) -> ProcessingStats | None: ...

    @abc.abstractmethod
    async def liveness_probe(self) -> None:
        """Run a trivial query; raise when the store is unreachable."""

    async def close(self) -> None:
        """Release connections held by the gateway."""


__all__ = ["ViewGateway"]
