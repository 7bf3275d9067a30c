"""SQLAlchemy ORM tables backing the materialized views.

One table per view, keyed the way it is queried. Timestamps are stored as
epoch milliseconds (``BIGINT``) exactly as they appear in the views.
"""
from __future__ import annotations

from typing import Any

from sqlalchemy import BigInteger, Float, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

TIMELINE_BUCKET = 0


class Base(DeclarativeBase):
    pass


class CustomerStatsRow(Base):
    __tablename__ = "orders_by_customer"

    customer_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    total_orders: Mapped[int] = mapped_column(Integer, default=0)
    total_spent: Mapped[float] = mapped_column(Float, default=0.0)
    last_order_id: Mapped[str | None] = mapped_column(String(256), nullable=True)
    last_order_timestamp: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    first_order_timestamp: Mapped[int | None] = mapped_column(BigInteger, nullable=True)


class ProductStatsRow(Base):
    __tablename__ = "orders_by_product"

    product_id: Mapped[str] = mapped_column(String(256), primary_key=True)
    total_quantity: Mapped[float] = mapped_column(Float, default=0.0)
    total_revenue: Mapped[float] = mapped_column(Float, default=0.0)
    order_count: Mapped[int] = mapped_column(Integer, default=0)
    avg_quantity: Mapped[float] = mapped_column(Float, default=0.0)
    last_order_timestamp: Mapped[int | None] = mapped_column(BigInteger, nullable=True)


class TimelineRow(Base):
    """Single-bucket timeline; newest rows are read with ``ORDER BY timestamp DESC``."""

    __tablename__ = "orders_timeline"

    bucket_id: Mapped[int] = mapped_column(Integer, primary_key=True, default=TIMELINE_BUCKET)
    timestamp: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    order_id: Mapped[str] = mapped_column(String(256), primary_key=True)
    customer_id: Mapped[int] = mapped_column(BigInteger)
    product_id: Mapped[str] = mapped_column(String(256))
    quantity: Mapped[int] = mapped_column(Integer)
    unit_price: Mapped[float] = mapped_column(Float)
    total: Mapped[float] = mapped_column(Float)
    status: Mapped[str] = mapped_column(String(32))


class ProcessingStatsRow(Base):
    __tablename__ = "processing_stats"

    processor_id: Mapped[str] = mapped_column(String(256), primary_key=True)
    processed_count: Mapped[int] = mapped_column(BigInteger, default=0)
    error_count: Mapped[int] = mapped_column(BigInteger, default=0)
    total_revenue_accepted: Mapped[float] = mapped_column(Float, default=0.0)
    last_processed_timestamp: Mapped[int | None] = mapped_column(BigInteger, nullable=True)


async def create_schema(engine: Any) -> None:
    """Create every view table that does not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


__all__ = [
    "TIMELINE_BUCKET",
    "Base",
    "CustomerStatsRow",
    "ProcessingStatsRow",
    "ProductStatsRow",
    "TimelineRow",
    "create_schema",
]
