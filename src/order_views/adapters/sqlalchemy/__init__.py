"""SQLAlchemy adapter – session factory, view tables and the view gateway."""
from order_views.adapters.sqlalchemy.gateway import SqlAlchemyViewGateway
from order_views.adapters.sqlalchemy.session import SqlAlchemySessionFactory
from order_views.adapters.sqlalchemy.tables import (
    Base,
    CustomerStatsRow,
    ProcessingStatsRow,
    ProductStatsRow,
    TimelineRow,
    create_schema,
)

__all__ = [
    "Base",
    "CustomerStatsRow",
    "ProcessingStatsRow",
    "ProductStatsRow",
    "SqlAlchemySessionFactory",
    "SqlAlchemyViewGateway",
    "TimelineRow",
    "create_schema",
]
