"""
order_views – materialized views over an order event stream.

Import path convention::

    from order_views.views import Order, ViewState, validate
    from order_views.application import ViewStore, execute, Command, CommandKind
    from order_views.adapters.sqlalchemy import SqlAlchemyViewGateway
    from order_views.runtime import start_processor, stop_processor
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
