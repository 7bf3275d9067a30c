"""Adapters – concrete infrastructure (SQLAlchemy storage, Kafka consumer).

Import from the sub-packages directly::

    from order_views.adapters.sqlalchemy import SqlAlchemyViewGateway
    from order_views.adapters.kafka import OrderStreamConsumer
"""
