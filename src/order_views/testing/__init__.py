"""Testing helpers – in-memory gateways and order fixtures.

Hypothesis strategies live in :mod:`order_views.testing.strategies` and
need the ``test`` extra.
"""
from order_views.testing.fakes import FailingViewGateway, InMemoryViewGateway, make_order, make_order_payload

__all__ = ["FailingViewGateway", "InMemoryViewGateway", "make_order", "make_order_payload"]
