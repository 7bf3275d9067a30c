"""Testing generators – Hypothesis strategies for orders.

Requires the ``hypothesis`` package (``pip install "order-views[test]"``).

Example::

    @given(st.lists(order_strategy(), max_size=50))
    def test_timeline_is_capped(orders):
        ...
"""
from __future__ import annotations

from hypothesis import strategies as st

from order_views.views.order import Order, OrderStatus


def order_strategy(
    *,
    customer_ids: tuple[int, ...] = (1, 2, 3),
    product_ids: tuple[str, ...] = ("P1", "P2", "P3"),
) -> st.SearchStrategy[Order]:
    """Valid orders drawn from a small id space so views collide often."""
    return st.builds(
        Order,
        order_id=st.text(alphabet="ABCDEFGHIJ0123456789", min_size=1, max_size=8),
        customer_id=st.sampled_from(customer_ids),
        product_id=st.sampled_from(product_ids),
        quantity=st.integers(min_value=1, max_value=1_000),
        unit_price=st.floats(min_value=0.01, max_value=10_000, allow_nan=False, allow_infinity=False),
        total=st.floats(min_value=0.01, max_value=1_000_000, allow_nan=False, allow_infinity=False),
        timestamp=st.integers(min_value=1, max_value=2**62),
        status=st.sampled_from(list(OrderStatus)),
    )


def order_payload_strategy() -> st.SearchStrategy[dict]:
    """Valid orders as plain mappings, the shape received from the stream."""
    return order_strategy().map(lambda o: o.to_dict())


__all__ = ["order_payload_strategy", "order_strategy"]
