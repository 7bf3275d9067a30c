"""Resilience – retry with exponential backoff."""
from order_views.resilience.retry import ExponentialBackoff, RetryPolicy

__all__ = ["ExponentialBackoff", "RetryPolicy"]
