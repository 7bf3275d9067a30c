"""Application – ViewStore, the single atomic reference to the current views.

The store holds an immutable :class:`~order_views.views.model.ViewState`
and replaces it with optimistic compare-and-set. ``update`` reads the
snapshot, runs the transform with no lock held, then swaps only if the
snapshot is still the one it started from; otherwise it retries against
the newer snapshot. The lock guards the identity comparison and the swap
and nothing else, so it is never held across a transform or any I/O.

Because a transform may run more than once per call, it must be pure.
"""
from __future__ import annotations

import threading
from typing import Callable

from order_views.views.model import ViewState

Transform = Callable[[ViewState], ViewState]


class ViewStore:
    """Linearizable holder of the current :class:`ViewState`.

    Example
    -------
    ::

        store = ViewStore(init_views("processor-1"))
        new_state = store.update(lambda s: aggregate_order(s, order, settings, now_ms=ts))
        assert store.read() is new_state
    """

    def __init__(self, initial: ViewState) -> None:
        self._state = initial
        self._version = 0
        self._retries = 0
        self._swap_lock = threading.Lock()

    @property
    def version(self) -> int:
        """Number of snapshots committed since construction."""
        return self._version

    @property
    def retries(self) -> int:
        """Transforms discarded after losing a compare-and-set race."""
        return self._retries

    def read(self) -> ViewState:
        return self._state

    def compare_and_set(self, expected: ViewState, new: ViewState) -> bool:
        with self._swap_lock:
            if self._state is not expected:
                self._retries += 1
                return False
            self._state = new
            self._version += 1
            return True

    def update(self, transform: Transform) -> ViewState:
        """Apply *transform* atomically and return the committed snapshot."""
        while True:
            current = self._state
            candidate = transform(current)
            if self.compare_and_set(current, candidate):
                return candidate

    def reset(self, state: ViewState) -> ViewState:
        """Unconditionally replace the snapshot with *state*."""
        with self._swap_lock:
            self._state = state
            self._version += 1
        return state


__all__ = ["Transform", "ViewStore"]
