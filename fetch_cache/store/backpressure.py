"""
Backpressure guard protecting the store from unbounded queuing.
"""

from shared.errors import BackpressureError
from .base import BaseStore


def admit(store: BaseStore) -> bool:
    """Whether a new store command may be issued.

    A saturated store emits a ``BackpressureError`` diagnostic and the
    caller must skip the store for this fetch. Never blocks or retries.
    """
    if store.pending < store.high_water:
        return True

    store.emit_error(BackpressureError(details={
        "pending": store.pending,
        "high_water": store.high_water
    }))
    return False
