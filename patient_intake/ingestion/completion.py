"""
Single-assignment completion shared by a parse worker and its timeout guard.
"""

import threading
from typing import Generic, TypeVar

T = TypeVar("T")


class OneShotCompletion(Generic[T]):
    """
    Holds the first outcome settled for one ingestion attempt.

    Only the first settle() call takes effect; later calls return False and
    leave the stored value untouched. One instance per attempt.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._settled = threading.Event()
        self._value: T | None = None

    def settle(self, value: T) -> bool:
        """
        Store value if nothing has been settled yet.

        Returns:
            True if this call won, False if an outcome was already settled
        """
        with self._lock:
            if self._settled.is_set():
                return False
            self._value = value
            self._settled.set()
            return True

    def wait(self, timeout: float | None = None) -> bool:
        """Block until settled or timeout elapses; return whether settled."""
        return self._settled.wait(timeout)

    @property
    def settled(self) -> bool:
        return self._settled.is_set()

    @property
    def value(self) -> T | None:
        return self._value
