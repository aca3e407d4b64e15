"""Worker budget: a bounded count of scan workers that may run at once.

The budget is an object handed to a scan, not a module global, so several
scans can run in one process and tests can inspect its accounting.
"""

from __future__ import annotations

import threading
from typing import Optional

from ..exceptions import BudgetError


class WorkerBudget:
    """Counting budget with non-blocking and blocking acquisition.

    Attributes:
        capacity: Number of worker slots the budget started with
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must be non-negative")
        self._capacity = capacity
        self._available = capacity
        self._cond = threading.Condition(threading.Lock())

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def available(self) -> int:
        with self._cond:
            return self._available

    @property
    def in_use(self) -> int:
        with self._cond:
            return self._capacity - self._available

    def try_acquire(self) -> bool:
        """Take a slot if one is free. Never blocks."""
        with self._cond:
            if self._available > 0:
                self._available -= 1
                return True
            return False

    def acquire(self, timeout: Optional[float] = None) -> bool:
        """Wait until a slot is free and take it.

        Args:
            timeout: Seconds to wait; None waits indefinitely

        Returns:
            True if a slot was taken, False on timeout or zero capacity
        """
        if self._capacity == 0:
            return False
        with self._cond:
            if not self._cond.wait_for(lambda: self._available > 0, timeout=timeout):
                return False
            self._available -= 1
            return True

    def release(self) -> None:
        """Return a slot taken by try_acquire() or acquire().

        Raises:
            BudgetError: If every slot is already free
        """
        with self._cond:
            if self._available >= self._capacity:
                raise BudgetError(self._capacity)
            self._available += 1
            self._cond.notify()

    def __repr__(self) -> str:
        return f"WorkerBudget(capacity={self._capacity}, available={self.available})"
