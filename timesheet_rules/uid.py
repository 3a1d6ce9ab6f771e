"""
Unique identifier generation for rules.

Every Rule takes its id from a generator at construction time. The module-level
uid() draws from one process-wide generator, so ids are never reused within a
process. Tests and embedders that need deterministic ids can pass their own
UidGenerator to the Rule instead.
"""

import itertools
import threading


class UidGenerator:
    """Thread-safe, monotonically increasing integer ids."""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next_id(self) -> int:
        """Return the next unused id."""
        with self._lock:
            return next(self._counter)

    __call__ = next_id


_default_generator = UidGenerator()


def uid() -> int:
    """Return a process-wide unique id."""
    return _default_generator.next_id()
