import itertools
import logging
from typing import Dict, List, Optional

from core import settings

logger = logging.getLogger(__name__)


class StackModel:
    """Growable array stack: fixed slots that double when full, explicit element ids."""

    def __init__(self, capacity: Optional[int] = None):
        self._id_iter = itertools.count()
        if capacity is None:
            capacity = settings.stack_capacity()
        elif capacity < 1:
            raise ValueError(f"Stack capacity must be positive, got {capacity}")
        self._initial_capacity = capacity
        self._slots: List[Optional[Dict]] = [None] * self._initial_capacity
        self._top = 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def snapshot(self):
        return [dict(item) for item in self._slots[: self._top]]

    def push(self, value):
        if self._top == len(self._slots):
            self._grow()
        node_id = next(self._id_iter)
        info = {"id": node_id, "value": value}
        self._slots[self._top] = info
        self._top += 1
        return info

    def pop(self):
        if not self._top:
            raise IndexError("Stack empty")
        self._top -= 1
        info = self._slots[self._top]
        self._slots[self._top] = None
        return info

    def peek(self):
        if not self._top:
            raise IndexError("Stack empty")
        return self._slots[self._top - 1]

    def is_empty(self) -> bool:
        return self._top == 0

    def clear(self):
        self._slots = [None] * self._initial_capacity
        self._top = 0

    def __len__(self):
        return self._top

    def _grow(self):
        grown: List[Optional[Dict]] = [None] * (len(self._slots) * 2)
        grown[: self._top] = self._slots[: self._top]
        self._slots = grown
        logger.debug("stack grew to capacity %d", len(grown))
