import itertools
from typing import Dict, List, Optional

from core import settings


class CircularQueueModel:
    """
    固定容量的循环队列。front 指向队头所在槽位，rear 为队尾所在槽位，
    两者都按容量取模回绕。
    """

    def __init__(self, capacity: Optional[int] = None):
        self._id_iter = itertools.count()
        if capacity is None:
            capacity = settings.queue_capacity()
        elif capacity < 1:
            raise ValueError(f"Queue capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._slots: List[Optional[Dict]] = [None] * self._capacity
        self._front = 0
        self._count = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def front_index(self) -> int:
        return self._front

    @property
    def rear_index(self) -> int:
        return (self._front + self._count - 1) % self._capacity

    def __len__(self):
        return self._count

    def is_empty(self) -> bool:
        return self._count == 0

    def is_full(self) -> bool:
        return self._count == self._capacity

    def enqueue(self, value) -> int:
        """返回新元素所在的槽位下标。"""
        if self.is_full():
            raise IndexError("Queue full")
        slot = (self._front + self._count) % self._capacity
        self._slots[slot] = {"id": next(self._id_iter), "value": value}
        self._count += 1
        return slot

    def dequeue(self) -> Dict:
        if self.is_empty():
            raise IndexError("Queue empty")
        info = self._slots[self._front]
        self._slots[self._front] = None
        self._front = (self._front + 1) % self._capacity
        self._count -= 1
        return info

    def front(self):
        if self.is_empty():
            raise IndexError("Queue empty")
        return self._slots[self._front]["value"]

    def rear(self):
        if self.is_empty():
            raise IndexError("Queue empty")
        return self._slots[self.rear_index]["value"]

    def values(self):
        return [
            self._slots[(self._front + offset) % self._capacity]["value"]
            for offset in range(self._count)
        ]

    def clear(self):
        self._slots = [None] * self._capacity
        self._front = 0
        self._count = 0

    def snapshot(self):
        return {
            "slots": [dict(cell) if cell else None for cell in self._slots],
            "front": self.front_index if self._count else None,
            "rear": self.rear_index if self._count else None,
        }
