import itertools
import logging
from typing import Any, Dict, List, Tuple

logger = logging.getLogger(__name__)


class HeapModel:
    """
    数组实现的二叉大顶堆。下标 i 的孩子位于 2i+1 / 2i+2。
    元素带唯一 id，交换时视图可以追踪每个节点的移动。
    """

    def __init__(self):
        self._id_iter = itertools.count()
        self._items: List[Dict[str, Any]] = []

    @property
    def length(self) -> int:
        return len(self._items)

    def __len__(self):
        return len(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def clear(self):
        self._items.clear()
        self._id_iter = itertools.count()

    def create_from_iterable(self, values):
        self.clear()
        for value in values:
            self.insert(value)

    def insert(self, value) -> Tuple[int, List[int]]:
        """返回 (新元素 id, 上浮过程中与之交换过的元素 id)。"""
        cell = {"id": next(self._id_iter), "value": value}
        self._items.append(cell)
        swapped = self._sift_up(len(self._items) - 1)
        return cell["id"], swapped

    def peek_max(self):
        if not self._items:
            raise IndexError("Heap empty")
        return self._items[0]["value"]

    def extract_max(self) -> Tuple[Dict[str, Any], List[int]]:
        """返回 (被取出的元素, 下沉过程中与末尾元素交换过的元素 id)。"""
        if not self._items:
            raise IndexError("Heap empty")

        top = self._items[0]
        last = self._items.pop()
        if not self._items:
            return top, []

        self._items[0] = last
        swapped = self._sift_down(0)
        logger.debug("extracted %s, %d swaps", top["value"], len(swapped))
        return top, swapped

    def values(self) -> List[Any]:
        return [cell["value"] for cell in self._items]

    def snapshot(self) -> Dict[str, Any]:
        # 以树的形式给出，和 BST/AVL 共用同一个视图
        count = len(self._items)

        def child(index):
            return self._items[index]["id"] if index < count else None

        return {
            "root": self._items[0]["id"] if self._items else None,
            "nodes": [
                {
                    "id": cell["id"],
                    "value": cell["value"],
                    "left": child(2 * idx + 1),
                    "right": child(2 * idx + 2),
                    "index": idx,
                }
                for idx, cell in enumerate(self._items)
            ],
        }

    def value_of(self, node_id: int):
        for cell in self._items:
            if cell["id"] == node_id:
                return cell["value"]
        return None

    # ---------- Internal helpers ----------

    def _sift_up(self, index: int) -> List[int]:
        swapped = []
        while index > 0:
            parent = (index - 1) // 2
            if self._items[parent]["value"] >= self._items[index]["value"]:
                break
            swapped.append(self._items[parent]["id"])
            self._swap(parent, index)
            index = parent
        return swapped

    def _sift_down(self, index: int) -> List[int]:
        swapped = []
        count = len(self._items)
        while True:
            largest = index
            for child in (2 * index + 1, 2 * index + 2):
                if child < count and self._items[child]["value"] > self._items[largest]["value"]:
                    largest = child
            if largest == index:
                return swapped
            swapped.append(self._items[largest]["id"])
            self._swap(index, largest)
            index = largest

    def _swap(self, i: int, j: int):
        self._items[i], self._items[j] = self._items[j], self._items[i]
