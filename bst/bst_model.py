import itertools
import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


class BSTModel:
    """
    简单的二叉搜索树数据模型，节点使用唯一 id，方便视图做增量动画。
    不做任何再平衡；双孩子删除统一使用中序后继。
    """

    def __init__(self):
        self._id_iter = itertools.count()
        self._nodes: Dict[int, Dict[str, Any]] = {}
        self._root: Optional[int] = None
        self._count = 0

    @property
    def length(self) -> int:
        return self._count

    def __len__(self):
        return self._count

    def __contains__(self, value):
        return self.search(value)

    def __iter__(self) -> Iterator[Any]:
        return self.in_order()

    @property
    def tree_height(self) -> int:
        # 逐层计数，退化成链时也不会递归过深
        height = 0
        level = [self._root] if self._root is not None else []
        while level:
            height += 1
            level = [
                child
                for node_id in level
                for child in (self._nodes[node_id]["left"], self._nodes[node_id]["right"])
                if child is not None
            ]
        return height

    def clear(self):
        self._nodes.clear()
        self._root = None
        self._count = 0
        self._id_iter = itertools.count()

    def create_from_iterable(self, values):
        self.clear()
        for value in values:
            self.insert(value)

    def insert(self, value) -> Tuple[int, List[int]]:
        """
        返回 (承载该值的节点 id, 搜索路径)。
        路径只包含插入前已存在的节点；值已存在时树保持不变。
        """
        parent_id, side, node_id, path = self._locate(value)
        if node_id is not None:
            return node_id, path
        node_id = self._make_node(value)
        self._set_child(parent_id, side, node_id)
        return node_id, path

    def delete(self, value) -> Tuple[Optional[int], List[int]]:
        """
        返回 (被释放节点 id, 搜索路径)；未找到时 id 为 None。
        双孩子节点改写为中序后继的值，释放的是后继节点。
        """
        parent_id, side, node_id, path = self._locate(value)
        if node_id is None:
            return None, path

        node = self._nodes[node_id]
        if node["left"] is not None and node["right"] is not None:
            parent_id, side = node_id, "right"
            succ_id = node["right"]
            path.append(succ_id)
            while self._nodes[succ_id]["left"] is not None:
                parent_id, side = succ_id, "left"
                succ_id = self._nodes[succ_id]["left"]
                path.append(succ_id)
            logger.debug("replacing %s with successor %s", value, self._nodes[succ_id]["value"])
            node["value"] = self._nodes[succ_id]["value"]
            node_id = succ_id

        self._set_child(parent_id, side, self._splice(node_id))
        return node_id, path

    def search(self, value) -> bool:
        found_id, _ = self.find(value)
        return found_id is not None

    def find(self, value) -> Tuple[Optional[int], List[int]]:
        _, _, node_id, path = self._locate(value)
        return node_id, path

    def in_order(self) -> Iterator[Any]:
        stack: List[int] = []
        current_id = self._root
        while stack or current_id is not None:
            while current_id is not None:
                stack.append(current_id)
                current_id = self._nodes[current_id]["left"]
            current_id = stack.pop()
            yield self._nodes[current_id]["value"]
            current_id = self._nodes[current_id]["right"]

    def pre_order(self) -> Iterator[Any]:
        stack = [self._root] if self._root is not None else []
        while stack:
            node = self._nodes[stack.pop()]
            yield node["value"]
            if node["right"] is not None:
                stack.append(node["right"])
            if node["left"] is not None:
                stack.append(node["left"])

    def post_order(self) -> Iterator[Any]:
        # 反向的“根-右-左”即为后序
        order = []
        stack = [self._root] if self._root is not None else []
        while stack:
            node_id = stack.pop()
            order.append(node_id)
            node = self._nodes[node_id]
            if node["left"] is not None:
                stack.append(node["left"])
            if node["right"] is not None:
                stack.append(node["right"])
        for node_id in reversed(order):
            yield self._nodes[node_id]["value"]

    def snapshot(self) -> Dict[str, Any]:
        return {
            "root": self._root,
            "nodes": [
                {
                    "id": node_id,
                    "value": node["value"],
                    "left": node["left"],
                    "right": node["right"],
                }
                for node_id, node in self._nodes.items()
            ],
        }

    def value_of(self, node_id: int):
        node = self._nodes.get(node_id)
        return node["value"] if node else None

    # ---------- Internal helpers ----------

    def _locate(self, value):
        """Descend to value: (parent id, side in parent, node id or None, path)."""
        path: List[int] = []
        parent_id, side = None, None
        current_id = self._root
        while current_id is not None:
            path.append(current_id)
            node = self._nodes[current_id]
            if value == node["value"]:
                break
            parent_id, side = current_id, "left" if value < node["value"] else "right"
            current_id = node[side]
        return parent_id, side, current_id, path

    def _set_child(self, parent_id, side, child_id):
        if parent_id is None:
            self._root = child_id
        else:
            self._nodes[parent_id][side] = child_id

    def _make_node(self, value) -> int:
        node_id = next(self._id_iter)
        self._nodes[node_id] = {"id": node_id, "value": value, "left": None, "right": None}
        self._count += 1
        return node_id

    def _splice(self, node_id: int) -> Optional[int]:
        # 至多一个孩子：直接用孩子顶替
        node = self._nodes.pop(node_id)
        self._count -= 1
        return node["right"] if node["left"] is None else node["left"]
