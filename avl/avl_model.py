import itertools
import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


class AVLModel:
    """
    自平衡二叉搜索树（AVL）数据模型。

    节点存放在以 id 为键的字典中，左右孩子槽位保存的是 id，因此旋转只是
    交换三个槽位里的 id。所有修改操作都采用“递归返回新子树根、由调用方
    重新挂接”的方式，回溯路径上的每个节点各自更新高度并自行再平衡。

    Keys are plain ``int`` values; inserting a present key or deleting an
    absent one is a silent no-op.
    """

    def __init__(self):
        self._id_iter = itertools.count()
        self._nodes: Dict[int, Dict[str, Any]] = {}
        self._root: Optional[int] = None
        self._count = 0

        # per-operation trace consumed by the view
        self._path: List[int] = []
        self._rotations: List[Dict[str, Any]] = []
        self._touched: Optional[int] = None

    # ---------- Container protocol ----------

    @property
    def length(self) -> int:
        return self._count

    def __len__(self):
        return self._count

    def __contains__(self, key):
        return self.search(key)

    def __iter__(self) -> Iterator[int]:
        return self.in_order()

    @property
    def root_key(self) -> Optional[int]:
        if self._root is None:
            return None
        return self._nodes[self._root]["key"]

    @property
    def tree_height(self) -> int:
        return self.height(self._root)

    def clear(self):
        self._nodes.clear()
        self._root = None
        self._count = 0
        self._id_iter = itertools.count()

    def create_from_iterable(self, values):
        self.clear()
        for value in values:
            self.insert(value)

    # ---------- Height & balance ----------

    def height(self, node_id: Optional[int]) -> int:
        if node_id is None:
            return 0
        return self._nodes[node_id]["height"]

    def balance_factor(self, node_id: Optional[int]) -> int:
        """Positive means left-heavy, negative means right-heavy."""
        if node_id is None:
            return 0
        node = self._nodes[node_id]
        return self.height(node["left"]) - self.height(node["right"])

    def _update_height(self, node_id: int):
        node = self._nodes[node_id]
        node["height"] = 1 + max(self.height(node["left"]), self.height(node["right"]))

    # ---------- Rotations ----------

    def _rotate_right(self, a_id: int) -> int:
        a = self._nodes[a_id]
        b_id = a["left"]
        b = self._nodes[b_id]
        c_id = b["right"]

        b["right"] = a_id
        a["left"] = c_id

        # a 现在是 b 的孩子，必须先算 a
        self._update_height(a_id)
        self._update_height(b_id)
        return b_id

    def _rotate_left(self, a_id: int) -> int:
        a = self._nodes[a_id]
        b_id = a["right"]
        b = self._nodes[b_id]
        c_id = b["left"]

        b["left"] = a_id
        a["right"] = c_id

        self._update_height(a_id)
        self._update_height(b_id)
        return b_id

    def _apply_case(self, node_id: int, case: str) -> int:
        node = self._nodes[node_id]
        self._rotations.append({"case": case, "pivot": node_id, "key": node["key"]})
        logger.debug("%s rotation at key %s", case, node["key"])

        if case == "LL":
            return self._rotate_right(node_id)
        if case == "LR":
            node["left"] = self._rotate_left(node["left"])
            return self._rotate_right(node_id)
        if case == "RR":
            return self._rotate_left(node_id)
        if case == "RL":
            node["right"] = self._rotate_right(node["right"])
            return self._rotate_left(node_id)
        raise ValueError(f"unknown rotation case {case!r}")

    # ---------- Insertion ----------

    def insert(self, key) -> Tuple[int, List[int], List[Dict[str, Any]]]:
        """
        返回 (承载该 key 的节点 id, 搜索路径, 旋转记录)。
        路径只包含插入前已存在的节点；key 已存在时树保持不变。
        """
        self._check_key(key)
        self._begin_trace()
        self._root = self._insert(self._root, key)
        return self._touched, list(self._path), list(self._rotations)

    def _insert(self, node_id: Optional[int], key: int) -> int:
        if node_id is None:
            node = self._make_node(key)
            self._count += 1
            self._touched = node["id"]
            return node["id"]

        self._path.append(node_id)
        node = self._nodes[node_id]
        if key > node["key"]:
            node["right"] = self._insert(node["right"], key)
        elif key < node["key"]:
            node["left"] = self._insert(node["left"], key)
        else:
            self._touched = node_id
            return node_id

        self._update_height(node_id)
        bf = self.balance_factor(node_id)
        if -1 <= bf <= 1:
            return node_id

        # 插入时由新 key 与孩子 key 的大小关系推断失衡来自哪一侧
        if bf > 1:
            left_key = self._nodes[node["left"]]["key"]
            return self._apply_case(node_id, "LL" if key < left_key else "LR")
        right_key = self._nodes[node["right"]]["key"]
        return self._apply_case(node_id, "RR" if key > right_key else "RL")

    # ---------- Deletion ----------

    def delete(self, key) -> Tuple[Optional[int], List[int], List[Dict[str, Any]]]:
        """
        返回 (被释放节点 id, 搜索路径, 旋转记录)；未找到时 id 为 None。

        For a node with two children the freed id belongs to its in-order
        predecessor, whose key now lives in the matched node.
        """
        self._check_key(key)
        self._begin_trace()
        self._root = self._delete(self._root, key)
        return self._touched, list(self._path), list(self._rotations)

    def _delete(self, node_id: Optional[int], key: int) -> Optional[int]:
        if node_id is None:
            return None

        self._path.append(node_id)
        node = self._nodes[node_id]
        if key > node["key"]:
            node["right"] = self._delete(node["right"], key)
        elif key < node["key"]:
            node["left"] = self._delete(node["left"], key)
        else:
            if node["left"] is None or node["right"] is None:
                return self._splice(node_id)

            pred_id = node["left"]
            self._path.append(pred_id)
            while self._nodes[pred_id]["right"] is not None:
                pred_id = self._nodes[pred_id]["right"]
                self._path.append(pred_id)
            pred_key = self._nodes[pred_id]["key"]
            node["key"] = pred_key
            node["left"] = self._detach_max(node["left"])

        return self._rebalance(node_id)

    def _detach_max(self, node_id: int) -> Optional[int]:
        # 前驱没有右孩子，直接摘除；沿途祖先照常更新高度并再平衡
        node = self._nodes[node_id]
        if node["right"] is None:
            return self._splice(node_id)
        node["right"] = self._detach_max(node["right"])
        return self._rebalance(node_id)

    def _splice(self, node_id: int) -> Optional[int]:
        node = self._nodes.pop(node_id)
        self._count -= 1
        self._touched = node_id
        return node["left"] if node["right"] is None else node["right"]

    def _rebalance(self, node_id: int) -> int:
        self._update_height(node_id)
        bf = self.balance_factor(node_id)
        if -1 <= bf <= 1:
            return node_id

        node = self._nodes[node_id]
        if bf > 1:
            case = "LL" if self.balance_factor(node["left"]) >= 0 else "LR"
        else:
            case = "RR" if self.balance_factor(node["right"]) <= 0 else "RL"
        return self._apply_case(node_id, case)

    # ---------- Queries ----------

    def search(self, key) -> bool:
        found_id, _ = self.find(key)
        return found_id is not None

    def find(self, key) -> Tuple[Optional[int], List[int]]:
        self._check_key(key)
        path: List[int] = []
        current_id = self._root
        while current_id is not None:
            path.append(current_id)
            node = self._nodes[current_id]
            if key == node["key"]:
                return current_id, path
            current_id = node["left"] if key < node["key"] else node["right"]
        return None, path

    def in_order(self) -> Iterator[int]:
        return self._walk(self._root, "in")

    def pre_order(self) -> Iterator[int]:
        return self._walk(self._root, "pre")

    def post_order(self) -> Iterator[int]:
        return self._walk(self._root, "post")

    def _walk(self, node_id: Optional[int], order: str) -> Iterator[int]:
        if node_id is None:
            return
        node = self._nodes[node_id]
        if order == "pre":
            yield node["key"]
        yield from self._walk(node["left"], order)
        if order == "in":
            yield node["key"]
        yield from self._walk(node["right"], order)
        if order == "post":
            yield node["key"]

    def value_of(self, node_id: int):
        node = self._nodes.get(node_id)
        return node["key"] if node else None

    def snapshot(self) -> Dict[str, Any]:
        return {
            "root": self._root,
            "nodes": [
                {
                    "id": node_id,
                    "value": node["key"],
                    "left": node["left"],
                    "right": node["right"],
                    "height": node["height"],
                    "balance": self.balance_factor(node_id),
                }
                for node_id, node in self._nodes.items()
            ],
        }

    def invariant_errors(self) -> List[str]:
        """Walk the whole tree and describe every broken invariant."""
        errors: List[str] = []
        seen = set()

        def check(node_id, low, high):
            if node_id is None:
                return 0
            if node_id in seen:
                errors.append(f"node {node_id} reachable twice")
                return 0
            seen.add(node_id)
            node = self._nodes[node_id]
            key = node["key"]
            if (low is not None and key <= low) or (high is not None and key >= high):
                errors.append(f"key {key} breaks ordering")
            left_h = check(node["left"], low, key)
            right_h = check(node["right"], key, high)
            expected = 1 + max(left_h, right_h)
            if node["height"] != expected:
                errors.append(f"key {key} caches height {node['height']}, expected {expected}")
            if abs(left_h - right_h) > 1:
                errors.append(f"key {key} unbalanced ({left_h - right_h})")
            return expected

        check(self._root, None, None)
        if len(seen) != self._count:
            errors.append(f"count {self._count} but {len(seen)} reachable nodes")
        if len(seen) != len(self._nodes):
            errors.append(f"{len(self._nodes) - len(seen)} orphaned nodes")
        return errors

    # ---------- Internal helpers ----------

    def _begin_trace(self):
        self._path = []
        self._rotations = []
        self._touched = None

    @staticmethod
    def _check_key(key):
        if isinstance(key, bool) or not isinstance(key, int):
            raise TypeError(f"AVL keys must be int, got {type(key).__name__}")

    def _make_node(self, key):
        node_id = next(self._id_iter)
        node = {"id": node_id, "key": key, "left": None, "right": None, "height": 1}
        self._nodes[node_id] = node
        return node
