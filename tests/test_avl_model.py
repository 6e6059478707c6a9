import math

import pytest

from avl.avl_model import AVLModel


def build(*keys):
    tree = AVLModel()
    for key in keys:
        tree.insert(key)
    return tree


def node(tree, key):
    node_id, _ = tree.find(key)
    assert node_id is not None
    return tree._nodes[node_id]


def cases(rotations):
    return [r["case"] for r in rotations]


# ---------- empty tree ----------

def test_new_tree_is_empty():
    tree = AVLModel()
    assert len(tree) == 0
    assert tree.root_key is None
    assert tree.tree_height == 0
    assert list(tree.in_order()) == []
    assert list(tree.pre_order()) == []
    assert list(tree.post_order()) == []
    assert tree.search(1) is False


def test_delete_on_empty_tree_is_noop():
    tree = AVLModel()
    removed_id, path, rotations = tree.delete(5)
    assert removed_id is None
    assert path == []
    assert rotations == []
    assert len(tree) == 0


def test_height_and_balance_of_absent_node_are_zero():
    tree = AVLModel()
    assert tree.height(None) == 0
    assert tree.balance_factor(None) == 0


# ---------- insertion ----------

def test_single_insert_creates_leaf():
    tree = build(7)
    assert len(tree) == 1
    assert tree.root_key == 7
    assert node(tree, 7)["height"] == 1


def test_rr_case_rotates_left_at_root():
    tree = AVLModel()
    tree.insert(10)
    tree.insert(20)
    _, _, rotations = tree.insert(30)

    assert cases(rotations) == ["RR"]
    assert rotations[0]["key"] == 10
    assert tree.root_key == 20
    assert list(tree.in_order()) == [10, 20, 30]
    assert node(tree, 10)["height"] == 1
    assert node(tree, 30)["height"] == 1
    assert node(tree, 20)["height"] == 2


def test_lr_case_double_rotation():
    tree = AVLModel()
    tree.insert(30)
    tree.insert(10)
    _, _, rotations = tree.insert(20)

    assert cases(rotations) == ["LR"]
    assert tree.root_key == 20
    assert list(tree.in_order()) == [10, 20, 30]
    assert list(tree.pre_order()) == [20, 10, 30]


def test_ll_case_rotates_right_at_root():
    tree = AVLModel()
    tree.insert(30)
    tree.insert(20)
    _, _, rotations = tree.insert(10)

    assert cases(rotations) == ["LL"]
    assert tree.root_key == 20
    assert tree.tree_height == 2


def test_rl_case_double_rotation():
    tree = AVLModel()
    tree.insert(10)
    tree.insert(30)
    _, _, rotations = tree.insert(20)

    assert cases(rotations) == ["RL"]
    assert tree.root_key == 20
    assert list(tree.post_order()) == [10, 30, 20]


def test_rotation_below_root_keeps_root():
    tree = build(50, 30, 70, 60, 80)
    _, _, rotations = tree.insert(90)
    # 50 的右子树过高，在根处做 RR
    assert cases(rotations) == ["RR"]
    assert tree.root_key == 70
    assert tree.invariant_errors() == []

    tree = build(50, 30, 70, 20, 40, 60, 80, 10)
    _, _, rotations = tree.insert(5)
    assert cases(rotations) == ["LL"]
    assert rotations[0]["key"] == 20
    assert tree.root_key == 50
    assert tree.invariant_errors() == []


def test_insert_returns_path_and_new_id():
    tree = build(20, 10, 30)
    root_id, _ = tree.find(20)
    left_id, _ = tree.find(10)

    new_id, path, _ = tree.insert(5)
    assert path == [root_id, left_id]
    assert tree.value_of(new_id) == 5


def test_duplicate_insert_is_silent_noop():
    tree = build(50, 30, 70, 20, 40)
    before = tree.snapshot()

    existing_id, path, rotations = tree.insert(30)

    assert tree.value_of(existing_id) == 30
    assert existing_id in path
    assert rotations == []
    assert tree.snapshot() == before
    assert len(tree) == 5


def test_sequential_inserts_stay_logarithmic():
    tree = AVLModel()
    n = 1000
    for key in range(n):
        tree.insert(key)

    assert len(tree) == n
    assert tree.tree_height <= 1.45 * math.log2(n + 2)
    assert tree.invariant_errors() == []
    assert list(tree) == list(range(n))


@pytest.mark.parametrize("bad_key", ["10", 1.5, None, True])
def test_non_int_keys_are_rejected(bad_key):
    tree = AVLModel()
    with pytest.raises(TypeError):
        tree.insert(bad_key)
    with pytest.raises(TypeError):
        tree.delete(bad_key)
    assert len(tree) == 0


@pytest.mark.parametrize("bad_key", ["10", 1.5, None, True])
def test_non_int_lookups_are_rejected_on_any_tree(bad_key):
    for tree in (AVLModel(), build(5, 3, 8)):
        with pytest.raises(TypeError):
            tree.search(bad_key)
        with pytest.raises(TypeError):
            tree.find(bad_key)
        with pytest.raises(TypeError):
            bad_key in tree


# ---------- deletion ----------

def test_delete_root_with_two_children_uses_predecessor():
    tree = build(50, 30, 70, 20, 40, 60, 80)
    root_id, _ = tree.find(50)
    pred_id, _ = tree.find(40)

    removed_id, path, rotations = tree.delete(50)

    assert removed_id == pred_id
    assert path[0] == root_id
    assert tree.root_key == 40
    assert tree._root == root_id  # 根节点保留，只是 key 被前驱覆盖
    assert list(tree.in_order()) == [20, 30, 40, 60, 70, 80]
    assert rotations == []
    assert tree.invariant_errors() == []
    assert len(tree) == 6


def test_delete_leaf_and_single_child():
    tree = build(50, 30, 70, 20)

    tree.delete(20)
    assert list(tree.in_order()) == [30, 50, 70]

    tree.insert(60)
    tree.delete(70)
    assert list(tree.in_order()) == [30, 50, 60]
    assert node(tree, 60)["height"] == 1
    assert tree.invariant_errors() == []


def test_delete_missing_key_leaves_tree_unchanged():
    tree = build(50, 30, 70, 20, 40, 60, 80)
    before = tree.snapshot()

    removed_id, path, rotations = tree.delete(65)

    assert removed_id is None
    assert path  # 仍然记录了查找路径
    assert rotations == []
    assert tree.snapshot() == before
    assert len(tree) == 7


def test_delete_last_key_empties_tree():
    tree = build(1)
    tree.delete(1)
    assert len(tree) == 0
    assert tree.root_key is None
    assert tree.search(1) is False


@pytest.mark.parametrize(
    "keys, victim, expected_case, expected_pre_order",
    [
        # 左孩子左重：单旋
        ([20, 10, 30, 5], 30, "LL", [10, 5, 20]),
        # 左孩子平衡：同样单旋即可
        ([20, 10, 30, 5, 15], 30, "LL", [10, 5, 20, 15]),
        # 左孩子右重：双旋
        ([20, 10, 30, 15], 30, "LR", [15, 10, 20]),
        ([20, 10, 30, 40], 10, "RR", [30, 20, 40]),
        ([20, 10, 30, 25, 40], 10, "RR", [30, 20, 25, 40]),
        ([20, 10, 30, 25], 10, "RL", [25, 20, 30]),
    ],
)
def test_delete_rebalances_from_child_balance(keys, victim, expected_case, expected_pre_order):
    tree = build(*keys)

    _, _, rotations = tree.delete(victim)

    assert cases(rotations) == [expected_case]
    assert list(tree.pre_order()) == expected_pre_order
    assert tree.invariant_errors() == []


def test_two_child_delete_rebalances_inside_left_subtree():
    # 前驱所在路径上的节点也要重新计算高度并再平衡
    tree = build(50, 30, 70, 20, 40, 60, 80, 10, 35, 45, 65, 42)
    tree.delete(50)

    assert tree.root_key == 45
    assert tree.invariant_errors() == []
    assert list(tree.in_order()) == [10, 20, 30, 35, 40, 42, 45, 60, 65, 70, 80]


def test_delete_can_rotate_more_than_one_ancestor():
    tree = build(8, 5, 11, 3, 7, 10, 12, 2, 4, 6, 9, 1)
    _, _, rotations = tree.delete(12)

    assert len(rotations) == 2
    assert tree.invariant_errors() == []
    assert list(tree.in_order()) == [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11]


# ---------- queries ----------

def test_search_round_trip():
    tree = build(8, 3, 10, 1, 6, 14)
    assert tree.search(6)
    assert 14 in tree
    tree.delete(6)
    assert not tree.search(6)
    assert 6 not in tree


def test_traversal_orders():
    tree = build(50, 30, 70, 20, 40, 60, 80)
    assert list(tree.in_order()) == [20, 30, 40, 50, 60, 70, 80]
    assert list(tree.pre_order()) == [50, 30, 20, 40, 70, 60, 80]
    assert list(tree.post_order()) == [20, 40, 30, 60, 80, 70, 50]


def test_traversals_are_lazy_and_restartable():
    tree = build(2, 1, 3)
    walk = tree.in_order()
    assert next(walk) == 1
    assert list(tree.in_order()) == [1, 2, 3]
    assert list(walk) == [2, 3]


def test_snapshot_reports_heights_and_balance():
    tree = build(20, 10, 30, 5)
    nodes = {info["value"]: info for info in tree.snapshot()["nodes"]}

    assert nodes[20]["height"] == 3
    assert nodes[20]["balance"] == 1
    assert nodes[10]["balance"] == 1
    assert nodes[5]["balance"] == 0
    assert tree.snapshot()["root"] == tree.find(20)[0]


def test_invariant_errors_detects_stale_height():
    tree = build(2, 1, 3)
    node(tree, 1)["height"] = 4
    assert tree.invariant_errors()


def test_clear_and_create_from_iterable():
    tree = AVLModel()
    tree.create_from_iterable([5, 1, 9, 1, 5])
    assert list(tree) == [1, 5, 9]
    assert len(tree) == 3

    tree.clear()
    assert len(tree) == 0
    assert tree.snapshot() == {"root": None, "nodes": []}
