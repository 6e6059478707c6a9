from hypothesis import given, strategies as st

from bst.bst_model import BSTModel


def build(*values):
    tree = BSTModel()
    for value in values:
        tree.insert(value)
    return tree


def test_insert_does_not_rebalance():
    tree = build(1, 2, 3, 4)
    assert tree.tree_height == 4
    assert list(tree.pre_order()) == [1, 2, 3, 4]


def test_duplicate_insert_returns_existing_node():
    tree = build(5, 3)
    first_id, _ = tree.find(3)
    node_id, path = tree.insert(3)
    assert node_id == first_id
    assert node_id in path
    assert len(tree) == 2


def test_count_tracks_inserts_and_deletes():
    tree = build(50, 30, 70, 20, 40)
    assert len(tree) == 5
    tree.delete(30)
    tree.delete(999)
    assert len(tree) == 4
    assert tree.length == 4


def test_two_child_delete_uses_successor():
    tree = build(50, 30, 70, 60, 80, 65)
    root_id, _ = tree.find(50)
    succ_id, _ = tree.find(60)

    removed_id, path = tree.delete(50)

    # 后继的值上移到原节点，释放的是后继节点
    assert removed_id == succ_id
    assert path[-1] == succ_id
    assert tree.snapshot()["root"] == root_id
    assert tree.value_of(root_id) == 60
    assert len(tree) == 5
    assert list(tree.in_order()) == [30, 60, 65, 70, 80]


def test_successor_that_is_direct_right_child():
    tree = build(50, 30, 70, 80)
    tree.delete(50)
    assert list(tree.pre_order()) == [70, 30, 80]


def test_delete_missing_value_returns_none():
    tree = build(2, 1, 3)
    removed_id, path = tree.delete(4)
    assert removed_id is None
    assert len(path) == 2
    assert list(tree) == [1, 2, 3]


def test_traversal_orders():
    tree = build(50, 30, 70, 20, 40, 60, 80)
    assert list(tree.in_order()) == [20, 30, 40, 50, 60, 70, 80]
    assert list(tree.pre_order()) == [50, 30, 20, 40, 70, 60, 80]
    assert list(tree.post_order()) == [20, 40, 30, 60, 80, 70, 50]


def test_empty_tree_queries():
    tree = BSTModel()
    assert not tree.search(1)
    assert list(tree.post_order()) == []
    assert tree.delete(1) == (None, [])


@given(st.lists(st.integers(-40, 40)), st.lists(st.integers(-40, 40)))
def test_matches_sorted_set(inserted, deleted):
    tree = BSTModel()
    expected = set()
    for value in inserted:
        tree.insert(value)
        expected.add(value)
    for value in deleted:
        tree.delete(value)
        expected.discard(value)

    assert list(tree.in_order()) == sorted(expected)
    assert len(tree) == len(expected)
    assert all(tree.search(value) for value in expected)


def test_degenerate_chain_does_not_recurse():
    tree = BSTModel()
    for value in range(2000):
        tree.insert(value)
    tree.delete(1000)
    assert tree.tree_height == 1999
    assert len(tree) == 1999
    assert tree.search(1999)
