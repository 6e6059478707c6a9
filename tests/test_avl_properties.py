from hypothesis import given, settings, strategies as st

from avl.avl_model import AVLModel

keys = st.integers(min_value=-60, max_value=60)
operations = st.lists(st.tuples(st.sampled_from(["insert", "delete"]), keys), max_size=200)


def apply(ops):
    tree = AVLModel()
    present = set()
    for op, key in ops:
        if op == "insert":
            tree.insert(key)
            present.add(key)
        else:
            tree.delete(key)
            present.discard(key)
    return tree, present


@settings(max_examples=200)
@given(operations)
def test_invariants_hold_after_any_sequence(ops):
    tree, present = apply(ops)

    assert tree.invariant_errors() == []
    for info in tree.snapshot()["nodes"]:
        assert -1 <= info["balance"] <= 1


@given(operations)
def test_in_order_is_sorted_set_of_present_keys(ops):
    tree, present = apply(ops)

    walk = list(tree.in_order())
    assert walk == sorted(present)
    assert len(tree) == len(present)


@given(st.lists(keys, max_size=60), keys)
def test_insert_is_idempotent(initial, key):
    once = AVLModel()
    twice = AVLModel()
    for k in initial + [key]:
        once.insert(k)
    for k in initial + [key, key]:
        twice.insert(k)

    assert list(once.pre_order()) == list(twice.pre_order())
    assert list(once.in_order()) == list(twice.in_order())


@given(st.lists(keys, min_size=1, max_size=80), st.data())
def test_search_round_trip(initial, data):
    tree, present = apply([("insert", k) for k in initial])
    victim = data.draw(st.sampled_from(sorted(present)))

    assert all(tree.search(k) for k in present)
    tree.delete(victim)
    assert not tree.search(victim)
    assert tree.invariant_errors() == []


@given(st.lists(keys, max_size=80))
def test_traversals_visit_every_key_once(initial):
    tree, present = apply([("insert", k) for k in initial])

    assert sorted(tree.pre_order()) == sorted(present)
    assert sorted(tree.post_order()) == sorted(present)
    if present:
        assert next(tree.pre_order()) == tree.root_key
        assert list(tree.post_order())[-1] == tree.root_key
