import pytest

from linklist.sl_model import LinkedListModel


def test_positional_insert():
    lst = LinkedListModel()
    lst.insert(0, "b")
    lst.insert(0, "a")
    lst.insert(2, "d")
    lst.insert(2, "c")
    assert list(lst) == ["a", "b", "c", "d"]
    assert len(lst) == 4


def test_positional_remove():
    lst = LinkedListModel()
    lst.create_from_iterable([1, 2, 3, 4])

    assert lst.remove(0)["value"] == 1
    assert lst.remove(2)["value"] == 4
    assert lst.remove(1)["value"] == 3
    assert list(lst) == [2]


def test_out_of_range_positions_raise():
    lst = LinkedListModel()
    with pytest.raises(IndexError):
        lst.insert(1, "x")
    with pytest.raises(IndexError):
        lst.remove(0)
    lst.insert(0, "x")
    with pytest.raises(IndexError):
        lst.get(1)
    with pytest.raises(IndexError):
        lst.insert(-1, "y")


def test_get_and_find():
    lst = LinkedListModel()
    lst.create_from_iterable([5, 6, 7, 6])
    assert lst.get(2) == 7
    assert lst.find(6) == 1
    assert lst.find(42) == -1


def test_snapshot_follows_links():
    lst = LinkedListModel()
    lst.create_from_iterable(["x", "y"])
    lst.insert(1, "m")
    assert [node["value"] for node in lst.snapshot()] == ["x", "m", "y"]
