import pytest

from stack.st_model import StackModel


def test_push_pop_is_lifo():
    stack = StackModel(capacity=2)
    for value in (1, 2, 3):
        stack.push(value)
    assert [stack.pop()["value"] for _ in range(3)] == [3, 2, 1]
    assert stack.is_empty()


def test_capacity_doubles_when_full():
    stack = StackModel(capacity=2)
    stack.push("a")
    stack.push("b")
    assert stack.capacity == 2

    stack.push("c")
    assert stack.capacity == 4
    stack.push("d")
    stack.push("e")
    assert stack.capacity == 8
    assert [item["value"] for item in stack.snapshot()] == ["a", "b", "c", "d", "e"]


def test_peek_does_not_remove():
    stack = StackModel()
    stack.push(7)
    assert stack.peek()["value"] == 7
    assert len(stack) == 1


def test_empty_stack_raises():
    stack = StackModel()
    with pytest.raises(IndexError):
        stack.pop()
    with pytest.raises(IndexError):
        stack.peek()


def test_items_keep_unique_ids():
    stack = StackModel()
    first = stack.push(1)
    stack.pop()
    second = stack.push(1)
    assert first["id"] != second["id"]


def test_clear_restores_initial_capacity():
    stack = StackModel(capacity=1)
    for value in range(5):
        stack.push(value)
    stack.clear()
    assert stack.capacity == 1
    assert len(stack) == 0


def test_default_capacity_comes_from_environment(monkeypatch):
    monkeypatch.setenv("DSV_STACK_CAPACITY", "3")
    assert StackModel().capacity == 3


@pytest.mark.parametrize("capacity", [0, -1])
def test_non_positive_capacity_is_rejected(capacity):
    with pytest.raises(ValueError):
        StackModel(capacity=capacity)
