import pytest

from circqueue.cq_model import CircularQueueModel


def test_fifo_order():
    queue = CircularQueueModel(capacity=3)
    for value in "abc":
        queue.enqueue(value)
    assert queue.is_full()
    assert [queue.dequeue()["value"] for _ in range(3)] == ["a", "b", "c"]
    assert queue.is_empty()


def test_front_and_rear():
    queue = CircularQueueModel(capacity=4)
    queue.enqueue(1)
    queue.enqueue(2)
    assert queue.front() == 1
    assert queue.rear() == 2


def test_indices_wrap_around():
    queue = CircularQueueModel(capacity=3)
    queue.enqueue(1)
    queue.enqueue(2)
    queue.dequeue()
    queue.dequeue()
    assert queue.enqueue(3) == 2
    assert queue.enqueue(4) == 0
    assert queue.enqueue(5) == 1

    assert queue.values() == [3, 4, 5]
    snapshot = queue.snapshot()
    assert snapshot["front"] == 2
    assert snapshot["rear"] == 1
    assert [cell["value"] for cell in snapshot["slots"]] == [4, 5, 3]


def test_full_queue_rejects_enqueue():
    queue = CircularQueueModel(capacity=1)
    queue.enqueue("x")
    with pytest.raises(IndexError):
        queue.enqueue("y")
    assert len(queue) == 1


def test_empty_queue_raises():
    queue = CircularQueueModel(capacity=2)
    for op in (queue.dequeue, queue.front, queue.rear):
        with pytest.raises(IndexError):
            op()


def test_empty_snapshot_has_no_markers():
    queue = CircularQueueModel(capacity=2)
    assert queue.snapshot() == {"slots": [None, None], "front": None, "rear": None}


def test_capacity_from_environment(monkeypatch):
    monkeypatch.setenv("DSV_QUEUE_CAPACITY", "5")
    assert CircularQueueModel().capacity == 5


@pytest.mark.parametrize("capacity", [0, -1])
def test_non_positive_capacity_is_rejected(capacity):
    with pytest.raises(ValueError):
        CircularQueueModel(capacity=capacity)
