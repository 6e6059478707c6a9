import time

import pytest

pytest.importorskip("PyQt5.QtWidgets")

from PyQt5.QtTest import QTest  # noqa: E402

from avl.avl_ctrl import AVLController, avl_badge  # noqa: E402
from avl.avl_model import AVLModel  # noqa: E402
from circqueue.cq_ctrl import QueueController  # noqa: E402
from core.tree_view import TreeView  # noqa: E402
from stack.st_ctrl import StackController  # noqa: E402


def wait_idle(view, timeout=5.0):
    deadline = time.monotonic() + timeout
    while view.is_animating and time.monotonic() < deadline:
        QTest.qWait(20)
    assert not view.is_animating


def three_node_snapshot():
    tree = AVLModel()
    tree.create_from_iterable([20, 10, 30])
    return tree, tree.snapshot()


def test_layout_places_children_below_and_apart(qapp, global_ctrl):
    view = TreeView(global_ctrl)
    tree, snapshot = three_node_snapshot()
    positions = view.compute_layout(snapshot)

    root = positions[tree.find(20)[0]]
    left = positions[tree.find(10)[0]]
    right = positions[tree.find(30)[0]]

    assert root.x() == -35
    assert left.y() == right.y() == root.y() + TreeView.v_gap
    assert left.x() < root.x() < right.x()
    assert view.compute_layout({"root": None, "nodes": []}) == {}


def test_show_snapshot_builds_nodes_edges_and_badges(qapp, global_ctrl):
    view = TreeView(global_ctrl, badge_formatter=avl_badge)
    tree, snapshot = three_node_snapshot()

    view.show_snapshot(snapshot)

    assert len(view.node_items) == 3
    assert len(view.edge_items) == 2
    root_item = view.node_items[snapshot["root"]]
    assert root_item.value_text == "20"
    assert root_item.badge_text == "h2  bf +0"
    assert view.level_order(snapshot)[0] == snapshot["root"]


def test_avl_controller_reports_rotation(qapp, global_ctrl):
    ctrl = AVLController(global_ctrl)
    for key in (10, 20, 30):
        ctrl.insert_value_edit.setText(str(key))
        ctrl._on_insert()
        wait_idle(ctrl.view)

    assert ctrl.model.root_key == 20
    assert "RR at 10" in ctrl.status_label.text()
    assert set(ctrl.view.node_items) == {info["id"] for info in ctrl.model.snapshot()["nodes"]}
    assert len(ctrl.view.edge_items) == 2


def test_avl_controller_delete_and_traverse(qapp, global_ctrl):
    ctrl = AVLController(global_ctrl)
    ctrl.build_from([50, 30, 70, 20])
    wait_idle(ctrl.view)

    ctrl.delete_value_edit.setText("70")
    ctrl._on_delete()
    wait_idle(ctrl.view)

    assert list(ctrl.model.in_order()) == [20, 30, 50]
    assert "LL at 50" in ctrl.status_label.text()
    assert len(ctrl.view.node_items) == 3

    ctrl._on_traverse("pre")
    assert ctrl.status_label.text() == "pre-order: [30, 20, 50]"


def test_avl_controller_reports_missing_find(qapp, global_ctrl):
    ctrl = AVLController(global_ctrl)
    ctrl.build_from([2, 1, 3])
    wait_idle(ctrl.view)

    ctrl.find_value_edit.setText("9")
    ctrl._on_find()
    wait_idle(ctrl.view)

    assert ctrl.status_label.text() == "未找到目标值。"


def test_stack_controller_grows(qapp, global_ctrl):
    ctrl = StackController(global_ctrl)
    assert ctrl.model.capacity == 4
    for value in range(4):
        ctrl.push_input.setText(str(value))
        ctrl._on_push()
        wait_idle(ctrl.view)

    ctrl.push_input.setText("4")
    ctrl._on_push()
    wait_idle(ctrl.view)

    assert ctrl.status_label.text() == "capacity 4 → 8"
    snapshot = ctrl.view_snapshot()
    assert len(snapshot["slots"]) == 8
    assert snapshot["markers"] == {4: "top"}
    assert len(ctrl.view.slot_items) == 8


def test_queue_controller_markers(qapp, global_ctrl):
    ctrl = QueueController(global_ctrl)
    ctrl.enqueue_input.setText("a")
    ctrl._on_enqueue()
    wait_idle(ctrl.view)
    assert ctrl.view_snapshot()["markers"] == {0: "front/rear"}

    ctrl.enqueue_input.setText("b")
    ctrl._on_enqueue()
    wait_idle(ctrl.view)
    ctrl._on_dequeue()
    wait_idle(ctrl.view)

    assert ctrl.model.values() == ["b"]
    assert ctrl.view_snapshot()["markers"] == {1: "front/rear"}
    assert ctrl.status_label.text() == "dequeued a"


def test_main_window_switches_structures(qapp):
    main = pytest.importorskip("main")
    window = main.MainWindow()

    assert window.active_name == "AVL Tree"
    window.ds_combo.setCurrentText("Stack")
    assert window.active_name == "Stack"
    assert window.controls_stack.currentIndex() == window.controller("Stack").panel_index
